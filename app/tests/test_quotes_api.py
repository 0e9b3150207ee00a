import pytest


@pytest.mark.api
class TestQuoteEndpoints:

    @pytest.mark.asyncio
    async def test_calc_graphic_quote(self, test_client, graphic_request_data):
        response = await test_client.post("/quotes/calc", json=graphic_request_data)

        assert response.status_code == 200
        data = response.json()
        assert data["monthly_price"] == 499
        assert data["breakdown"]["base_price"] == 499
        assert data["includes"] == [
            "2.5 hours design work/day",
            "Up to 30 social-style designs/month",
        ]
        assert data["currency"] == "USD"

    @pytest.mark.asyncio
    async def test_calc_video_quote(self, test_client, video_request_data):
        response = await test_client.post("/quotes/calc", json=video_request_data)

        assert response.status_code == 200
        data = response.json()
        assert data["monthly_price"] == 899
        assert data["breakdown"]["volume_adjustment"] == 200
        assert data["estimated_hours"] == 30.0

    @pytest.mark.asyncio
    async def test_calc_bundle_quote(self, test_client, bundle_request_data):
        response = await test_client.post("/quotes/calc", json=bundle_request_data)

        assert response.status_code == 200
        data = response.json()
        assert data["monthly_price"] == 1258
        assert data["breakdown"]["bundle_discount"] == -140

    @pytest.mark.asyncio
    async def test_calc_breakdown_sums(self, test_client):
        response = await test_client.post("/quotes/calc", json={
            "service_type": "graphic",
            "graphic": {"social_posts": "45", "brochures": "2", "bilingual": "yes"},
        })

        data = response.json()
        assert sum(data["breakdown"].values()) == data["monthly_price"]

    @pytest.mark.asyncio
    async def test_incomplete_request_returns_zero(self, test_client):
        response = await test_client.post("/quotes/calc", json={"service_type": ""})

        assert response.status_code == 200
        data = response.json()
        assert data["monthly_price"] == 0
        assert data["includes"] == []

    @pytest.mark.asyncio
    async def test_non_object_body_rejected(self, test_client):
        response = await test_client.post("/quotes/calc", json=[1, 2, 3])

        assert response.status_code == 422

    @pytest.mark.asyncio
    @pytest.mark.parametrize("band", ["11-20", {"min": 8, "max": 5}, {"min": -2, "max": 4}])
    async def test_calc_ignores_malformed_band(self, test_client, band):
        response = await test_client.post("/quotes/calc", json={
            "service_type": "video",
            "video": {"count_band": band},
        })

        assert response.status_code == 200
        assert response.json()["monthly_price"] == 699

    @pytest.mark.asyncio
    async def test_calc_malformed_section_is_incomplete(self, test_client):
        response = await test_client.post("/quotes/calc", json={
            "service_type": "graphic",
            "graphic": "lots",
        })

        assert response.status_code == 200
        assert response.json()["monthly_price"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("social_posts", ["1e28", 10 ** 30])
    async def test_calc_oversized_count(self, test_client, social_posts):
        response = await test_client.post("/quotes/calc", json={
            "service_type": "graphic",
            "graphic": {"social_posts": social_posts},
        })

        assert response.status_code == 200
        data = response.json()
        assert data["monthly_price"] == 150049
        assert sum(data["breakdown"].values()) == data["monthly_price"]

    @pytest.mark.asyncio
    async def test_calc_daily_hours_commitment(self, test_client):
        response = await test_client.post("/quotes/calc", json={
            "service_type": "graphic",
            "graphic": {"social_posts": 10, "daily_hours": "5_plus_h"},
        })

        data = response.json()
        assert data["monthly_price"] == 899
        assert data["breakdown"]["complexity_adjustment"] == 400
        assert data["includes"][0] == "5+ hours design work/day"

    @pytest.mark.asyncio
    async def test_pricing_table(self, test_client):
        response = await test_client.get("/quotes/pricing")

        assert response.status_code == 200
        data = response.json()
        assert data["graphic"]["base_price"] == 499
        assert data["video"]["base_hours"] == 20
        assert data["bundle_discount_rate"] == 0.1
        assert data["video_count_bands"][-1] == {"min": 13, "max": None}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("service_type,expected", [
        ("graphic", 499),
        ("video", 699),
        ("both", 1078),
    ])
    async def test_base_price(self, test_client, service_type, expected):
        response = await test_client.get(f"/quotes/base-price/{service_type}")

        assert response.status_code == 200
        assert response.json()["base_price"] == expected

    @pytest.mark.asyncio
    async def test_base_price_unknown_category(self, test_client):
        response = await test_client.get("/quotes/base-price/photography")

        assert response.status_code == 422


@pytest.mark.api
class TestMonitoringEndpoints:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["pricing_table"] == "default"

    @pytest.mark.asyncio
    async def test_metrics_count_quotes(self, test_client, graphic_request_data):
        await test_client.post("/quotes/calc", json=graphic_request_data)
        await test_client.post("/quotes/calc", json={})

        response = await test_client.get("/metrics")

        assert response.status_code == 200
        assert 'quotes_computed_total{service_type="graphic"}' in response.text
        assert "quotes_incomplete_total" in response.text
        assert "http_requests_total" in response.text

    @pytest.mark.asyncio
    async def test_metrics_labelled_by_route_template(self, test_client):
        await test_client.get("/quotes/base-price/both")
        await test_client.get("/no-such-path-xyz")
        await test_client.get("/no-such-path-abc/123")

        response = await test_client.get("/metrics")

        assert 'endpoint="/quotes/base-price/{service_type}"' in response.text
        assert 'endpoint="/quotes/base-price/both"' not in response.text
        assert 'endpoint="unmatched"' in response.text
        assert "no-such-path" not in response.text

    @pytest.mark.asyncio
    async def test_root(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

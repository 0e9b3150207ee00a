"""Monthly retainer pricing for graphic design and video editing.

``compute_quote`` is a pure function of the answers and the pricing table:
no I/O, no shared mutable state. Each selected category is priced from its
base plan, hours above the included allotment are billed at the overage rate,
and surcharges/add-ons are layered on top. Picking both categories prices each
branch on its own and takes the bundle discount off the combined subtotal.

Every breakdown component is rounded to a whole currency unit exactly once,
and the monthly price is the sum of the rounded components.
"""
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError

from app.core.enums import EditTier, GraphicItem, ServiceType, VideoAddOn
from app.schemas.quote import (
    GraphicAnswers,
    QuoteBreakdown,
    QuoteRequest,
    QuoteResult,
    VideoAnswers,
)
from app.services.pricing_table import GraphicRates, PricingTable, VideoRates, get_pricing_table

logger = logging.getLogger(__name__)

_UNIT = Decimal("1")
_HOURS_PRECISION = Decimal("0.01")


def _dec(value: Union[int, float]) -> Decimal:
    return Decimal(str(value))


def _round(amount: Decimal) -> int:
    # quantize needs a digit of precision per integer digit of the amount
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 2)
        return int(amount.quantize(_UNIT, rounding=ROUND_HALF_UP))


def _fmt_hours(hours: Decimal) -> str:
    return f"{float(hours):g}"


@dataclass
class _BranchQuote:
    base_price: int
    includes: List[str]
    hours: Decimal
    volume_adjustment: int = 0
    complexity_adjustment: int = 0
    bilingual_surcharge: int = 0
    add_ons: int = 0

    @property
    def subtotal(self) -> int:
        return (
            self.base_price
            + self.volume_adjustment
            + self.complexity_adjustment
            + self.bilingual_surcharge
            + self.add_ons
        )


def _price_graphic(answers: GraphicAnswers, rates: GraphicRates) -> _BranchQuote:
    counts = answers.item_counts()
    required_hours = sum(
        (_dec(rates.hour_weights[item]) * count for item, count in counts.items()),
        Decimal("0"),
    )
    daily_hours = answers.daily_hours
    base_hours = _dec(rates.base_hours) + _dec(rates.daily_hours_extra_hours.get(daily_hours, 0.0))

    branch = _BranchQuote(
        base_price=_round(_dec(rates.base_price)),
        includes=list(rates.base_includes),
        hours=max(base_hours, required_hours),
    )

    commitment = rates.daily_hours_includes.get(daily_hours)
    if commitment:
        if branch.includes:
            branch.includes[0] = commitment
        else:
            branch.includes.append(commitment)
    branch.complexity_adjustment = _round(_dec(rates.daily_hours_surcharges.get(daily_hours, 0.0)))

    if required_hours > base_hours:
        excess = required_hours - base_hours
        branch.volume_adjustment = _round(excess * _dec(rates.overage_rate))
        branch.includes.append(
            rates.overage_include.format(items=answers.total_items, hours=_fmt_hours(required_hours))
        )

    for item in GraphicItem:
        template = rates.item_includes.get(item)
        if template and counts[item] > 0:
            branch.includes.append(template.format(count=counts[item]))

    # applied to the running total, not the base alone
    if answers.bilingual:
        branch.bilingual_surcharge = _round(_dec(branch.subtotal) * _dec(rates.bilingual_rate))
        branch.hours += branch.hours * _dec(rates.bilingual_hours_rate)
        branch.includes.append(rates.bilingual_include)

    return branch


def _price_video(answers: VideoAnswers, rates: VideoRates) -> _BranchQuote:
    counts = answers.tier_counts()
    video_count = answers.video_count
    required_hours = sum(
        (_dec(rates.hour_weights[tier]) * count for tier, count in counts.items()),
        Decimal("0"),
    )
    base_hours = _dec(rates.base_hours)

    branch = _BranchQuote(
        base_price=_round(_dec(rates.base_price)),
        includes=list(rates.base_includes),
        hours=max(base_hours, required_hours),
    )

    if required_hours > base_hours:
        excess = required_hours - base_hours
        branch.volume_adjustment = _round(excess * _dec(rates.overage_rate))
        branch.includes.append(
            rates.overage_include.format(items=video_count, hours=_fmt_hours(required_hours))
        )

    for tier in EditTier:
        template = rates.tier_includes.get(tier)
        if template and counts[tier] > 0:
            branch.includes.append(template.format(count=counts[tier]))

    complexity = _dec(rates.quality_surcharges.get(answers.quality, 0.0))
    quality_include = rates.quality_includes.get(answers.quality)
    if quality_include:
        branch.includes.append(quality_include)

    if answers.duration.is_long_form:
        complexity += _dec(rates.long_form_surcharge)
        branch.includes.append(rates.long_form_include)
    branch.complexity_adjustment = _round(complexity)

    # add-on hours are priced by the add-on fee, never as overage
    add_on_total = Decimal("0")
    for add_on in VideoAddOn:
        rule = rates.add_ons.get(add_on)
        if rule is None or not getattr(answers, add_on.value):
            continue
        add_on_total += _dec(rule.flat_price) + _dec(rule.price_per_video) * video_count
        branch.hours += _dec(rule.hours_per_video) * video_count
        branch.includes.append(rule.description)
    branch.add_ons = _round(add_on_total)

    return branch


def _normalize(request: Any) -> Optional[QuoteRequest]:
    if isinstance(request, QuoteRequest):
        return request
    if isinstance(request, Mapping):
        try:
            return QuoteRequest.model_validate(dict(request))
        except ValidationError as e:
            logger.debug(f"Quote answers could not be normalized: {e.error_count()} error(s)")
            return None
    return None


def missing_sections(request: QuoteRequest) -> List[str]:
    """Name the parts of a request that must be filled in before it can be priced."""
    if request.service_type is None:
        return ["service_type"]
    missing = []
    if request.service_type.includes_graphic and request.graphic is None:
        missing.append("graphic")
    if request.service_type.includes_video and request.video is None:
        missing.append("video")
    return missing


def compute_quote(
    request: Union[QuoteRequest, Mapping[str, Any], None],
    table: Optional[PricingTable] = None,
) -> QuoteResult:
    """Price a questionnaire answer set.

    Incomplete answers (no category, or the selected category's section
    absent) produce the zero-valued result instead of an error.
    """
    table = table or get_pricing_table()

    quote_request = _normalize(request)
    if quote_request is None:
        return QuoteResult.zero(table.currency)

    missing = missing_sections(quote_request)
    if missing:
        logger.debug(f"Incomplete quote request, missing: {', '.join(missing)}")
        return QuoteResult.zero(table.currency)

    service_type = quote_request.service_type
    branches: List[_BranchQuote] = []
    if service_type.includes_graphic:
        branches.append(_price_graphic(quote_request.graphic, table.graphic))
    if service_type.includes_video:
        branches.append(_price_video(quote_request.video, table.video))

    includes: List[str] = []
    for branch in branches:
        includes.extend(branch.includes)

    bundle_discount = 0
    if service_type is ServiceType.BOTH:
        subtotal = sum(branch.subtotal for branch in branches)
        rate = _dec(table.bundle_discount_rate)
        # never rounds down to nothing
        bundle_discount = -max(1, _round(_dec(subtotal) * rate))
        includes.append(table.bundle_include.format(percent=f"{float(rate * 100):g}"))

    breakdown = QuoteBreakdown(
        base_price=sum(branch.base_price for branch in branches),
        volume_adjustment=sum(branch.volume_adjustment for branch in branches),
        complexity_adjustment=sum(branch.complexity_adjustment for branch in branches),
        bilingual_surcharge=sum(branch.bilingual_surcharge for branch in branches),
        add_ons=sum(branch.add_ons for branch in branches),
        bundle_discount=bundle_discount,
    )
    hours = sum((branch.hours for branch in branches), Decimal("0"))

    return QuoteResult(
        monthly_price=breakdown.total,
        breakdown=breakdown,
        includes=includes,
        estimated_hours=float(hours.quantize(_HOURS_PRECISION, rounding=ROUND_HALF_UP)),
        currency=table.currency,
    )


def base_price_for(
    service_type: Union[ServiceType, str, None],
    table: Optional[PricingTable] = None,
) -> int:
    """Monthly floor for a category: the price of a quote with no items."""
    request = {
        "service_type": service_type,
        "graphic": GraphicAnswers(),
        "video": VideoAnswers(),
    }
    return compute_quote(request, table).monthly_price

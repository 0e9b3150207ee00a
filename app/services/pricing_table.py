"""Pricing constants the quote engine is parameterized by.

Every number the engine uses (base prices, included hours, per-item hour
weights, overage rates, surcharges, add-on fees, bundle discount) lives in a
``PricingTable``. The built-in ``DEFAULT_PRICING_TABLE`` is the canonical rule
set; deployments can point ``PRICING_TABLE_PATH`` at a JSON document with the
same shape to override it.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from app.core.config import settings
from app.core.enums import DailyHours, EditTier, GraphicItem, VideoAddOn
from app.schemas.quote import CountRange

logger = logging.getLogger(__name__)


class PricingTableError(Exception):
    """Raised when a pricing table file cannot be read or validated."""


class AddOnRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    flat_price: float = Field(default=0.0, ge=0)
    price_per_video: float = Field(default=0.0, ge=0)
    hours_per_video: float = Field(default=0.0, ge=0)
    description: str


class GraphicRates(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_price: float = Field(default=499.0, gt=0)
    base_hours: float = Field(default=30.0, ge=0)
    overage_rate: float = Field(default=15.0, ge=0)
    hour_weights: Dict[GraphicItem, float] = Field(default_factory=lambda: {
        GraphicItem.SOCIAL_POSTS: 1.0,
        GraphicItem.BANNERS: 1.5,
        GraphicItem.BROCHURES: 5.0,
        GraphicItem.ILLUSTRATIONS: 3.0,
        GraphicItem.PACKAGING: 5.0,
    })
    bilingual_rate: float = Field(default=0.20, ge=0)
    bilingual_hours_rate: float = Field(default=0.10, ge=0)

    # daily designer commitment: flat fee plus hours added to the allotment
    daily_hours_surcharges: Dict[DailyHours, float] = Field(default_factory=lambda: {
        DailyHours.STANDARD: 0.0,
        DailyHours.THREE_TO_FOUR: 200.0,
        DailyHours.FIVE_PLUS: 400.0,
    })
    daily_hours_extra_hours: Dict[DailyHours, float] = Field(default_factory=lambda: {
        DailyHours.STANDARD: 0.0,
        DailyHours.THREE_TO_FOUR: 12.0,
        DailyHours.FIVE_PLUS: 30.0,
    })

    base_includes: List[str] = Field(default_factory=lambda: [
        "2.5 hours design work/day",
        "Up to 30 social-style designs/month",
    ])
    # replaces the first base include
    daily_hours_includes: Dict[DailyHours, str] = Field(default_factory=lambda: {
        DailyHours.THREE_TO_FOUR: "3-4 hours design work/day",
        DailyHours.FIVE_PLUS: "5+ hours design work/day",
    })
    overage_include: str = "Up to {items} designs/month ({hours} design hours)"
    item_includes: Dict[GraphicItem, str] = Field(default_factory=lambda: {
        GraphicItem.BANNERS: "Banners & ads ({count}/month)",
        GraphicItem.BROCHURES: "Complex brochures & company profiles ({count}/month)",
        GraphicItem.ILLUSTRATIONS: "Custom illustrations ({count}/month)",
        GraphicItem.PACKAGING: "Packaging & label design ({count}/month)",
    })
    bilingual_include: str = "Arabic & English designs"

    @model_validator(mode="after")
    def check_weights(self):
        missing = [item.value for item in GraphicItem if item not in self.hour_weights]
        if missing:
            raise ValueError(f"hour_weights missing items: {', '.join(missing)}")
        if any(weight < 0 for weight in self.hour_weights.values()):
            raise ValueError("hour_weights must be non-negative")
        for name in ("daily_hours_surcharges", "daily_hours_extra_hours"):
            if any(value < 0 for value in getattr(self, name).values()):
                raise ValueError(f"{name} must be non-negative")
        return self


class VideoRates(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_price: float = Field(default=699.0, gt=0)
    base_hours: float = Field(default=20.0, ge=0)
    overage_rate: float = Field(default=20.0, ge=0)
    hour_weights: Dict[EditTier, float] = Field(default_factory=lambda: {
        EditTier.BASIC: 2.0,
        EditTier.MID: 4.0,
        EditTier.ADVANCED: 8.0,
    })
    long_form_surcharge: float = Field(default=200.0, ge=0)
    # flat fee for the editing style applied across the month
    quality_surcharges: Dict[EditTier, float] = Field(default_factory=lambda: {
        EditTier.BASIC: 0.0,
        EditTier.MID: 200.0,
        EditTier.ADVANCED: 400.0,
    })
    add_ons: Dict[VideoAddOn, AddOnRule] = Field(default_factory=lambda: {
        VideoAddOn.CAPTIONS: AddOnRule(
            price_per_video=5.0,
            hours_per_video=0.25,
            description="Professional captions/subtitles",
        ),
        VideoAddOn.STOCK_FOOTAGE: AddOnRule(
            flat_price=100.0,
            description="Stock footage & music library",
        ),
        VideoAddOn.SCRIPTING_SUPPORT: AddOnRule(
            flat_price=200.0,
            hours_per_video=1.0,
            description="Script & footage creation support",
        ),
    })

    base_includes: List[str] = Field(default_factory=lambda: [
        "2.5 hours editing/day",
        "Up to 10 reels/month",
    ])
    overage_include: str = "Up to {items} videos/month ({hours} editing hours)"
    tier_includes: Dict[EditTier, str] = Field(default_factory=lambda: {
        EditTier.BASIC: "Basic editing with subtitles & effects ({count}/month)",
        EditTier.MID: "Mid-level editing with motion graphics ({count}/month)",
        EditTier.ADVANCED: "Premium editing with advanced motion graphics ({count}/month)",
    })
    long_form_include: str = "Long-form video editing"
    quality_includes: Dict[EditTier, str] = Field(default_factory=lambda: {
        EditTier.MID: "Mid-level editing style across all videos",
        EditTier.ADVANCED: "Premium editing with motion graphics",
    })

    @model_validator(mode="after")
    def check_weights(self):
        missing = [tier.value for tier in EditTier if tier not in self.hour_weights]
        if missing:
            raise ValueError(f"hour_weights missing tiers: {', '.join(missing)}")
        if any(weight < 0 for weight in self.hour_weights.values()):
            raise ValueError("hour_weights must be non-negative")
        if any(value < 0 for value in self.quality_surcharges.values()):
            raise ValueError("quality_surcharges must be non-negative")
        return self


class PricingTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    currency: str = "USD"
    graphic: GraphicRates = Field(default_factory=GraphicRates)
    video: VideoRates = Field(default_factory=VideoRates)

    # the engine takes at least one unit off, so any positive rate keeps the bundle cheaper
    bundle_discount_rate: float = Field(default=0.10, gt=0, lt=1)
    bundle_include: str = "Design + video bundle savings ({percent}% off)"

    video_count_bands: List[CountRange] = Field(default_factory=lambda: [
        CountRange(min=1, max=4),
        CountRange(min=5, max=8),
        CountRange(min=9, max=12),
        CountRange(min=13),
    ])


DEFAULT_PRICING_TABLE = PricingTable()


def load_pricing_table(path: str) -> PricingTable:
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise PricingTableError(f"Cannot read pricing table {path}: {e}") from e
    try:
        table = PricingTable.model_validate_json(raw)
    except ValidationError as e:
        raise PricingTableError(f"Invalid pricing table {path}: {e}") from e
    logger.info(f"Loaded pricing table from {path}")
    return table


@lru_cache(maxsize=1)
def get_pricing_table(path: Optional[str] = None) -> PricingTable:
    path = path or settings.PRICING_TABLE_PATH
    if not path:
        return DEFAULT_PRICING_TABLE
    return load_pricing_table(path)

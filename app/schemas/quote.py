from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from app.core.enums import DailyHours, EditTier, GraphicItem, ServiceType, VideoDuration

# per-field ceiling on monthly item counts; larger answers are clamped to it
MAX_COUNT = 10_000


def coerce_count(value: Any) -> int:
    """Normalize a form answer into an integer count in [0, MAX_COUNT].

    Blank, missing, non-numeric and negative answers all count as zero.
    Oversized answers (including scientific notation such as "1e28") are
    clamped to MAX_COUNT.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return min(max(value, 0), MAX_COUNT)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0
    try:
        number = Decimal(str(value)) if isinstance(value, (str, float)) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return 0
    if not number.is_finite() or number <= 0:
        return 0
    if number >= MAX_COUNT:
        return MAX_COUNT
    return int(number)


def coerce_flag(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on", "y")
    if isinstance(value, (int, float)):
        return value > 0
    return bool(value)


def _coerce_choice(enum_cls, value: Any, default):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            return default
    return default


class CountRange(BaseModel):
    """Closed quantity band such as 5-8, or open-ended such as 13+ (max=None)."""
    model_config = ConfigDict(frozen=True)

    min: int = Field(ge=0)
    max: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_bounds(self):
        if self.max is not None and self.max < self.min:
            raise ValueError("max must not be lower than min")
        return self

    @property
    def representative(self) -> int:
        # bands are priced at their upper bound
        return self.max if self.max is not None else self.min

    def __str__(self):
        if self.max is None:
            return f"{self.min}+"
        return f"{self.min}–{self.max}"


class GraphicAnswers(BaseModel):
    model_config = ConfigDict(frozen=True)

    social_posts: int = 0
    banners: int = 0
    brochures: int = 0
    illustrations: int = 0
    packaging: int = 0
    bilingual: bool = False
    daily_hours: DailyHours = DailyHours.STANDARD

    @field_validator("social_posts", "banners", "brochures", "illustrations", "packaging", mode="before")
    @classmethod
    def normalize_count(cls, v):
        return coerce_count(v)

    @field_validator("bilingual", mode="before")
    @classmethod
    def normalize_flag(cls, v):
        return coerce_flag(v)

    @field_validator("daily_hours", mode="before")
    @classmethod
    def normalize_daily_hours(cls, v):
        return _coerce_choice(DailyHours, v, DailyHours.STANDARD)

    def item_counts(self) -> Dict[GraphicItem, int]:
        return {item: getattr(self, item.value) for item in GraphicItem}

    @property
    def total_items(self) -> int:
        return sum(self.item_counts().values())


class VideoAnswers(BaseModel):
    model_config = ConfigDict(frozen=True)

    basic_edits: int = 0
    mid_edits: int = 0
    advanced_edits: int = 0

    # banded alternative to per-tier counts, priced at the chosen quality tier
    count_band: Optional[CountRange] = None
    quality: EditTier = EditTier.BASIC

    duration: VideoDuration = VideoDuration.UNDER_60_SEC
    captions: bool = False
    stock_footage: bool = False
    scripting_support: bool = False

    @field_validator("basic_edits", "mid_edits", "advanced_edits", mode="before")
    @classmethod
    def normalize_count(cls, v):
        return coerce_count(v)

    @field_validator("captions", "stock_footage", "scripting_support", mode="before")
    @classmethod
    def normalize_flag(cls, v):
        return coerce_flag(v)

    @field_validator("count_band", mode="before")
    @classmethod
    def normalize_band(cls, v):
        # display labels like "11-20" and malformed bands are ignored
        if isinstance(v, CountRange):
            return v
        if not isinstance(v, Mapping) or not v:
            return None
        try:
            return CountRange.model_validate(dict(v))
        except ValidationError:
            return None

    @field_validator("quality", mode="before")
    @classmethod
    def normalize_quality(cls, v):
        return _coerce_choice(EditTier, v, EditTier.BASIC)

    @field_validator("duration", mode="before")
    @classmethod
    def normalize_duration(cls, v):
        return _coerce_choice(VideoDuration, v, VideoDuration.UNDER_60_SEC)

    def tier_counts(self) -> Dict[EditTier, int]:
        counts = {
            EditTier.BASIC: self.basic_edits,
            EditTier.MID: self.mid_edits,
            EditTier.ADVANCED: self.advanced_edits,
        }
        if self.count_band is not None:
            counts[self.quality] = min(counts[self.quality] + self.count_band.representative, MAX_COUNT)
        return counts

    @property
    def video_count(self) -> int:
        return sum(self.tier_counts().values())


class QuoteRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_type: Optional[ServiceType] = None
    graphic: Optional[GraphicAnswers] = None
    video: Optional[VideoAnswers] = None

    @field_validator("service_type", mode="before")
    @classmethod
    def normalize_service_type(cls, v):
        return _coerce_choice(ServiceType, v, None)

    @field_validator("graphic", "video", mode="before")
    @classmethod
    def normalize_section(cls, v, info: ValidationInfo):
        # anything other than an answers object leaves the section unanswered
        answers_cls = GraphicAnswers if info.field_name == "graphic" else VideoAnswers
        if isinstance(v, (answers_cls, Mapping)):
            return v
        return None


class QuoteBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_price: int = 0
    volume_adjustment: int = 0
    complexity_adjustment: int = 0
    bilingual_surcharge: int = 0
    add_ons: int = 0
    bundle_discount: int = 0

    @property
    def total(self) -> int:
        return (
            self.base_price
            + self.volume_adjustment
            + self.complexity_adjustment
            + self.bilingual_surcharge
            + self.add_ons
            + self.bundle_discount
        )


class QuoteResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_price: int
    breakdown: QuoteBreakdown
    includes: List[str] = Field(default_factory=list)
    estimated_hours: float = 0.0
    currency: str = "USD"

    @classmethod
    def zero(cls, currency: str = "USD") -> "QuoteResult":
        return cls(monthly_price=0, breakdown=QuoteBreakdown(), includes=[], currency=currency)

    @property
    def is_complete(self) -> bool:
        return self.monthly_price > 0

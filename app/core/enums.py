from enum import Enum


class ServiceType(str, Enum):
    GRAPHIC = "graphic"
    VIDEO = "video"
    BOTH = "both"

    def __str__(self):
        return self.value

    @property
    def includes_graphic(self) -> bool:
        return self in (ServiceType.GRAPHIC, ServiceType.BOTH)

    @property
    def includes_video(self) -> bool:
        return self in (ServiceType.VIDEO, ServiceType.BOTH)


class EditTier(str, Enum):
    BASIC = "basic"
    MID = "mid"
    ADVANCED = "advanced"

    def __str__(self):
        return self.value


class VideoDuration(str, Enum):
    UNDER_60_SEC = "under_60s"
    ONE_TO_THREE_MIN = "1_3_min"
    THREE_TO_FIVE_MIN = "3_5_min"
    FIVE_PLUS_MIN = "5_plus_min"

    def __str__(self):
        return self.value

    @property
    def is_long_form(self) -> bool:
        return self in (VideoDuration.THREE_TO_FIVE_MIN, VideoDuration.FIVE_PLUS_MIN)


class DailyHours(str, Enum):
    STANDARD = "standard"
    THREE_TO_FOUR = "3_4h"
    FIVE_PLUS = "5_plus_h"

    def __str__(self):
        return self.value


class GraphicItem(str, Enum):
    SOCIAL_POSTS = "social_posts"
    BANNERS = "banners"
    BROCHURES = "brochures"
    ILLUSTRATIONS = "illustrations"
    PACKAGING = "packaging"

    def __str__(self):
        return self.value


class VideoAddOn(str, Enum):
    CAPTIONS = "captions"
    STOCK_FOOTAGE = "stock_footage"
    SCRIPTING_SUPPORT = "scripting_support"

    def __str__(self):
        return self.value

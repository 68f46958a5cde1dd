"""Domain enumerations."""

from enum import StrEnum


class OutputKind(StrEnum):
    """What the downstream generation service produces."""

    VIDEO = "video"
    STILL = "still"


class ShotType(StrEnum):
    """Camera/motion archetypes used for template selection and scoring."""

    LATERAL_TRACK = "lateral_track"
    LATERAL_TRACK_WIDE = "lateral_track_wide"
    WIDE_ESTABLISH = "wide_establish"
    FOLLOW_BEHIND = "follow_behind"
    STATIC_HERO = "static_hero"
    INTERIOR = "interior"
    DETAIL = "detail"
    AUTO = "auto"

    @classmethod
    def resolve(cls, value: "str | ShotType | None") -> "ShotType":
        """Map a raw shot-type hint to a member, falling back to AUTO."""
        if value is None:
            return cls.AUTO
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.AUTO


class ScreenDirection(StrEnum):
    """Screen direction hints accepted on a generation request."""

    LEFT_TO_RIGHT = "left-to-right"
    RIGHT_TO_LEFT = "right-to-left"


class Rating(StrEnum):
    """Outcome rating vocabulary, worst to best."""

    FAILED = "failed"
    POOR = "poor"
    OKAY = "okay"
    GOOD = "good"
    PERFECT = "perfect"

    @property
    def is_positive(self) -> bool:
        return self in (Rating.GOOD, Rating.PERFECT)

    @property
    def is_negative(self) -> bool:
        return self in (Rating.FAILED, Rating.POOR)

    @classmethod
    def parse(cls, value: "str | int | Rating | None") -> "Rating | None":
        """Parse a rating name or a 1-5 score.

        Legacy names from the three-button widget are accepted too
        ("great" -> perfect, "bad" -> poor).

        Returns:
            The matching Rating, or None if the value is not in the vocabulary
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return _SCALE.get(value)

        text = str(value).strip().lower()
        if text.isdigit():
            return _SCALE.get(int(text))
        if text in _LEGACY:
            return _LEGACY[text]
        try:
            return cls(text)
        except ValueError:
            return None


_SCALE: dict[int, Rating] = {
    1: Rating.FAILED,
    2: Rating.POOR,
    3: Rating.OKAY,
    4: Rating.GOOD,
    5: Rating.PERFECT,
}

_LEGACY: dict[str, Rating] = {
    "great": Rating.PERFECT,
    "bad": Rating.POOR,
}


class PatternType(StrEnum):
    """Pattern types stored in brand intelligence."""

    CAMERA_TYPE = "camera_type"
    LIGHTING = "lighting"
    MOTION_STYLE = "motion_style"
    SCREEN_DIRECTION = "screen_direction"
    PLATFORM_PREFERENCE = "platform_preference"
    FPS_PREFERENCE = "fps_preference"
    CAMERA_PREFERENCE = "camera_preference"

    @staticmethod
    def platform_issue(platform: str) -> str:
        """Pattern type for negative issues reported against a platform."""
        return f"platform_issue_{platform}"


class IssueTag(StrEnum):
    """Structured issue tags accepted with negative feedback."""

    MOTION = "motion"
    LIGHTING = "lighting"
    COLOR = "color"
    CONSISTENCY = "consistency"
    PHYSICS = "physics"
    CAMERA = "camera"

"""Shot template and platform capability presets."""

from continuum.presets.platforms import (
    DEFAULT_PLATFORM_CATALOG,
    PLATFORM_CAPABILITIES,
    PLATFORM_GUIDANCE,
    DurationBonus,
    KeywordBonus,
    PlatformCapability,
    PlatformCatalog,
    PlatformGuidance,
    get_platform_names,
    neutral_capability,
)
from continuum.presets.shots import (
    DEFAULT_SHOT_CATALOG,
    SHOT_REQUIREMENTS,
    SHOT_TEMPLATES,
    ShotCatalog,
    ShotRequirements,
    ShotTemplate,
    get_shot_template,
    get_shot_type_names,
)

__all__ = [
    "DEFAULT_PLATFORM_CATALOG",
    "DEFAULT_SHOT_CATALOG",
    "DurationBonus",
    "KeywordBonus",
    "PLATFORM_CAPABILITIES",
    "PLATFORM_GUIDANCE",
    "PlatformCapability",
    "PlatformCatalog",
    "PlatformGuidance",
    "SHOT_REQUIREMENTS",
    "SHOT_TEMPLATES",
    "ShotCatalog",
    "ShotRequirements",
    "ShotTemplate",
    "get_platform_names",
    "get_shot_template",
    "get_shot_type_names",
    "neutral_capability",
]

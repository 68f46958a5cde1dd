"""Platform capability and guidance definitions.

Each platform has specific strengths; there is no "best overall". Ratings are
0-10 and were calibrated against side-by-side automotive test renders. Bonus
rules are data, not code: add a platform by adding a table row.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from continuum.domain.enums import OutputKind, ShotType

BOTH_KINDS: frozenset[OutputKind] = frozenset({OutputKind.VIDEO, OutputKind.STILL})
VIDEO_ONLY: frozenset[OutputKind] = frozenset({OutputKind.VIDEO})
STILL_ONLY: frozenset[OutputKind] = frozenset({OutputKind.STILL})


@dataclass(frozen=True)
class DurationBonus:
    """Duration-fit bonus applied when the clip length falls in a window."""

    bonus: int
    min_seconds: float | None = None
    max_seconds: float | None = None
    strict_min: bool = False
    strength: str | None = None  # rationale phrase when the window applies

    def applies(self, duration: float) -> bool:
        if self.min_seconds is not None:
            if self.strict_min and duration <= self.min_seconds:
                return False
            if not self.strict_min and duration < self.min_seconds:
                return False
        if self.max_seconds is not None and duration > self.max_seconds:
            return False
        return True


@dataclass(frozen=True)
class KeywordBonus:
    """Platform-strength bonus when the description mentions any keyword."""

    keywords: tuple[str, ...]
    bonus: int

    def applies(self, text: str) -> bool:
        lower = text.lower()
        return any(k in lower for k in self.keywords)


@dataclass(frozen=True)
class PlatformCapability:
    """Static capability profile of a generation platform.

    Attributes:
        name: Platform identifier
        consistency: Subject/vehicle consistency rating (0-10)
        camera_lock: Camera-lock fidelity rating (0-10)
        instruction_compliance: Literal instruction compliance rating (0-10)
        best_for: Descriptive strength tags
        weaknesses: Descriptive weakness tags
        notes: Free-text notes injected into synthesis
        output_kinds: Output kinds the platform can produce
        duration_bonuses: Sweet-spot windows added to duration fit
        keyword_bonuses: Description cues added to platform strength
        shot_type_bonuses: Per-shot-type strength bonuses
        static_camera_bonus: Strength bonus on shots that prefer a static camera
        dynamic_background_bonus: Strength bonus on shots with dynamic backgrounds
        precision_penalty: Strength penalty on camera-critical shots
        signature_strength: Phrase used in the recommendation rationale
        alternative_note: Phrase used when listed as an alternative
        validated: False for the neutral fallback of an unknown platform
    """

    name: str
    consistency: int
    camera_lock: int
    instruction_compliance: int
    best_for: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    notes: str = ""
    output_kinds: frozenset[OutputKind] = VIDEO_ONLY
    duration_bonuses: tuple[DurationBonus, ...] = ()
    keyword_bonuses: tuple[KeywordBonus, ...] = ()
    shot_type_bonuses: Mapping[ShotType, int] = field(default_factory=dict)
    static_camera_bonus: int = 0
    dynamic_background_bonus: int = 0
    precision_penalty: int = 0
    signature_strength: str | None = None
    alternative_note: str = "Alternative option"
    validated: bool = True

    def supports(self, output_kind: OutputKind) -> bool:
        return output_kind in self.output_kinds

    @property
    def stills_only(self) -> bool:
        return self.output_kinds == STILL_ONLY


@dataclass(frozen=True)
class PlatformGuidance:
    """Prompt-writing guidance and limits for a platform."""

    display_name: str
    char_limit: int
    tips: tuple[str, ...] = ()

    def format_for_prompt(self) -> str:
        lines = [f"PLATFORM: {self.display_name} ({self.char_limit} char limit)"]
        lines.extend(f"- {tip}" for tip in self.tips)
        return "\n".join(lines)


def neutral_capability(name: str) -> PlatformCapability:
    """Mid-range capability used for platforms without validated ratings."""
    return PlatformCapability(
        name=name,
        consistency=5,
        camera_lock=5,
        instruction_compliance=5,
        output_kinds=BOTH_KINDS,
        validated=False,
    )


# =============================================================================
# CAPABILITY DEFINITIONS
# =============================================================================

_LATERAL_SHOTS = (ShotType.LATERAL_TRACK, ShotType.LATERAL_TRACK_WIDE)

VEO3 = PlatformCapability(
    name="veo3",
    consistency=9,
    camera_lock=10,
    instruction_compliance=9,
    best_for=(
        "Broadcast production",
        "Literal execution",
        "Product hero shots",
        "Camera lock critical shots",
        "Single occupant precision",
    ),
    weaknesses=(
        "May freeze on static subjects without explicit background motion",
        "10-minute cooldown between renders",
    ),
    notes=(
        "Primary recommendation for broadcast. Respects camera mounting language "
        "and screen direction."
    ),
    duration_bonuses=(DurationBonus(bonus=10, max_seconds=8),),
    shot_type_bonuses={
        ShotType.LATERAL_TRACK: 10,
        ShotType.LATERAL_TRACK_WIDE: 10,
        ShotType.STATIC_HERO: 5,
    },
    static_camera_bonus=10,
    signature_strength="broadcast-grade literal execution",
    alternative_note="More literal execution, stricter camera lock",
)

KLING = PlatformCapability(
    name="kling",
    consistency=9,
    camera_lock=9,
    instruction_compliance=8,
    best_for=(
        "Automotive tracking",
        "Dynamic environments (waves, weather)",
        "10-second sweet spot",
        "Modern vehicle accuracy",
    ),
    weaknesses=(
        "May not parse lane positioning language",
        "Needs explicit road position instructions",
    ),
    notes="Excellent for automotive. 10s is optimal duration. Dynamic backgrounds are its strength.",
    duration_bonuses=(
        DurationBonus(bonus=15, min_seconds=8, max_seconds=10, strength="optimal 10s duration range"),
    ),
    keyword_bonuses=(KeywordBonus(keywords=("ocean", "waves", "weather"), bonus=10),),
    shot_type_bonuses={ShotType.FOLLOW_BEHIND: 10},
    dynamic_background_bonus=15,
    signature_strength="dynamic backgrounds",
    alternative_note="Better for dynamic backgrounds (waves, weather)",
)

SORA = PlatformCapability(
    name="sora",
    consistency=7,
    camera_lock=5,
    instruction_compliance=6,
    best_for=(
        "Cinematic mood pieces",
        "Social content (variance is a feature)",
        "Human motion",
        "Creative exploration",
        "When interpretation is welcome",
    ),
    weaknesses=(
        "Adds passengers despite instructions",
        "Camera drifts from locked position",
        "Interprets classic versions of vehicles",
        "Not production-reliable",
    ),
    notes=(
        "Better for mood/social. Variance makes it unreliable for broadcast but creative "
        "for exploration."
    ),
    duration_bonuses=(DurationBonus(bonus=5, min_seconds=10, strict_min=True),),
    keyword_bonuses=(
        KeywordBonus(keywords=("cinematic", "mood"), bonus=10),
        KeywordBonus(keywords=("person", "human", "people"), bonus=15),
    ),
    precision_penalty=15,
    signature_strength="cinematic interpretation",
    alternative_note="Better for mood pieces and human motion",
)

MINIMAX = PlatformCapability(
    name="minimax",
    consistency=9,
    camera_lock=9,
    instruction_compliance=7,
    best_for=(
        "Clean clinical execution",
        "Modern vehicle accuracy",
        "Consistent tracking",
    ),
    weaknesses=(
        "Does not parse lane positioning",
        "Variance in background interpretation between renders",
    ),
    notes="Clinical precision. Good via Freepik aggregator.",
    shot_type_bonuses={shot: 10 for shot in _LATERAL_SHOTS},
    signature_strength="clinical precision",
    alternative_note="Clinical precision via Freepik aggregator",
)

RUNWAY = PlatformCapability(
    name="runway",
    consistency=7,
    camera_lock=7,
    instruction_compliance=7,
    best_for=(
        "Image-to-video workflows",
        "Character reference",
        "Extending existing footage",
    ),
    weaknesses=("Lower vehicle accuracy than dedicated platforms",),
    notes="Solid for image-to-video. Character reference features emerging.",
    alternative_note="Better for image-to-video workflows",
)

MIDJOURNEY = PlatformCapability(
    name="midjourney",
    consistency=8,
    camera_lock=3,
    instruction_compliance=4,
    best_for=(
        "Hero stills",
        "Dramatic compositions",
        "Reference images for video workflows",
    ),
    weaknesses=(
        "Ignores camera position instructions",
        'Chooses "dramatic" over specified angles',
        "Screen direction unreliable",
        "Stills only",
    ),
    notes="Best for stills. Use with seed for consistency, then animate in Kling/Veo.",
    output_kinds=STILL_ONLY,
    alternative_note="Best for hero stills with seed consistency",
)

FLUX = PlatformCapability(
    name="flux",
    consistency=8,
    camera_lock=6,
    instruction_compliance=7,
    best_for=("Still images", "Photorealistic renders"),
    weaknesses=("Stills only",),
    notes="Quality stills, alternative to Midjourney.",
    output_kinds=STILL_ONLY,
    alternative_note="Photorealistic stills alternative",
)


# =============================================================================
# GUIDANCE DEFINITIONS
# =============================================================================

PLATFORM_GUIDANCE: Mapping[str, PlatformGuidance] = MappingProxyType(
    {
        "veo3": PlatformGuidance(
            display_name="Google Veo 3",
            char_limit=5000,
            tips=(
                "Exceptional motion consistency and literal execution",
                "Precise speed directives work well (mph/kph)",
                "Camera mount language executes perfectly",
                "Best for: Automotive, tracking shots, product motion",
            ),
        ),
        "sora": PlatformGuidance(
            display_name="Sora",
            char_limit=4000,
            tips=(
                "Outstanding cinematic lighting and atmosphere",
                "Struggles with complex coordinated motion",
                "Best for: Atmospheric, mood-focused content",
                "Simplify motion, emphasize lighting",
            ),
        ),
        "kling": PlatformGuidance(
            display_name="Kling",
            char_limit=3500,
            tips=(
                "Strong architectural and product detail",
                "Excellent frame-to-frame consistency",
                "Best for: Interiors, products, static beauty",
            ),
        ),
        "minimax": PlatformGuidance(
            display_name="MiniMax Hailuo",
            char_limit=3000,
            tips=(
                "Reliable general-purpose generation",
                "Good for standard commercial shots",
            ),
        ),
        "runway": PlatformGuidance(
            display_name="Runway Gen-3",
            char_limit=3500,
            tips=(
                "Strong motion understanding",
                "Good for creative/experimental content",
            ),
        ),
        "seedance": PlatformGuidance(
            display_name="Seedance 1.0 Pro",
            char_limit=3000,
            tips=("Good motion consistency", "Balanced quality/speed tradeoff"),
        ),
        "pika": PlatformGuidance(
            display_name="Pika",
            char_limit=2000,
            tips=("Fast generation", "Keep prompts concise"),
        ),
        "freepik": PlatformGuidance(
            display_name="Freepik",
            char_limit=2500,
            tips=("Stock-style output", "Good for generic commercial content"),
        ),
        "midjourney": PlatformGuidance(
            display_name="Midjourney",
            char_limit=2000,
            tips=(
                "Exceptional artistic/stylized output",
                "Use --ar for aspect ratio, --v for version",
                "Best for: Hero images, concept art",
            ),
        ),
        "grok": PlatformGuidance(
            display_name="Grok",
            char_limit=3000,
            tips=("Strong photorealistic rendering", "Good complex scene handling"),
        ),
        "flux": PlatformGuidance(
            display_name="Flux",
            char_limit=2500,
            tips=("Excellent fine detail and accuracy", "Strong text rendering"),
        ),
    }
)


# =============================================================================
# CATALOG
# =============================================================================

PLATFORM_CAPABILITIES: Mapping[str, PlatformCapability] = MappingProxyType(
    {p.name: p for p in (VEO3, KLING, SORA, MINIMAX, RUNWAY, MIDJOURNEY, FLUX)}
)

# Candidate order doubles as the tie-break order for predictions
VIDEO_PLATFORMS: tuple[str, ...] = ("veo3", "kling", "sora", "minimax", "runway")
STILL_PLATFORMS: tuple[str, ...] = ("midjourney", "flux")


@dataclass(frozen=True)
class PlatformCatalog:
    """Immutable platform tables passed into the prediction and synthesis services."""

    capabilities: Mapping[str, PlatformCapability] = field(
        default_factory=lambda: PLATFORM_CAPABILITIES
    )
    guidance: Mapping[str, PlatformGuidance] = field(default_factory=lambda: PLATFORM_GUIDANCE)
    video_platforms: tuple[str, ...] = VIDEO_PLATFORMS
    still_platforms: tuple[str, ...] = STILL_PLATFORMS

    def capability(self, platform: str) -> PlatformCapability:
        """Get a platform's capability, or a neutral profile if unknown."""
        key = platform.lower()
        return self.capabilities.get(key) or neutral_capability(key)

    def guidance_for(self, platform: str) -> PlatformGuidance | None:
        return self.guidance.get(platform.lower())

    def char_limit(self, platform: str) -> int | None:
        guidance = self.guidance_for(platform)
        return guidance.char_limit if guidance else None

    def candidates(self, output_kind: OutputKind) -> tuple[str, ...]:
        """Platforms evaluated for an output kind, in tie-break order."""
        if output_kind == OutputKind.STILL:
            return self.still_platforms
        return self.video_platforms


DEFAULT_PLATFORM_CATALOG = PlatformCatalog()


def get_platform_names() -> list[str]:
    """Get list of platforms with guidance (every platform the engine knows)."""
    return list(PLATFORM_GUIDANCE.keys())

"""Shot template and shot requirement definitions.

Templates use camera MOUNTING language rather than behavioral descriptions:
"Camera mounted on tracking vehicle's left side" holds position far better
than "parallel tracking shot" on every platform we have tested.

Requirements describe what each shot type needs from a platform and drive
the weighted prediction scoring.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from continuum.domain.enums import ShotType


@dataclass(frozen=True)
class ShotTemplate:
    """Camera/motion archetype injected verbatim into synthesis.

    Attributes:
        shot_type: Shot type this template serves
        name: Human-readable name
        camera_instruction: Camera mounting/placement instruction
        framing_guidance: How the subject sits in frame
        motion_guidance: How subject and camera move
        default_occupancy: Occupancy text used when the user gives none
        default_screen_direction: Direction text used when the user gives none
        negative_constraints: Advisory "do not" lines
        platform_notes: Known per-platform behavior for this shot
    """

    shot_type: ShotType
    name: str
    camera_instruction: str
    framing_guidance: str
    motion_guidance: str
    default_occupancy: str
    default_screen_direction: str
    negative_constraints: tuple[str, ...] = ()
    platform_notes: Mapping[str, str] = field(default_factory=dict)

    def platform_note(self, platform: str) -> str | None:
        """Known behavior of a platform on this shot, if recorded."""
        return self.platform_notes.get(platform)


@dataclass(frozen=True)
class ShotRequirements:
    """What a shot type needs from a platform (importance values are 0-10)."""

    camera_lock_importance: int
    consistency_importance: int
    instruction_compliance_importance: int
    motion_complexity: int
    optimal_duration_min: int
    optimal_duration_max: int
    prefers_dynamic_background: bool
    prefers_static_camera: bool
    label: str


# =============================================================================
# TEMPLATE DEFINITIONS
# =============================================================================

LATERAL_TRACK = ShotTemplate(
    shot_type=ShotType.LATERAL_TRACK,
    name="Lateral Tracking (Tight)",
    camera_instruction=(
        "Camera mounted on tracking vehicle's left side maintains fixed lateral position, "
        "capturing full driver's side profile."
    ),
    framing_guidance="Subject fills 70% of frame. Shallow depth of field, sharp focus on subject.",
    motion_guidance="Subject drives steadily. Camera maintains consistent distance and angle throughout.",
    default_occupancy="Single male driver with sunglasses, hands on steering wheel.",
    default_screen_direction="traveling screen-left to screen-right",
    negative_constraints=(
        "Camera does not rotate or orbit around vehicle",
        "No zoom or focal length changes",
        "No Dutch angle",
        "Camera maintaining consistent side angle throughout",
    ),
    platform_notes={
        "veo3": "Excellent. Respects camera lock.",
        "sora": "May drift to front 3/4 view. May add passengers.",
        "kling": "Excellent consistency. Dynamic backgrounds.",
        "midjourney": 'Ignores camera position for "dramatic" angles. Stills only.',
    },
)

LATERAL_TRACK_WIDE = ShotTemplate(
    shot_type=ShotType.LATERAL_TRACK_WIDE,
    name="Lateral Tracking (Wide)",
    camera_instruction=(
        "Camera mounted on tracking vehicle's left side at moderate distance, "
        "capturing full vehicle in frame with environmental context."
    ),
    framing_guidance="Full vehicle visible with road and environment. Subject at 40-50% of frame.",
    motion_guidance=(
        "Subject drives steadily. Camera maintains consistent distance showing full vehicle "
        "plus surroundings."
    ),
    default_occupancy="Single driver visible through windows.",
    default_screen_direction="traveling screen-left to screen-right",
    negative_constraints=(
        "Camera does not close in or pull back",
        "No rotation around vehicle",
        "Maintain wide framing throughout",
    ),
)

WIDE_ESTABLISH = ShotTemplate(
    shot_type=ShotType.WIDE_ESTABLISH,
    name="Wide Establishing Shot",
    camera_instruction="Static camera on tripod, wide focal length. Subject enters from screen edge.",
    framing_guidance="Environment-forward composition. Subject at 20-30% of frame. Emphasize location.",
    motion_guidance="Subject enters frame and travels across. Camera remains locked.",
    default_occupancy="Driver visible as silhouette.",
    default_screen_direction="entering from screen-left, traveling right",
    negative_constraints=(
        "Camera locked on tripod",
        "No pan, no tilt, no zoom",
        "No camera movement of any kind",
    ),
)

FOLLOW_BEHIND = ShotTemplate(
    shot_type=ShotType.FOLLOW_BEHIND,
    name="Follow Behind",
    camera_instruction=(
        "Camera mounted on trailing vehicle, centered behind subject. "
        "Slight elevation to see over subject roof."
    ),
    framing_guidance="Subject centered in frame. Road extends ahead. Horizon visible above roofline.",
    motion_guidance="Subject drives away from camera at consistent pace. Camera follows at fixed distance.",
    default_occupancy="Single driver, seen from behind through rear window.",
    default_screen_direction="traveling away from camera toward horizon",
    negative_constraints=(
        "Camera does not pass or overtake subject",
        "Maintain fixed following distance",
        "No side-to-side movement",
    ),
)

STATIC_HERO = ShotTemplate(
    shot_type=ShotType.STATIC_HERO,
    name="Static Hero",
    camera_instruction="Camera on tripod at eye level or slightly below. Subject stationary, camera locked.",
    framing_guidance="Subject positioned using rule of thirds. Clean background, no distractions.",
    motion_guidance=(
        "Subject is stationary. Background has subtle motion: clouds moving, dust particles, "
        "leaves, light changes."
    ),
    default_occupancy="Empty vehicle, no occupants.",
    default_screen_direction="facing screen-right (3/4 front view) or screen-left (3/4 rear view)",
    negative_constraints=(
        "Vehicle does not move",
        "Camera locked, no movement",
        "No zoom, no rack focus",
    ),
    platform_notes={
        "veo3": "May need explicit background motion or will freeze.",
        "sora": "Better lighting on static subjects.",
        "kling": "Include explicit background elements for motion.",
    },
)

INTERIOR = ShotTemplate(
    shot_type=ShotType.INTERIOR,
    name="Interior POV",
    camera_instruction="Camera mounted on dashboard or passenger seat, facing driver or through windshield.",
    framing_guidance="Interior fills frame. Windshield view shows road ahead. Steering wheel and hands visible.",
    motion_guidance="View through windshield shows forward movement. Driver makes subtle steering adjustments.",
    default_occupancy="Driver in profile, hands at 9-and-3 on wheel.",
    default_screen_direction="forward motion visible through windshield",
    negative_constraints=(
        "Camera stays inside vehicle",
        "No exterior shots",
        "Consistent interior lighting",
    ),
)

DETAIL = ShotTemplate(
    shot_type=ShotType.DETAIL,
    name="Detail/Macro",
    camera_instruction="Close-up camera, shallow depth of field, focused on specific element.",
    framing_guidance="Detail element fills frame. Extreme shallow DOF, background abstract.",
    motion_guidance="Very subtle dolly or rack focus. Light movement preferred over camera movement.",
    default_occupancy="N/A - detail shots focus on vehicle elements, not occupants.",
    default_screen_direction="N/A",
    negative_constraints=(
        "Maintain extreme close-up framing",
        "No pull-back to reveal",
        "Focus stays locked on detail",
    ),
)

AUTO = ShotTemplate(
    shot_type=ShotType.AUTO,
    name="Auto-Select",
    camera_instruction="Camera position determined by scene requirements.",
    framing_guidance="Appropriate framing for the action described.",
    motion_guidance="Motion appropriate to duration and complexity budget.",
    default_occupancy="Single driver with sunglasses unless otherwise specified.",
    default_screen_direction="screen-left to screen-right",
)


# =============================================================================
# SHOT REQUIREMENTS
# =============================================================================

SHOT_REQUIREMENTS: Mapping[ShotType, ShotRequirements] = MappingProxyType(
    {
        # Camera must not drift, vehicle visible the entire shot
        ShotType.LATERAL_TRACK: ShotRequirements(
            camera_lock_importance=10,
            consistency_importance=9,
            instruction_compliance_importance=9,
            motion_complexity=6,
            optimal_duration_min=5,
            optimal_duration_max=10,
            prefers_dynamic_background=True,
            prefers_static_camera=False,
            label="lateral tracking shots",
        ),
        ShotType.LATERAL_TRACK_WIDE: ShotRequirements(
            camera_lock_importance=9,
            consistency_importance=8,
            instruction_compliance_importance=8,
            motion_complexity=5,
            optimal_duration_min=5,
            optimal_duration_max=12,
            prefers_dynamic_background=True,
            prefers_static_camera=False,
            label="wide tracking shots",
        ),
        # Vehicle is small in frame, camera must be locked
        ShotType.WIDE_ESTABLISH: ShotRequirements(
            camera_lock_importance=10,
            consistency_importance=6,
            instruction_compliance_importance=8,
            motion_complexity=4,
            optimal_duration_min=5,
            optimal_duration_max=15,
            prefers_dynamic_background=False,
            prefers_static_camera=True,
            label="establishing shots",
        ),
        ShotType.FOLLOW_BEHIND: ShotRequirements(
            camera_lock_importance=8,
            consistency_importance=9,
            instruction_compliance_importance=8,
            motion_complexity=5,
            optimal_duration_min=5,
            optimal_duration_max=10,
            prefers_dynamic_background=True,
            prefers_static_camera=False,
            label="follow shots",
        ),
        ShotType.STATIC_HERO: ShotRequirements(
            camera_lock_importance=10,
            consistency_importance=10,
            instruction_compliance_importance=9,
            motion_complexity=2,
            optimal_duration_min=5,
            optimal_duration_max=10,
            prefers_dynamic_background=False,
            prefers_static_camera=True,
            label="static hero shots",
        ),
        ShotType.INTERIOR: ShotRequirements(
            camera_lock_importance=8,
            consistency_importance=7,
            instruction_compliance_importance=8,
            motion_complexity=4,
            optimal_duration_min=5,
            optimal_duration_max=10,
            prefers_dynamic_background=False,
            prefers_static_camera=False,
            label="interior shots",
        ),
        ShotType.DETAIL: ShotRequirements(
            camera_lock_importance=9,
            consistency_importance=10,
            instruction_compliance_importance=9,
            motion_complexity=2,
            optimal_duration_min=3,
            optimal_duration_max=7,
            prefers_dynamic_background=False,
            prefers_static_camera=True,
            label="detail shots",
        ),
        ShotType.AUTO: ShotRequirements(
            camera_lock_importance=7,
            consistency_importance=8,
            instruction_compliance_importance=7,
            motion_complexity=5,
            optimal_duration_min=5,
            optimal_duration_max=10,
            prefers_dynamic_background=False,
            prefers_static_camera=False,
            label="general shots",
        ),
    }
)


# =============================================================================
# TEMPLATE REGISTRY
# =============================================================================

SHOT_TEMPLATES: Mapping[ShotType, ShotTemplate] = MappingProxyType(
    {
        ShotType.LATERAL_TRACK: LATERAL_TRACK,
        ShotType.LATERAL_TRACK_WIDE: LATERAL_TRACK_WIDE,
        ShotType.WIDE_ESTABLISH: WIDE_ESTABLISH,
        ShotType.FOLLOW_BEHIND: FOLLOW_BEHIND,
        ShotType.STATIC_HERO: STATIC_HERO,
        ShotType.INTERIOR: INTERIOR,
        ShotType.DETAIL: DETAIL,
        ShotType.AUTO: AUTO,
    }
)


@dataclass(frozen=True)
class ShotCatalog:
    """Immutable shot template and requirement tables.

    Lookups never fail: unknown or unset shot types resolve to ``auto``.
    """

    templates: Mapping[ShotType, ShotTemplate] = field(default_factory=lambda: SHOT_TEMPLATES)
    requirements: Mapping[ShotType, ShotRequirements] = field(
        default_factory=lambda: SHOT_REQUIREMENTS
    )

    def template(self, shot_type: str | ShotType | None) -> ShotTemplate:
        """Get the template for a shot type, falling back to auto."""
        resolved = ShotType.resolve(shot_type)
        return self.templates.get(resolved) or self.templates[ShotType.AUTO]

    def requirements_for(self, shot_type: str | ShotType | None) -> ShotRequirements:
        """Get scoring requirements for a shot type, falling back to auto."""
        resolved = ShotType.resolve(shot_type)
        return self.requirements.get(resolved) or self.requirements[ShotType.AUTO]


DEFAULT_SHOT_CATALOG = ShotCatalog()


def get_shot_template(shot_type: str | ShotType | None) -> ShotTemplate:
    """Get a template from the default catalog."""
    return DEFAULT_SHOT_CATALOG.template(shot_type)


def get_shot_type_names() -> list[str]:
    """Get list of available shot type identifiers."""
    return [s.value for s in SHOT_TEMPLATES]

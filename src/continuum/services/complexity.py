"""Duration-aware complexity budgeting.

Generated clips fall apart when too much happens in too little time. The
budget caps primary actions, camera changes and reveals for a clip length.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ComplexityBudget:
    """Ceilings on what a clip of a given duration may contain."""

    max_actions: int
    max_camera_changes: int
    max_reveals: int
    pacing_guidance: str
    warning: str | None = None

    def format_rules(self, duration: float) -> str:
        """Render the budget as instruction text."""
        lines = [
            f"DURATION: {_format_seconds(duration)} seconds",
            f"- Maximum primary actions: {self.max_actions}",
            f"- Maximum camera changes: {self.max_camera_changes}",
            f"- Maximum reveals/transitions: {self.max_reveals}",
            f"- Pacing: {self.pacing_guidance}",
        ]
        if self.warning:
            lines.append(f"- WARNING: {self.warning}")
        return "\n".join(lines)


# (upper bound in seconds, budget), checked in order
_BREAKPOINTS: tuple[tuple[float, ComplexityBudget], ...] = (
    (
        3,
        ComplexityBudget(
            max_actions=1,
            max_camera_changes=0,
            max_reveals=0,
            pacing_guidance="Single quick action, static or simple camera. No transitions.",
            warning="Very short duration - keep extremely simple. One motion only.",
        ),
    ),
    (
        5,
        ComplexityBudget(
            max_actions=1,
            max_camera_changes=0,
            max_reveals=0,
            pacing_guidance="ONE action, locked camera. No reveals or transitions.",
            warning="Short duration - single continuous action, no complexity.",
        ),
    ),
    (
        7,
        ComplexityBudget(
            max_actions=1,
            max_camera_changes=1,
            max_reveals=0,
            pacing_guidance="ONE primary action, ONE camera behavior. No reveals. Moderate pacing.",
        ),
    ),
    (
        10,
        ComplexityBudget(
            max_actions=1,
            max_camera_changes=1,
            max_reveals=0,
            pacing_guidance=(
                "ONE action with development, ONE camera move. Deliberate pacing. "
                "Can include subtle secondary motion (background elements)."
            ),
        ),
    ),
    (
        15,
        ComplexityBudget(
            max_actions=2,
            max_camera_changes=1,
            max_reveals=1,
            pacing_guidance=(
                "Can introduce ONE transition or reveal. Slow, deliberate pacing. "
                "Primary action can develop over time. Secondary action allowed in final third."
            ),
        ),
    ),
)

_EXTENDED = ComplexityBudget(
    max_actions=2,
    max_camera_changes=2,
    max_reveals=1,
    pacing_guidance=(
        "Extended duration allows for scene development. Keep pacing slow. "
        "Maximum two distinct actions. One major reveal allowed."
    ),
    warning=(
        "Long duration - maintain consistency is harder. "
        "Consider breaking into multiple clips."
    ),
)


def get_complexity_budget(duration_seconds: float) -> ComplexityBudget:
    """Get the complexity budget for a clip duration.

    Negative durations are treated as zero. Total: every duration maps to
    exactly one budget.
    """
    duration = max(0.0, float(duration_seconds))
    for upper_bound, budget in _BREAKPOINTS:
        if duration <= upper_bound:
            return budget
    return _EXTENDED


def _format_seconds(duration: float) -> str:
    return str(int(duration)) if float(duration).is_integer() else f"{duration:g}"

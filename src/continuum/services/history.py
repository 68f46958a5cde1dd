"""Recent-history pattern detection.

Looks at a tenant's last prompts for habits worth carrying forward: a
preferred frame rate, a recurring camera movement, a favourite platform and
phrases that keep showing up in well-rated prompts.
"""

import re
from collections import Counter
from dataclasses import dataclass, field

from continuum.domain.enums import PatternType
from continuum.domain.models import HistoryEntry

MIN_HISTORY = 3
MIN_HIGH_RATED = 2
MAX_PHRASES = 3

FPS_PATTERN = re.compile(r"(\d+)\s*fps", re.IGNORECASE)
CAMERA_MOVEMENTS: tuple[str, ...] = (
    "tracking",
    "dolly",
    "pan",
    "tilt",
    "static",
    "handheld",
    "crane",
    "steadicam",
    "locked",
)

FPS_THRESHOLD = 0.5
CAMERA_THRESHOLD = 0.4
PLATFORM_THRESHOLD = 0.5


@dataclass(frozen=True)
class DetectedPattern:
    """A value observed in a share of recent prompts."""

    pattern_type: PatternType
    value: str
    frequency: float

    @property
    def percent(self) -> int:
        return round(self.frequency * 100)

    def describe(self) -> str:
        if self.pattern_type == PatternType.FPS_PREFERENCE:
            return f"{self.value}fps ({self.percent}% of prompts)"
        if self.pattern_type == PatternType.CAMERA_PREFERENCE:
            return f"{self.value} camera ({self.percent}% of prompts)"
        return f"Prefers {self.value} ({self.percent}%)"


@dataclass
class HistoryPatterns:
    """Patterns found in a tenant's recent prompts."""

    history_size: int = 0
    fps: DetectedPattern | None = None
    camera_movement: DetectedPattern | None = None
    preferred_platform: DetectedPattern | None = None
    high_rated_phrases: list[str] = field(default_factory=list)

    @property
    def detected(self) -> list[DetectedPattern]:
        return [p for p in (self.fps, self.camera_movement, self.preferred_platform) if p]

    def descriptions(self) -> list[str]:
        return [p.describe() for p in self.detected]


class HistoryPatternAnalyzer:
    """Detects recurring choices in recent prompt history."""

    def __init__(self, camera_movements: tuple[str, ...] = CAMERA_MOVEMENTS) -> None:
        self.camera_movements = camera_movements

    def analyze(self, history: list[HistoryEntry]) -> HistoryPatterns:
        """Analyze history (newest first). Fewer than three prompts yields nothing."""
        result = HistoryPatterns(history_size=len(history))
        if len(history) < MIN_HISTORY:
            return result

        fps_values = []
        for entry in history:
            match = FPS_PATTERN.search(entry.prompt_text or "")
            if match:
                fps_values.append(match.group(1))
        result.fps = _top(fps_values, PatternType.FPS_PREFERENCE, FPS_THRESHOLD)

        movements = []
        for entry in history:
            text = (entry.prompt_text or "").lower()
            found = next((m for m in self.camera_movements if m in text), None)
            if found:
                movements.append(found)
        result.camera_movement = _top(movements, PatternType.CAMERA_PREFERENCE, CAMERA_THRESHOLD)

        platforms = [entry.platform for entry in history if entry.platform]
        result.preferred_platform = _top(
            platforms, PatternType.PLATFORM_PREFERENCE, PLATFORM_THRESHOLD
        )

        high_rated = [e.prompt_text for e in history if e.rating is not None and e.rating.is_positive]
        if len(high_rated) >= MIN_HIGH_RATED:
            result.high_rated_phrases = common_phrases(high_rated)

        return result


def _top(values: list[str], pattern_type: PatternType, threshold: float) -> DetectedPattern | None:
    """Most frequent value if its share of the observed values meets the threshold."""
    if not values:
        return None
    # most_common keeps first-seen order among equal counts
    value, count = Counter(values).most_common(1)[0]
    frequency = count / len(values)
    if frequency < threshold:
        return None
    return DetectedPattern(pattern_type=pattern_type, value=value, frequency=frequency)


def common_phrases(prompts: list[str], limit: int = MAX_PHRASES) -> list[str]:
    """Three-word phrases that appear at least twice across the prompts."""
    counts: Counter[str] = Counter()
    for prompt in prompts:
        if not prompt:
            continue
        words = prompt.lower().split()
        for i in range(len(words) - 2):
            counts[" ".join(words[i : i + 3])] += 1
    return [phrase for phrase, count in counts.most_common() if count >= 2][:limit]

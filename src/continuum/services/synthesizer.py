"""Prompt synthesis.

Builds the instruction sent to the completion service, calls it once, and
turns the reply into a clean platform-ready prompt. The reply may carry two
kinds of bracketed markers which are extracted and stripped:

    [APPLYING: pattern one, pattern two]   patterns the model applied
    [SUGGESTION: new pattern worth saving] zero or more suggestions
"""

import re
from dataclasses import dataclass, field

import httpx

from continuum.adapters.llm.anthropic import AnthropicProvider
from continuum.adapters.llm.base import LLMMessage, LLMProvider
from continuum.adapters.llm.openai import OpenAIProvider
from continuum.adapters.llm.stub import StubLLMProvider
from continuum.config import settings
from continuum.domain.enums import OutputKind, PatternType, ScreenDirection
from continuum.domain.models import BrandProfile, GenerationRequest, LearnedPattern
from continuum.logging import get_logger
from continuum.presets.platforms import DEFAULT_PLATFORM_CATALOG, PlatformCatalog
from continuum.presets.shots import DEFAULT_SHOT_CATALOG, ShotCatalog, ShotTemplate
from continuum.services.complexity import ComplexityBudget, get_complexity_budget
from continuum.services.history import HistoryPatterns
from continuum.services.policy import ContentPolicyTranslator, TranslationResult

logger = get_logger(__name__)

APPLYING_MARKER = re.compile(r"\[APPLYING:\s*([^\]]+)\]", re.IGNORECASE)
SUGGESTION_MARKER = re.compile(r"\[SUGGESTION:\s*([^\]]+)\]", re.IGNORECASE)

OCCUPANCY_KEYWORDS = (
    "passenger",
    "passengers",
    "empty",
    "no driver",
    "family",
    "couple",
    "two people",
    "driver",
)
DIRECTION_KEYWORDS = ("left to right", "right to left", "left-to-right", "right-to-left")
ROAD_KEYWORDS = ("winding", "curves", "mountain road", "switchback", "serpentine", "road", "highway")
LIGHTING_KEYWORDS = (
    "night",
    "noon",
    "midday",
    "overcast",
    "rain",
    "sunset",
    "sunrise",
    "blue hour",
    "studio",
    "golden hour",
)

DEFAULT_ROAD = "Straight road section, gentle curves only."
DEFAULT_LIGHTING = "Golden hour sunlight, warm tones."
RIGHT_TO_LEFT_TEXT = "traveling screen-right to screen-left"
LEFT_TO_RIGHT_TEXT = "traveling screen-left to screen-right"

REFINE_SYSTEM_PROMPT = """You are refining an existing AI video/image generation prompt.

CRITICAL RULES FOR REFINEMENT:
1. PRESERVE CORE STRUCTURE
   - Keep motion-first methodology (for video)
   - Maintain brand elements
   - Preserve technical specifications

2. INCORPORATE USER FEEDBACK
   - User wants to change: {feedback}
   - Make targeted refinements only

3. MAINTAIN PLATFORM OPTIMIZATION
   - This is for {platform}
   - Keep platform-specific optimizations

DO NOT:
- Completely rewrite (this is refinement, not regeneration)
- Remove core brand elements
- Change fundamental shot structure

OUTPUT:
Refined prompt only. No explanation, no preamble."""


class GenerationError(Exception):
    """Raised when the completion service fails or returns an unusable body."""

    pass


@dataclass
class AppliedDefaults:
    """Attribute text sent with the request; None means the user specified it."""

    occupancy: str | None = None
    screen_direction: str | None = None
    road_type: str | None = None
    lighting: str | None = None
    modifications: list[str] = field(default_factory=list)

    def lines(self) -> list[str]:
        lines = []
        if self.occupancy:
            lines.append(f"Occupancy: {self.occupancy}")
        if self.screen_direction:
            lines.append(f"Direction: {self.screen_direction}")
        if self.road_type:
            lines.append(f"Road: {self.road_type}")
        if self.lighting:
            lines.append(f"Lighting: {self.lighting}")
        return lines


@dataclass
class ParsedResponse:
    """Completion text with markers extracted."""

    text: str
    applied_patterns: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


@dataclass
class SynthesisContext:
    """Tenant state read before synthesis."""

    brand: BrandProfile | None = None
    intelligence: list[LearnedPattern] = field(default_factory=list)
    platform_issues: list[LearnedPattern] = field(default_factory=list)
    history: HistoryPatterns | None = None


@dataclass
class SynthesisResult:
    """A synthesized prompt and everything extracted along the way."""

    prompt_text: str
    applied_patterns: list[str]
    suggestions: list[str]
    warnings: list[str]
    translation: TranslationResult
    shot_template: ShotTemplate
    duration: int
    budget: ComplexityBudget | None = None
    truncated: bool = False
    model: str | None = None


@dataclass
class RefinementResult:
    """A refined prompt."""

    prompt_text: str
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# PURE HELPERS
# =============================================================================


def apply_defaults(
    text: str,
    template: ShotTemplate,
    screen_direction: ScreenDirection | None = None,
) -> AppliedDefaults:
    """Work out which attributes fall back to defaults.

    Each attribute defaults independently and only when the user text (or an
    explicit hint) does not already specify it.
    """
    lower = text.lower()
    defaults = AppliedDefaults()

    if not any(k in lower for k in OCCUPANCY_KEYWORDS):
        defaults.occupancy = template.default_occupancy
        defaults.modifications.append("Applied default: single driver with sunglasses")

    if screen_direction is not None:
        defaults.screen_direction = (
            RIGHT_TO_LEFT_TEXT
            if screen_direction == ScreenDirection.RIGHT_TO_LEFT
            else LEFT_TO_RIGHT_TEXT
        )
    elif not any(k in lower for k in DIRECTION_KEYWORDS):
        defaults.screen_direction = template.default_screen_direction
        defaults.modifications.append("Applied default: screen-left to screen-right")

    if not any(k in lower for k in ROAD_KEYWORDS):
        defaults.road_type = DEFAULT_ROAD
        defaults.modifications.append("Applied default: straight road, gentle curves")

    if not any(k in lower for k in LIGHTING_KEYWORDS):
        defaults.lighting = DEFAULT_LIGHTING
        defaults.modifications.append("Applied default: golden hour lighting")

    return defaults


def parse_markers(text: str) -> ParsedResponse:
    """Extract and strip [APPLYING: ...] and [SUGGESTION: ...] markers."""
    applied: list[str] = []
    match = APPLYING_MARKER.search(text)
    if match:
        applied = [p.strip() for p in match.group(1).split(",") if p.strip()]

    suggestions = [s.strip() for s in SUGGESTION_MARKER.findall(text) if s.strip()]

    cleaned = APPLYING_MARKER.sub("", text)
    cleaned = SUGGESTION_MARKER.sub("", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned).strip()

    return ParsedResponse(text=cleaned, applied_patterns=applied, suggestions=suggestions)


def truncate_to_limit(text: str, limit: int | None) -> tuple[str, bool]:
    """Cut text to a character limit at the last full sentence."""
    if limit is None or len(text) <= limit:
        return text, False
    cut = text[:limit]
    last_period = cut.rfind(".")
    if last_period > 0:
        cut = cut[: last_period + 1]
    return cut.rstrip(), True


# =============================================================================
# SYNTHESIZER
# =============================================================================


class PromptSynthesizer:
    """Turns a generation request into a platform-optimized prompt."""

    def __init__(
        self,
        llm_provider: LLMProvider | None = None,
        translator: ContentPolicyTranslator | None = None,
        shots: ShotCatalog = DEFAULT_SHOT_CATALOG,
        platforms: PlatformCatalog = DEFAULT_PLATFORM_CATALOG,
        min_confidence: float | None = None,
        max_records: int | None = None,
    ) -> None:
        """Initialize the synthesizer.

        Args:
            llm_provider: Optional completion provider. If None, auto-selects based on config.
            translator: Content policy translator (default tables if None)
            shots: Shot template catalog
            platforms: Platform capability catalog
            min_confidence: Lowest intelligence confidence surfaced in the instruction
            max_records: Maximum intelligence records surfaced in the instruction
        """
        self.llm = llm_provider or self._get_default_provider()
        self.translator = translator or ContentPolicyTranslator()
        self.shots = shots
        self.platforms = platforms
        self.min_confidence = (
            settings.intelligence_min_confidence if min_confidence is None else min_confidence
        )
        self.max_records = settings.intelligence_max_records if max_records is None else max_records

    def _get_default_provider(self) -> LLMProvider:
        """Get the default completion provider based on available API keys."""
        provider_name = settings.llm_provider.lower()

        if provider_name == "stub":
            return StubLLMProvider()
        if provider_name == "anthropic" and settings.anthropic_api_key:
            return AnthropicProvider()
        if provider_name == "openai" and settings.openai_api_key:
            return OpenAIProvider()

        # Fall back to whichever key is present
        if settings.anthropic_api_key:
            return AnthropicProvider()
        if settings.openai_api_key:
            return OpenAIProvider()

        logger.warning("No LLM API keys configured, using stub provider")
        return StubLLMProvider()

    # -------------------------------------------------------------------------
    # Instruction building
    # -------------------------------------------------------------------------

    def build_instruction(
        self,
        request: GenerationRequest,
        translation: TranslationResult,
        duration: int,
        context: SynthesisContext | None = None,
    ) -> str:
        """Assemble the instruction payload in its fixed section order."""
        context = context or SynthesisContext()
        is_video = request.output_kind == OutputKind.VIDEO
        template = self.shots.template(request.shot_type)
        sections: list[str] = []

        sections.append(
            "You are Continuum, a brand intelligence agent for professional broadcast "
            f"content generation. You generate {request.output_kind.value} prompts optimized "
            f"for {request.platform}. You learn from every interaction and apply what works "
            "for each brand."
        )

        sections.append(f"## SUBJECT\n{translation.translated_text}")

        if is_video:
            budget = get_complexity_budget(duration)
            sections.append(
                "## DURATION-COMPLEXITY RULES\n"
                f"{budget.format_rules(duration)}\n"
                "EXCEEDING THIS BUDGET CAUSES TELEPORTATION/SCENE DRIFT. DO NOT EXCEED."
            )
            sections.append(_MOTION_FIRST)

        sections.append(self._template_section(template, request.platform))
        sections.append(self._platform_section(request.platform))

        if context.brand:
            sections.append(_brand_section(context.brand))

        intelligence = self._intelligence_section(context, request.platform)
        if intelligence:
            sections.append(intelligence)

        history = _history_section(context.history)
        if history:
            sections.append(history)

        defaults = apply_defaults(
            translation.translated_text, template, request.screen_direction
        )
        default_lines = defaults.lines()
        if default_lines:
            sections.append(
                "## APPLIED DEFAULTS (user did not specify these)\n"
                + "\n".join(f"- {line}" for line in default_lines)
            )

        sections.append(self._output_format(context.brand))
        return "\n\n".join(sections)

    def build_user_message(
        self,
        request: GenerationRequest,
        translation: TranslationResult,
        duration: int,
        brand: BrandProfile | None = None,
    ) -> str:
        """Short request line with platform, kind, duration and brand voice."""
        kind = "video" if request.output_kind == OutputKind.VIDEO else "image"
        lines = [f"Generate an optimized {kind} prompt for {request.platform}.", ""]
        if brand:
            lines.append(f"BRAND: {brand.name}")
        lines.append(f"REQUEST: {translation.translated_text}")
        if request.output_kind == OutputKind.VIDEO and duration:
            lines.append(f"DURATION: {duration} seconds")
        if brand and brand.tone_keywords:
            lines.append(f"BRAND VOICE: {', '.join(brand.tone_keywords)}")
        lines.append("")
        lines.append("Apply any relevant learned patterns and brand guidelines for this brand.")
        return "\n".join(lines)

    def _template_section(self, template: ShotTemplate, platform: str) -> str:
        lines = [
            f"## SHOT TEMPLATE: {template.name}",
            f"Camera: {template.camera_instruction}",
            f"Framing: {template.framing_guidance}",
            f"Motion: {template.motion_guidance}",
        ]
        if template.negative_constraints:
            lines.append("NEGATIVE CONSTRAINTS (include these):")
            lines.extend(f"- {c}" for c in template.negative_constraints)
        note = template.platform_note(platform)
        if note:
            lines.append(f"Known {platform} behavior on this shot: {note}")
        return "\n".join(lines)

    def _platform_section(self, platform: str) -> str:
        guidance = self.platforms.guidance_for(platform)
        if guidance:
            lines = [f"## {guidance.format_for_prompt()}"]
        else:
            lines = [f"## PLATFORM: {platform}"]

        caps = self.platforms.capability(platform)
        if caps.validated:
            if caps.notes:
                lines.append(caps.notes)
            if caps.best_for:
                lines.append(f"Best for: {', '.join(caps.best_for)}")
            if caps.weaknesses:
                lines.append(f"Watch for: {', '.join(caps.weaknesses)}")
        return "\n".join(lines)

    def _intelligence_section(self, context: SynthesisContext, platform: str) -> str | None:
        issue_prefix = PatternType.platform_issue("")
        learned = [
            r
            for r in context.intelligence
            if r.confidence >= self.min_confidence and not r.pattern_type.startswith(issue_prefix)
        ][: self.max_records]

        issue_type = PatternType.platform_issue(platform)
        issues = [i for i in context.platform_issues if i.pattern_type == issue_type]

        if not learned and not issues:
            return None

        lines = ["## LEARNED BRAND INTELLIGENCE"]
        for record in learned:
            lines.append(
                f"- {record.pattern_type}: {record.pattern_value} "
                f"(confidence: {round(record.confidence * 100)}%, seen {record.occurrences}x)"
            )
        if issues:
            lines.append(f"Known issues reported on {platform} (avoid triggering these):")
            lines.extend(f"- {i.pattern_value} (reported {i.occurrences}x)" for i in issues)
        return "\n".join(lines)

    @staticmethod
    def _output_format(brand: BrandProfile | None) -> str:
        lines = [
            "## OUTPUT FORMAT",
            "1. If applying patterns: Start with [APPLYING: pattern1, pattern2]",
            "2. Generate the optimized prompt as continuous prose",
        ]
        if brand and brand.has_structured_guidelines and brand.color_palette:
            lines.append("   -> Reference specific colors by hex value from the brand palette")
        if brand and brand.tone_keywords:
            lines.append(f"   -> Reflect brand tone: {', '.join(brand.tone_keywords[:3])}")
        lines.append(
            "3. If you notice a new pattern worth saving: End with [SUGGESTION: description]"
        )
        lines.append("")
        lines.append("Generate the prompt now.")
        return "\n".join(lines)

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    async def synthesize(
        self,
        request: GenerationRequest,
        context: SynthesisContext | None = None,
    ) -> SynthesisResult:
        """Synthesize a prompt for a request.

        Args:
            request: The validated generation request
            context: Brand, intelligence and history for the tenant

        Returns:
            SynthesisResult with the cleaned prompt and extracted markers

        Raises:
            GenerationError: If the completion call fails or returns nothing usable
        """
        context = context or SynthesisContext()
        duration = request.effective_duration(settings.default_video_duration)
        translation = self.translator.translate(request.description)
        template = self.shots.template(request.shot_type)

        instruction = self.build_instruction(request, translation, duration, context)
        user_message = self.build_user_message(request, translation, duration, context.brand)

        logger.info(
            "synthesis_started",
            platform=request.platform,
            output_kind=request.output_kind.value,
            shot_type=request.shot_type.value,
            duration=duration,
            was_translated=translation.was_translated,
            provider=self.llm.name,
        )

        content, model = await self._complete(
            instruction, user_message, settings.completion_max_tokens
        )
        parsed = parse_markers(content)
        if not parsed.text:
            raise GenerationError("Completion service returned an empty prompt")

        warnings: list[str] = []
        budget = None
        if request.output_kind == OutputKind.VIDEO:
            budget = get_complexity_budget(duration)
            if budget.warning:
                warnings.append(budget.warning)

        limit = self.platforms.char_limit(request.platform)
        prompt_text, truncated = truncate_to_limit(parsed.text, limit)
        if truncated:
            warnings.append(f"Prompt truncated to {limit} characters for {request.platform}")

        logger.info(
            "prompt_synthesized",
            platform=request.platform,
            chars=len(prompt_text),
            applied=len(parsed.applied_patterns),
            suggestions=len(parsed.suggestions),
            truncated=truncated,
        )

        return SynthesisResult(
            prompt_text=prompt_text,
            applied_patterns=parsed.applied_patterns,
            suggestions=parsed.suggestions,
            warnings=warnings,
            translation=translation,
            shot_template=template,
            duration=duration,
            budget=budget,
            truncated=truncated,
            model=model,
        )

    async def refine(self, original: str, platform: str, feedback: str | None) -> RefinementResult:
        """Refine an existing prompt with user feedback, keeping its structure.

        Raises:
            GenerationError: If the completion call fails or returns nothing usable
        """
        if not original or not original.strip():
            raise ValueError("original prompt is required")
        platform = platform.strip().lower()

        system = REFINE_SYSTEM_PROMPT.format(
            feedback=feedback or "minor adjustments", platform=platform
        )
        user_message = (
            f"Original Prompt:\n{original}\n\n"
            f"Platform: {platform}\n\n"
            f"User Feedback/Changes: {feedback or 'minor adjustments'}\n\n"
            "Refine the prompt based on user feedback while preserving core structure."
        )

        content, _model = await self._complete(system, user_message, settings.refine_max_tokens)
        refined = parse_markers(content).text
        if not refined:
            raise GenerationError("Completion service returned an empty refinement")

        warnings: list[str] = []
        limit = self.platforms.char_limit(platform)
        refined, truncated = truncate_to_limit(refined, limit)
        if truncated:
            warnings.append(f"Prompt truncated to {limit} characters for {platform}")

        logger.info("prompt_refined", platform=platform, chars=len(refined))
        return RefinementResult(prompt_text=refined, warnings=warnings)

    async def _complete(self, system: str, user: str, max_tokens: int) -> tuple[str, str]:
        messages = [
            LLMMessage(role="system", content=system),
            LLMMessage(role="user", content=user),
        ]
        try:
            response = await self.llm.complete(messages=messages, max_tokens=max_tokens)
        except httpx.TimeoutException as e:
            logger.error("completion_timeout", provider=self.llm.name, error=str(e))
            raise GenerationError("Completion service timed out") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "completion_failed",
                provider=self.llm.name,
                status_code=e.response.status_code,
            )
            raise GenerationError(
                f"Completion service returned status {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("completion_failed", provider=self.llm.name, error=str(e))
            raise GenerationError(f"Completion service failed: {e}") from e

        if not isinstance(response.content, str):
            raise GenerationError("Completion service returned a malformed body")
        return response.content, response.model


# =============================================================================
# STATIC SECTIONS
# =============================================================================

_MOTION_FIRST = """## MOTION-FIRST METHODOLOGY (required for video)
1. MOTION DIRECTIVES FIRST
   Start with speed/movement, not static description.
   Good: "Slow forward tracking at 5mph through..."
   Bad: "A car in a warehouse..."
2. CAMERA LOCK COMMANDS
   Use mounting language: "Camera mounted on tracking vehicle's left side",
   not "parallel tracking shot". Add "No pan or tilt" where the camera is locked.
3. BACKGROUND MOTION FOR STATIC SUBJECTS
   Prevents freeze-frame artifacts: "Dust particles drifting through light".
4. NEGATIVE CONSTRAINTS
   State what should NOT happen: "No zoom, no rack focus, no Dutch angle".
5. FINAL SENTENCE
   Reinforce the primary motion so the clip does not freeze at the end."""


def _brand_section(brand: BrandProfile) -> str:
    if brand.guidelines_source:
        indicator = f"[Guidelines: {brand.guidelines_source}]"
    else:
        indicator = "[No guidelines configured - using basic brand info]"

    lines = [f"## BRAND: {brand.name}", indicator]
    if brand.description:
        lines.append(f"Description: {brand.description}")
    if brand.industry:
        lines.append(f"Industry: {brand.industry}")
    if brand.guidelines:
        lines.append(f"Guidelines: {', '.join(brand.guidelines)}")

    if brand.has_structured_guidelines:
        lines.append("BRAND GUIDELINES")
        if brand.color_palette:
            lines.append("COLOR PALETTE (use these exact values when describing colors):")
            for color in brand.color_palette:
                line = f"  - {color.get('hex', '')}"
                if color.get("name"):
                    line += f" ({color['name']})"
                if color.get("usage"):
                    line += f" - {color['usage']}"
                lines.append(line)
        typography = brand.typography or {}
        font_lines = [
            f"  - {label}: {typography[key]}"
            for key, label in (
                ("primary_font", "Primary Font"),
                ("secondary_font", "Secondary Font"),
                ("rules", "Rules"),
            )
            if typography.get(key)
        ]
        if font_lines:
            lines.append("TYPOGRAPHY:")
            lines.extend(font_lines)
        if brand.tone_keywords:
            lines.append(f"BRAND TONE: {', '.join(brand.tone_keywords)}")
        if brand.visual_rules and brand.visual_rules.strip():
            lines.append(f"VISUAL RULES (MUST follow):\n{brand.visual_rules.strip()}")
        if brand.document_url:
            lines.append(f"Reference: {brand.document_url}")

    return "\n".join(lines)


def _history_section(history: HistoryPatterns | None) -> str | None:
    if history is None:
        return None
    lines: list[str] = []
    descriptions = history.descriptions()
    if descriptions:
        lines.append(f"## DETECTED PATTERNS (from last {history.history_size} prompts)")
        lines.extend(f"- {d}" for d in descriptions)
        lines.append("Apply these patterns unless the request explicitly contradicts them.")
    if history.high_rated_phrases:
        lines.append("HIGH-RATED PHRASES (appeared in successful prompts):")
        lines.extend(f'- "{p}"' for p in history.high_rated_phrases)
    return "\n".join(lines) if lines else None

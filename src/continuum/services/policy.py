"""Content policy translation.

Generation services refuse or degrade prompts that name trademarked vehicles.
Restricted brand references are rewritten into descriptive equivalents before
any text leaves the engine: a known brand + model becomes the model identifier
plus visual descriptors, a bare brand becomes a generic vehicle category.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from continuum.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ModelTranslation:
    """Replacement for a specific brand + model phrase."""

    model: str
    descriptors: str

    @property
    def replacement(self) -> str:
        return f"{self.model} {self.descriptors}"


@dataclass
class TranslationResult:
    """Outcome of translating one piece of user text."""

    translated_text: str
    matched_phrase: str | None = None

    @property
    def was_translated(self) -> bool:
        return self.matched_phrase is not None


# =============================================================================
# TRANSLATION TABLES
# =============================================================================

# Checked first, in insertion order
MODEL_TRANSLATIONS: Mapping[str, ModelTranslation] = MappingProxyType(
    {
        # Porsche
        "porsche 911": ModelTranslation("911", "sports coupe with rear-engine silhouette"),
        "porsche taycan": ModelTranslation("Taycan", "electric sports sedan with sleek profile"),
        "porsche macan": ModelTranslation("Macan", "compact luxury SUV"),
        "porsche cayenne": ModelTranslation("Cayenne", "luxury performance SUV"),
        # Tesla
        "tesla model s": ModelTranslation("Model S", "electric luxury sedan with minimalist design"),
        "tesla model 3": ModelTranslation("Model 3", "compact electric sedan with clean lines"),
        "tesla model x": ModelTranslation("Model X", "electric SUV with falcon-wing doors"),
        "tesla model y": ModelTranslation("Model Y", "compact electric crossover"),
        "tesla cybertruck": ModelTranslation("Cybertruck", "angular stainless steel electric pickup"),
        # BMW
        "bmw m3": ModelTranslation("M3", "high-performance sport sedan"),
        "bmw m4": ModelTranslation("M4", "performance coupe with aggressive styling"),
        "bmw m5": ModelTranslation("M5", "executive performance sedan"),
        "bmw i4": ModelTranslation("i4", "electric gran coupe"),
        "bmw ix": ModelTranslation("iX", "electric luxury SUV with bold grille"),
        # Mercedes
        "mercedes amg gt": ModelTranslation("AMG GT", "long-hood grand touring coupe"),
        "mercedes s-class": ModelTranslation("S-Class", "flagship luxury sedan"),
        "mercedes eqs": ModelTranslation("EQS", "aerodynamic electric luxury sedan"),
        "mercedes g-wagon": ModelTranslation("G-Wagon", "boxy luxury off-roader"),
        "mercedes g-class": ModelTranslation("G-Class", "boxy luxury off-roader"),
        # Audi
        "audi r8": ModelTranslation("R8", "mid-engine supercar with side blades"),
        "audi rs6": ModelTranslation("RS6", "high-performance luxury wagon"),
        "audi e-tron gt": ModelTranslation("e-tron GT", "electric grand tourer"),
        # Italian exotics
        "ferrari 488": ModelTranslation("488", "mid-engine Italian supercar"),
        "ferrari sf90": ModelTranslation("SF90", "hybrid Italian hypercar"),
        "ferrari roma": ModelTranslation("Roma", "elegant front-engine grand tourer"),
        "lamborghini huracan": ModelTranslation("Huracan", "angular mid-engine supercar"),
        "lamborghini urus": ModelTranslation("Urus", "aggressive super SUV"),
        "lamborghini revuelto": ModelTranslation("Revuelto", "V12 hybrid supercar with scissor doors"),
        # American
        "ford mustang": ModelTranslation("Mustang", "American muscle car with fastback profile"),
        "ford f-150": ModelTranslation("F-150", "full-size pickup truck"),
        "ford bronco": ModelTranslation("Bronco", "rugged off-road SUV"),
        "chevrolet corvette": ModelTranslation("Corvette", "mid-engine American sports car"),
        "chevrolet camaro": ModelTranslation("Camaro", "American muscle coupe"),
        "dodge challenger": ModelTranslation("Challenger", "retro American muscle car"),
        # Japanese
        "nissan gt-r": ModelTranslation("GT-R", "Japanese performance coupe"),
        "toyota supra": ModelTranslation("Supra", "Japanese sports coupe with long hood"),
        "honda nsx": ModelTranslation("NSX", "Japanese hybrid supercar"),
        "mazda mx-5": ModelTranslation("MX-5", "lightweight roadster"),
        # British
        "aston martin db11": ModelTranslation("DB11", "British grand tourer with sculpted bodywork"),
        "aston martin vantage": ModelTranslation("Vantage", "British sports car"),
        "mclaren 720s": ModelTranslation("720S", "British supercar with dihedral doors"),
        "bentley continental": ModelTranslation("Continental", "British luxury grand tourer"),
        "rolls-royce phantom": ModelTranslation("Phantom", "ultra-luxury sedan with commanding presence"),
        # Electric startups
        "rivian r1t": ModelTranslation("R1T", "electric adventure pickup"),
        "rivian r1s": ModelTranslation("R1S", "electric adventure SUV"),
        "lucid air": ModelTranslation("Air", "sleek electric luxury sedan"),
    }
)

BRAND_FALLBACKS: Mapping[str, str] = MappingProxyType(
    {
        "porsche": "German sports car",
        "tesla": "electric vehicle",
        "bmw": "German luxury car",
        "mercedes-benz": "luxury sedan",
        "mercedes": "luxury sedan",
        "audi": "German luxury car",
        "ferrari": "Italian supercar",
        "lamborghini": "Italian supercar",
        "ford": "American vehicle",
        "chevrolet": "American vehicle",
        "chevy": "American vehicle",
        "dodge": "American muscle car",
        "nissan": "Japanese vehicle",
        "toyota": "Japanese vehicle",
        "honda": "Japanese vehicle",
        "mazda": "Japanese vehicle",
        "aston martin": "British grand tourer",
        "mclaren": "British supercar",
        "bentley": "British luxury car",
        "rolls-royce": "ultra-luxury vehicle",
        "rivian": "electric adventure vehicle",
        "lucid": "electric luxury sedan",
    }
)


class ContentPolicyTranslator:
    """Rewrites restricted brand references into policy-compliant descriptions.

    Args:
        model_translations: brand + model phrase -> replacement, checked first
        brand_fallbacks: bare brand name -> generic category
    """

    def __init__(
        self,
        model_translations: Mapping[str, ModelTranslation] = MODEL_TRANSLATIONS,
        brand_fallbacks: Mapping[str, str] = BRAND_FALLBACKS,
    ) -> None:
        self._models = [
            (phrase, re.compile(re.escape(phrase), re.IGNORECASE), translation.replacement)
            for phrase, translation in model_translations.items()
        ]
        # Longest first so "mercedes-benz" is not shadowed by "mercedes"
        brands = sorted(brand_fallbacks.items(), key=lambda item: len(item[0]), reverse=True)
        self._brands = [
            (brand, self._word_pattern(brand), category) for brand, category in brands
        ]

    @staticmethod
    def _word_pattern(phrase: str) -> re.Pattern[str]:
        # \b fails next to a trailing hyphen, so use explicit word-char lookarounds
        return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)", re.IGNORECASE)

    def translate(self, text: str) -> TranslationResult:
        """Translate restricted references in the text.

        The first matching brand + model phrase has all its occurrences
        replaced. Bare brand names left over afterwards (or present when no
        model matched) become their generic category, so the output never
        contains a restricted name and a second pass is a no-op. The reported
        matched phrase is the first one found. Never raises.
        """
        if not text:
            return TranslationResult(translated_text=text or "")

        matched: str | None = None
        translated = text

        for phrase, pattern, replacement in self._models:
            if pattern.search(translated):
                translated = pattern.sub(lambda _m: replacement, translated)
                matched = phrase
                break

        for brand, pattern, category in self._brands:
            if pattern.search(translated):
                translated = pattern.sub(lambda _m: category, translated)
                matched = matched or brand

        if matched:
            logger.debug("policy_translated", matched=matched)
        return TranslationResult(translated_text=translated, matched_phrase=matched)


_default_translator: ContentPolicyTranslator | None = None


def translate_for_policy(text: str) -> TranslationResult:
    """Translate text with the default tables."""
    global _default_translator
    if _default_translator is None:
        _default_translator = ContentPolicyTranslator()
    return _default_translator.translate(text)

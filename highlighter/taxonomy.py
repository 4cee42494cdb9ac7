"""Manipulation taxonomy, colors and category lookup tables."""

from enum import Enum


class ManipulationType(str, Enum):
    """Closed set of manipulation techniques reported by the classifier."""

    # Emotional Manipulation
    FEAR_MONGERING = "fear_mongering"
    OUTRAGE_BAIT = "outrage_bait"
    EMOTIONAL_APPEAL = "emotional_appeal"
    # Logical Fallacies
    STRAWMAN = "strawman"
    AD_HOMINEM = "ad_hominem"
    FALSE_DICHOTOMY = "false_dichotomy"
    SLIPPERY_SLOPE = "slippery_slope"
    # Information Distortion
    CHERRY_PICKING = "cherry_picking"
    MISLEADING_STATISTICS = "misleading_statistics"
    FALSE_CORRELATION = "false_correlation"
    QUOTE_MINING = "quote_mining"
    # Persuasion Techniques
    BANDWAGON = "bandwagon"
    AUTHORITY_APPEAL = "authority_appeal"
    LOADED_LANGUAGE = "loaded_language"
    REPETITION = "repetition"
    # Structural Manipulation
    HEADLINE_MISMATCH = "headline_mismatch"
    BURIED_LEDE = "buried_lede"
    FALSE_BALANCE = "false_balance"

    def __str__(self) -> str:
        return self.value


MANIPULATION_CATEGORIES: dict[str, tuple[ManipulationType, ...]] = {
    "Emotional Manipulation": (
        ManipulationType.FEAR_MONGERING,
        ManipulationType.OUTRAGE_BAIT,
        ManipulationType.EMOTIONAL_APPEAL,
    ),
    "Logical Fallacies": (
        ManipulationType.STRAWMAN,
        ManipulationType.AD_HOMINEM,
        ManipulationType.FALSE_DICHOTOMY,
        ManipulationType.SLIPPERY_SLOPE,
    ),
    "Information Distortion": (
        ManipulationType.CHERRY_PICKING,
        ManipulationType.MISLEADING_STATISTICS,
        ManipulationType.FALSE_CORRELATION,
        ManipulationType.QUOTE_MINING,
    ),
    "Persuasion Techniques": (
        ManipulationType.BANDWAGON,
        ManipulationType.AUTHORITY_APPEAL,
        ManipulationType.LOADED_LANGUAGE,
        ManipulationType.REPETITION,
    ),
    "Structural Manipulation": (
        ManipulationType.HEADLINE_MISMATCH,
        ManipulationType.BURIED_LEDE,
        ManipulationType.FALSE_BALANCE,
    ),
}

CATEGORY_BY_TYPE: dict[ManipulationType, str] = {
    manipulation_type: category
    for category, types in MANIPULATION_CATEGORIES.items()
    for manipulation_type in types
}

# One color per category: red, orange, yellow, blue, purple
CATEGORY_COLORS: dict[str, str] = {
    "Emotional Manipulation": "#FF6B6B",
    "Logical Fallacies": "#FFB347",
    "Information Distortion": "#FFD93D",
    "Persuasion Techniques": "#6BCEFF",
    "Structural Manipulation": "#B19CD9",
}

MANIPULATION_COLORS: dict[ManipulationType, str] = {
    manipulation_type: CATEGORY_COLORS[category]
    for manipulation_type, category in CATEGORY_BY_TYPE.items()
}


def get_category(manipulation_type: ManipulationType) -> str:
    """Return the category name for a manipulation type, or "Unknown"."""
    return CATEGORY_BY_TYPE.get(manipulation_type, "Unknown")


def format_manipulation_type(manipulation_type: ManipulationType) -> str:
    """Turn ``fear_mongering`` into ``Fear Mongering``."""
    return " ".join(word.capitalize() for word in str(manipulation_type).split("_"))

"""
Risk and positive factor table for outcome prediction.

Severity is signed: risks are positive, positive factors negative. The
predictor sums risks, subtracts the absolute positive severities, and maps
the net score onto a risk level:

    net >= HIGH_RISK_THRESHOLD   → "high"
    net >= MEDIUM_RISK_THRESHOLD → "medium"
    otherwise                    → "low"

``no_cook_trials`` sits below ``MEDIUM_RISK_THRESHOLD`` on its own: an
untested fork with no other signals is "low" risk with low confidence, and
the recommendation still says to proceed with caution because it has fewer
than ``CAUTION_MIN_COOKS`` trials.

This module has NO imports from any other ``fork_engine`` package.
"""

RISK_FACTORS: dict[str, dict] = {
    "no_cook_trials": {
        "type": "warning",
        "icon": "⚠️",
        "title": "Untested Recipe",
        "description": "No one has tried this fork yet. Results may vary.",
        "severity": 4,
    },
    "few_cook_trials": {
        "type": "caution",
        "icon": "⏳",
        "title": "Limited Testing",
        "description": "Only a few people have tried this fork.",
        "severity": 3,
    },
    "low_success_rate": {
        "type": "warning",
        "icon": "📉",
        "title": "Low Success Rate",
        "description": "Many cooks have had issues with this recipe.",
        "severity": 8,
    },
    "moderate_success_rate": {
        "type": "caution",
        "icon": "⚖️",
        "title": "Mixed Results",
        "description": "Success rate is moderate - some cooks had issues.",
        "severity": 5,
    },
    "low_rating": {
        "type": "warning",
        "icon": "⭐",
        "title": "Low Ratings",
        "description": "Average rating is below expectations.",
        "severity": 6,
    },
    "major_substitutions": {
        "type": "caution",
        "icon": "🔄",
        "title": "Major Ingredient Changes",
        "description": "This fork has significant ingredient substitutions.",
        "severity": 5,
    },
    "complex_modifications": {
        "type": "caution",
        "icon": "📝",
        "title": "Many Step Changes",
        "description": "Cooking method differs significantly from original.",
        "severity": 4,
    },
    "worse_than_parent": {
        "type": "warning",
        "icon": "📊",
        "title": "Below Original",
        "description": "This fork has lower ratings than the original recipe.",
        "severity": 6,
    },
}

POSITIVE_FACTORS: dict[str, dict] = {
    "well_tested": {
        "type": "info",
        "icon": "✅",
        "title": "Well Tested",
        "description": "Many cooks have successfully made this recipe.",
        "severity": -5,
    },
    "high_success_rate": {
        "type": "info",
        "icon": "🎯",
        "title": "High Success Rate",
        "description": "Most people succeed with this recipe.",
        "severity": -7,
    },
    "highly_rated": {
        "type": "info",
        "icon": "⭐",
        "title": "Highly Rated",
        "description": "Cooks love this recipe!",
        "severity": -6,
    },
    "better_than_parent": {
        "type": "info",
        "icon": "🏆",
        "title": "Improved Recipe",
        "description": "This fork outperforms the original.",
        "severity": -5,
    },
    "crowd_favorite": {
        "type": "info",
        "icon": "❤️",
        "title": "Crowd Favorite",
        "description": "Most people would make this again.",
        "severity": -6,
    },
    "photo_verified": {
        "type": "info",
        "icon": "📸",
        "title": "Photo Verified",
        "description": "Multiple cooks have shared their results.",
        "severity": -3,
    },
    "minimal_changes": {
        "type": "info",
        "icon": "👍",
        "title": "Minimal Changes",
        "description": "Only minor tweaks from the original recipe.",
        "severity": -2,
    },
}

# ── Rule thresholds ───────────────────────────────────────────────────────────

FEW_TRIALS_MAX = 2              # 1..2 trials → few_cook_trials
WELL_TESTED_MIN = 5
RATES_MIN_COOKS = 3             # success-rate / rating rules need this many
LOW_SUCCESS_RATE = 50.0
MODERATE_SUCCESS_RATE = 70.0    # [50, 70) → moderate
HIGH_SUCCESS_RATE = 85.0
LOW_RATING = 2.5
HIGH_RATING = 3.5
MAJOR_INGREDIENT_CHANGES = 5
MINIMAL_INGREDIENT_CHANGES = 2
COMPLEX_STEP_CHANGES = 5
CROWD_FAVORITE_RATE = 80.0
CROWD_FAVORITE_MIN_ANSWERS = 3
PHOTO_VERIFIED_MIN = 3

HIGH_RISK_THRESHOLD = 10
MEDIUM_RISK_THRESHOLD = 5
CAUTION_MIN_COOKS = 3

# (minimum total_cooks, confidence score), checked top-down
CONFIDENCE_STEPS: tuple[tuple[int, int], ...] = (
    (10, 90),
    (5, 70),
    (3, 50),
    (1, 30),
    (0, 10),
)

RECOMMENDATION_MESSAGES: dict[str, str] = {
    "not_recommended": (
        "This fork has significant risk factors. Consider trying the original "
        "recipe or a better-rated fork instead."
    ),
    "caution_untested": (
        "This fork has limited testing. Be prepared to adjust as you cook."
    ),
    "caution_mixed": (
        "This fork has some mixed results. Pay close attention to the notes "
        "and modifications."
    ),
    "proceed": "This fork has good track record. Enjoy cooking!",
}

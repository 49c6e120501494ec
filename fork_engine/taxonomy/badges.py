"""
Validation badge definitions and thresholds.

``VALIDATION_BADGES`` holds display data; the ``*_`` constants below hold the
thresholds the aggregator evaluates. Both are static so that any change to
who earns what is visible in review.

Badge rules (each independent; several may apply at once):

  | Badge          | Earned when                                              |
  |----------------|----------------------------------------------------------|
  | verified       | successful_cooks >= 5 (else emitted with progress)       |
  | highly_rated   | average_rating >= 3.5 and total_cooks >= 3               |
  | time_accurate  | time_accuracy_rate >= 70 and time_accuracy_reports >= 3  |
  | crowd_favorite | would_make_again_rate >= 80 and total_cooks >= 5         |
  | photo_verified | photos_count >= 3                                        |
  | quick_win      | success_rate >= 85, total_cooks >= 5, avg rating >= 3.5  |

``beginner_friendly`` and ``expert_approved`` are defined for display but
have no rule yet: trials do not record the cook's experience level.

This module has NO imports from any other ``fork_engine`` package.
"""

from enum import StrEnum


class BadgeType(StrEnum):
    VERIFIED = "verified"
    HIGHLY_RATED = "highly_rated"
    TIME_ACCURATE = "time_accurate"
    CROWD_FAVORITE = "crowd_favorite"
    PHOTO_VERIFIED = "photo_verified"
    QUICK_WIN = "quick_win"
    BEGINNER_FRIENDLY = "beginner_friendly"
    EXPERT_APPROVED = "expert_approved"


VALIDATION_BADGES: dict[str, dict[str, str]] = {
    BadgeType.VERIFIED: {
        "label": "Verified",
        "description": "5+ people have successfully made this recipe",
        "icon": "✅",
    },
    BadgeType.HIGHLY_RATED: {
        "label": "Highly Rated",
        "description": "Average rating of 3.5+ stars",
        "icon": "⭐",
    },
    BadgeType.TIME_ACCURATE: {
        "label": "Time Accurate",
        "description": "Cooking time matches what users report",
        "icon": "⏱️",
    },
    BadgeType.CROWD_FAVORITE: {
        "label": "Crowd Favorite",
        "description": "80%+ would make this again",
        "icon": "❤️",
    },
    BadgeType.PHOTO_VERIFIED: {
        "label": "Photo Verified",
        "description": "Multiple users have shared photos",
        "icon": "📸",
    },
    BadgeType.QUICK_WIN: {
        "label": "Quick Win",
        "description": "Fast, easy, and consistently successful",
        "icon": "🚀",
    },
    BadgeType.BEGINNER_FRIENDLY: {
        "label": "Beginner Friendly",
        "description": "High success rate among new cooks",
        "icon": "👶",
    },
    BadgeType.EXPERT_APPROVED: {
        "label": "Expert Approved",
        "description": "Highly rated by experienced cooks",
        "icon": "👨‍🍳",
    },
}

# ── Thresholds ────────────────────────────────────────────────────────────────

SUCCESS_RATING_MIN = 3          # rating >= this counts as a successful cook
PHOTO_VERIFICATION_MIN = 3

VERIFIED_SUCCESSFUL_COOKS = 5
HIGHLY_RATED_MIN_RATING = 3.5
HIGHLY_RATED_MIN_COOKS = 3
TIME_ACCURATE_MIN_RATE = 70
TIME_ACCURATE_MIN_REPORTS = 3
CROWD_FAVORITE_MIN_RATE = 80
CROWD_FAVORITE_MIN_COOKS = 5
QUICK_WIN_MIN_SUCCESS_RATE = 85
QUICK_WIN_MIN_COOKS = 5
QUICK_WIN_MIN_RATING = 3.5

# Parent comparison
COMPARISON_MIN_TRIALS = 3       # both sides need this many trials
COMPARISON_RATING_DELTA = 0.3
COMPARISON_SUCCESS_DELTA = 10.0

RATING_EMOJIS: tuple[str, ...] = ("", "😕", "😐", "🙂", "😍")

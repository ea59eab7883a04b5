"""
FSRS Constants and Parameters

All fixed parameters for the FSRS algorithm in one place.
The weight vector is the 19-parameter FSRS-5 default set.
"""

from enum import IntEnum


# ---- Review Grades ----

class Grade(IntEnum):
    """Learner's self-reported recall quality."""
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved fluently


# Labels used by the card UI ("normal" is the UI's name for Good)
GRADE_LABELS = {
    "again": Grade.AGAIN,
    "hard": Grade.HARD,
    "normal": Grade.GOOD,
    "good": Grade.GOOD,
    "easy": Grade.EASY,
}


# ---- Forgetting Curve ----

DECAY = -0.5
FACTOR = 19.0 / 81.0  # Chosen so that R(t=S) = 0.9


# ---- Global Constants ----

R_TARGET = 0.9   # Default retention target used to size intervals
S_MIN = 1.0      # Stability floor after any subsequent grading (days)
D_MIN = 1.0      # Minimum difficulty
D_MAX = 10.0     # Maximum difficulty
ELAPSED_FALLBACK_RATIO = 0.9  # elapsed ~ S * 0.9 when last review time is unknown
SAME_DAY_THRESHOLD = 1.0      # Reviews closer than this (days) are same-day


# ---- Model Weights ----
# w0..w3   initial stability per grade
# w4, w5   initial difficulty
# w6, w7   difficulty damping and mean reversion
# w8..w10  stability after recall
# w11..w14 stability after lapse
# w15, w16 not used by these formulas
# w17, w18 same-day stability

DEFAULT_WEIGHTS = (
    0.40255, 1.18385, 3.173, 15.69105,
    7.1949, 0.5345,
    1.4604, 0.0046,
    1.54575, 0.1192, 1.01925,
    1.9395, 0.11, 0.29605, 2.2698,
    0.2315, 2.9898,
    0.51655, 0.6621,
)

WEIGHT_COUNT = 19

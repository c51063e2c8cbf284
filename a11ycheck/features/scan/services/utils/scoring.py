import math

ERROR_WEIGHT = 10
WARNING_WEIGHT = 5
NOTICE_WEIGHT = 2

# Each weighted point costs half a score point, and the total penalty is
# capped so a scored page never drops below 5.
PENALTY_PER_POINT = 0.5
MAX_PENALTY = 95


def weighted_issue_count(errors: int, warnings: int, notices: int) -> int:
    return errors * ERROR_WEIGHT + warnings * WARNING_WEIGHT + notices * NOTICE_WEIGHT


def calculate_score(errors: int, warnings: int, notices: int) -> int:
    """
    Accessibility score in [0, 100] from per-severity issue counts.

    3 errors, 2 warnings and 1 notice weigh 42, a 21 point penalty, so 79.
    Halves round up.
    """
    total_weight = weighted_issue_count(max(errors, 0), max(warnings, 0), max(notices, 0))
    raw = 100 - min(MAX_PENALTY, total_weight * PENALTY_PER_POINT)
    return min(100, max(0, math.floor(raw + 0.5)))

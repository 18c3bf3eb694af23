"""Weekly roll-up of daily category scores."""

import math

from shared_types import Trend

TREND_THRESHOLD = 3
MIN_SCORES_FOR_TREND = 4


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_weekly_summary(daily_scores: list[int | float]) -> dict:
    """Average a run of daily scores (oldest first) and classify the trend.

    The trend compares the mean of the second half against the first half,
    split at ``len // 2``; fewer than four scores is always stable.

    >>> calculate_weekly_summary([10, 10, 20, 20])
    {'weeklyScore': 15, 'trend': 'improving', 'delta': 10}
    """
    if not daily_scores:
        return {"weeklyScore": 0, "trend": Trend.STABLE.value, "delta": 0}

    weekly_score = round_half_up(sum(daily_scores) / len(daily_scores))

    if len(daily_scores) >= MIN_SCORES_FOR_TREND:
        midpoint = len(daily_scores) // 2
        first, second = daily_scores[:midpoint], daily_scores[midpoint:]
        delta = round_half_up(sum(second) / len(second) - sum(first) / len(first))
        if delta > TREND_THRESHOLD:
            return {"weeklyScore": weekly_score, "trend": Trend.IMPROVING.value, "delta": delta}
        if delta < -TREND_THRESHOLD:
            return {"weeklyScore": weekly_score, "trend": Trend.DECLINING.value, "delta": delta}

    return {"weeklyScore": weekly_score, "trend": Trend.STABLE.value, "delta": 0}

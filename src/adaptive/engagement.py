# ABOUTME: Scores session engagement from time on task, activity, and help requests.
# ABOUTME: Returns a value in [0, 1]; callers substitute the cold-start default when metrics are absent.

from __future__ import annotations

import math
from typing import Optional

from src.common.config import EngagementConfig
from src.common.errors import ValidationError
from src.common.schemas import EngagementMetrics


def _ratio(value: float, normalizer: float, name: str) -> float:
    if value is None or not math.isfinite(value) or value < 0:
        raise ValidationError(f"Engagement metric '{name}' must be a non-negative number, got {value!r}.")
    return min(value / normalizer, 1.0)


def calculate_engagement(metrics: EngagementMetrics, config: Optional[EngagementConfig] = None) -> float:
    """
    Weighted engagement score.

    Time on task saturates at 5 minutes and activity at 20 actions; help
    requests (saturating at 5) pull the score down.
    """

    cfg = config or EngagementConfig()
    time_score = _ratio(metrics.time_on_task, cfg.time_on_task_seconds, "time_on_task")
    activity_score = _ratio(metrics.activity_count, cfg.activity_count, "activity_count")
    help_score = _ratio(metrics.help_requests, cfg.help_requests, "help_requests")

    score = cfg.time_weight * time_score + cfg.activity_weight * activity_score - cfg.help_weight * help_score
    return max(0.0, min(1.0, score))


def engagement_or_default(
    metrics: Optional[EngagementMetrics],
    default: float = 0.5,
    config: Optional[EngagementConfig] = None,
) -> float:
    if metrics is None:
        return default
    return calculate_engagement(metrics, config)

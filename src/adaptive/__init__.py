# ABOUTME: Groups the adaptive-tutoring services built on the tracker and fuzzy engine.
# ABOUTME: Re-exports engagement scoring, path scheduling, composition, and intervention helpers.

from .composer import RecommendationComposer
from .engagement import calculate_engagement, engagement_or_default
from .intervention import InterventionAdvisor
from .learning_path import LearningPathScheduler

__all__ = [
    "InterventionAdvisor",
    "LearningPathScheduler",
    "RecommendationComposer",
    "calculate_engagement",
    "engagement_or_default",
]

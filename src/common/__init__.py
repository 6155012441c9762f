# ABOUTME: Makes the shared common package importable across the tutoring core.
# ABOUTME: Re-exports schema types, error kinds, config loading, and store implementations.

from .config import TutorConfig, load_tutor_config
from .errors import NotFoundError, TutorCoreError, ValidationError
from .mastery_aggregation import summarize_class_mastery
from .schemas import (
    AdaptiveRecommendation,
    ContentItem,
    EngagementMetrics,
    KnowledgeComponent,
    KnowledgeState,
    LearningPath,
    LearningPathEntry,
    ResponseEvent,
    Student,
)
from .stores import ContentProvider, InMemoryContentProvider, InMemoryStudentStore, StudentStore

__all__ = [
    "AdaptiveRecommendation",
    "ContentItem",
    "ContentProvider",
    "EngagementMetrics",
    "InMemoryContentProvider",
    "InMemoryStudentStore",
    "KnowledgeComponent",
    "KnowledgeState",
    "LearningPath",
    "LearningPathEntry",
    "NotFoundError",
    "ResponseEvent",
    "Student",
    "StudentStore",
    "TutorConfig",
    "TutorCoreError",
    "ValidationError",
    "load_tutor_config",
    "summarize_class_mastery",
]

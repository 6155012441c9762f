# ABOUTME: Defines canonical data structures shared by the tracker, fuzzy engine, and scheduler.
# ABOUTME: Centralizes knowledge-state, learning-path, content, and recommendation records.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

DEFAULT_P_MASTERY = 0.3
DEFAULT_P_TRANSIT = 0.1
DEFAULT_P_GUESS = 0.2
DEFAULT_P_SLIP = 0.1

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
PATH_ACTIVE = "active"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class KnowledgeComponent:
    """Atomic curriculum skill; owned by the content subsystem."""

    id: str
    curriculum_code: str
    grade_level: int
    description: str = ""
    name: str = ""
    prerequisites: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Student:
    id: str
    name: str
    grade_level: int
    language_preference: str = "English"


@dataclass
class KnowledgeState:
    """BKT belief for one (student, knowledge component) pair."""

    student_id: str
    knowledge_component_id: str
    p_mastery: float = DEFAULT_P_MASTERY
    p_transit: float = DEFAULT_P_TRANSIT
    p_guess: float = DEFAULT_P_GUESS
    p_slip: float = DEFAULT_P_SLIP
    updated_at: datetime = field(default_factory=utc_now)
    version: int = 0

    @property
    def key(self) -> tuple:
        return (self.student_id, self.knowledge_component_id)


@dataclass(frozen=True)
class EngagementMetrics:
    """Raw session sample supplied by the external store."""

    time_on_task: float
    activity_count: float
    help_requests: float


@dataclass(frozen=True)
class ResponseEvent:
    student_id: str
    content_id: str
    answer: str
    time_spent_seconds: float
    interaction_data: Mapping[str, Any] = field(default_factory=dict)

    @property
    def hint_requests(self) -> float:
        data = self.interaction_data or {}
        value = data.get("hint_requests", data.get("hintRequests", 0))
        return 0 if value is None else value


@dataclass(frozen=True)
class LearningPathEntry:
    knowledge_component_id: str
    mastery_snapshot: float
    status: str = STATUS_PENDING
    name: str = ""
    curriculum_code: str = ""


@dataclass(frozen=True)
class LearningPath:
    """
    A student's single active path.

    Frozen so a regenerated or updated path is always swapped in as a whole object.
    """

    student_id: str
    sequence: Tuple[LearningPathEntry, ...]
    overall_status: str = PATH_ACTIVE
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        object.__setattr__(self, "sequence", tuple(self.sequence))

    def first_pending(self) -> Optional[LearningPathEntry]:
        for entry in self.sequence:
            if entry.status == STATUS_PENDING:
                return entry
        return None


@dataclass(frozen=True)
class ContentItem:
    """Question or lesson; difficulty is stored on a 1-5 scale."""

    id: str
    knowledge_component_id: str
    content_type: str
    difficulty: int
    canonical_answer: Optional[str] = None
    language: str = "English"
    body: str = ""
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AdaptiveRecommendation:
    """Crisp fuzzy outputs plus their labels and guidance text. Never persisted."""

    difficulty_score: float
    difficulty_label: str
    hint_level_score: float
    hint_level_label: str
    teacher_alert_score: float
    teacher_alert_label: str
    recommendations: Dict[str, str]
    alert_priority: str

    @property
    def recommendation_text(self) -> str:
        return " ".join(
            self.recommendations[key] for key in ("difficulty", "hints", "alert") if key in self.recommendations
        )


@dataclass(frozen=True)
class ContentRecommendation:
    student_id: str
    entry: LearningPathEntry
    knowledge_state: KnowledgeState
    engagement: float
    adaptive: AdaptiveRecommendation
    lessons: List[ContentItem]
    questions: List[ContentItem]


@dataclass(frozen=True)
class ProcessedResponse:
    knowledge_state: KnowledgeState
    correct: bool
    adaptive: AdaptiveRecommendation
    response_time: float
    help_usage: float
    engagement: float


@dataclass(frozen=True)
class InterventionAssessment:
    student_id: str
    average_mastery: float
    engagement: float
    needed: bool
    priority: str
    adaptive: Optional[AdaptiveRecommendation] = None
    error: Optional[str] = None

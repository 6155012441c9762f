# ABOUTME: Orchestrates tracker, engagement scorer, fuzzy engine, and scheduler per student request.
# ABOUTME: Answers "what next" and "what did this response change" for the calling layer.

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from loguru import logger

from src.common.config import TutorConfig
from src.common.errors import ValidationError
from src.common.schemas import (
    ContentRecommendation,
    KnowledgeComponent,
    KnowledgeState,
    LearningPath,
    LearningPathEntry,
    ProcessedResponse,
    ResponseEvent,
)
from src.common.stores import ContentProvider, StudentStore
from src.fuzzy_logic.engine import process_inputs
from src.knowledge_tracing.tracker import KnowledgeStateTracker

from .engagement import engagement_or_default
from .learning_path import LearningPathScheduler


def _non_negative(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValidationError(f"'{name}' must be a finite number, got {value!r}.")
    if value < 0:
        raise ValidationError(f"'{name}' must not be negative, got {value}.")
    return float(value)


class RecommendationComposer:
    """
    Entry point used by the HTTP layer.

    Stores and the content provider are injected; nothing here is process-global.
    """

    def __init__(
        self,
        store: StudentStore,
        content: ContentProvider,
        config: Optional[TutorConfig] = None,
        tracker: Optional[KnowledgeStateTracker] = None,
        scheduler: Optional[LearningPathScheduler] = None,
    ):
        self.store = store
        self.content = content
        self.config = config or TutorConfig()
        self.tracker = tracker or KnowledgeStateTracker(store, self.config.bkt)
        self.scheduler = scheduler or LearningPathScheduler(store)

    def current_engagement(self, student_id: str) -> float:
        metrics = self.store.get_latest_engagement_metrics(student_id)
        return engagement_or_default(metrics, self.config.defaults.engagement, self.config.engagement)

    def get_next_recommended_content(self, student_id: str) -> ContentRecommendation:
        student = self.store.get_student(student_id)
        entry = self.scheduler.get_next(student_id)
        state = self.tracker.get_state(student_id, entry.knowledge_component_id)
        engagement = self.current_engagement(student_id)

        # No live response-time or help signal exists outside a response.
        adaptive = process_inputs(
            {
                "mastery": state.p_mastery,
                "engagement": engagement,
                "responseTime": self.config.defaults.response_time,
                "helpUsage": self.config.defaults.help_usage,
            }
        )

        language = student.language_preference or self.config.content.default_language
        items = self.content.get_content_for_component(
            entry.knowledge_component_id, adaptive.difficulty_score, language
        )
        logger.debug(
            "Next content for {}: kc={} difficulty={:.3f} items={}",
            student_id,
            entry.knowledge_component_id,
            adaptive.difficulty_score,
            len(items),
        )
        return ContentRecommendation(
            student_id=student_id,
            entry=entry,
            knowledge_state=state,
            engagement=engagement,
            adaptive=adaptive,
            lessons=[item for item in items if item.content_type == "lesson"],
            questions=[item for item in items if item.content_type == "question"],
        )

    def process_response(
        self,
        student_id: str,
        content_id: str,
        answer: str,
        time_spent_seconds: float,
        interaction_data: Optional[Mapping[str, Any]] = None,
    ) -> ProcessedResponse:
        event = ResponseEvent(
            student_id=student_id,
            content_id=content_id,
            answer=answer,
            time_spent_seconds=time_spent_seconds,
            interaction_data=dict(interaction_data or {}),
        )
        return self.process_event(event)

    def process_event(self, event: ResponseEvent) -> ProcessedResponse:
        time_spent = _non_negative(event.time_spent_seconds, "time_spent_seconds")
        hint_requests = _non_negative(event.hint_requests, "hint_requests")

        item = self.content.get_content_item(event.content_id)
        correct = event.answer == item.canonical_answer
        state = self.tracker.update(event.student_id, item.knowledge_component_id, correct)

        response_time = min(time_spent / self.config.response.time_spent_seconds, 1.0)
        help_usage = min(hint_requests / self.config.response.hint_requests, 1.0)
        engagement = self.current_engagement(event.student_id)

        adaptive = process_inputs(
            {
                "mastery": state.p_mastery,
                "engagement": engagement,
                "responseTime": response_time,
                "helpUsage": help_usage,
            }
        )
        logger.debug(
            "Processed response {} on {}: correct={} mastery={:.4f}",
            event.student_id,
            event.content_id,
            correct,
            state.p_mastery,
        )
        return ProcessedResponse(
            knowledge_state=state,
            correct=correct,
            adaptive=adaptive,
            response_time=response_time,
            help_usage=help_usage,
            engagement=engagement,
        )

    # Thin delegations exposed to the calling layer.

    def update_knowledge_state(self, student_id: str, kc_id: str, correct: bool) -> KnowledgeState:
        return self.tracker.update(student_id, kc_id, correct)

    def get_knowledge_state(self, student_id: str, kc_id: str) -> KnowledgeState:
        return self.tracker.get_state(student_id, kc_id)

    def recommend_next_component(self, student_id: str, grade_level: Optional[int] = None) -> KnowledgeComponent:
        if grade_level is None:
            grade_level = self.store.get_student(student_id).grade_level
        return self.tracker.recommend_next_component(student_id, grade_level)

    def generate_learning_path(self, student_id: str) -> LearningPath:
        return self.scheduler.generate(student_id)

    def get_next_component(self, student_id: str) -> LearningPathEntry:
        return self.scheduler.get_next(student_id)

    def mark_complete(self, student_id: str, kc_id: str) -> Optional[LearningPath]:
        return self.scheduler.mark_complete(student_id, kc_id)

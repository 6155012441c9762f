# ABOUTME: Flags students who need teacher intervention from mastery and engagement signals.
# ABOUTME: Builds per-student assessments and class-level mastery reports for dashboards.

from __future__ import annotations

from typing import Iterable, List, Optional

import pandas as pd
from loguru import logger

from src.common.config import TutorConfig
from src.common.errors import TutorCoreError
from src.common.mastery_aggregation import summarize_class_mastery
from src.common.schemas import InterventionAssessment, KnowledgeComponent
from src.common.stores import StudentStore
from src.fuzzy_logic.engine import process_inputs

from .engagement import engagement_or_default


class InterventionAdvisor:
    def __init__(self, store: StudentStore, config: Optional[TutorConfig] = None):
        self.store = store
        self.config = config or TutorConfig()

    def assess_student(self, student_id: str) -> InterventionAssessment:
        """
        Run the fuzzy engine on the student's average mastery.

        Average mastery is 0 when no states exist; intervention is needed when
        the crisp teacher-alert score exceeds the configured threshold.
        """

        self.store.get_student(student_id)
        states = self.store.list_knowledge_states(student_id)
        average_mastery = sum(s.p_mastery for s in states) / len(states) if states else 0.0

        metrics = self.store.get_latest_engagement_metrics(student_id)
        engagement = engagement_or_default(metrics, self.config.defaults.engagement, self.config.engagement)

        adaptive = process_inputs(
            {
                "mastery": average_mastery,
                "engagement": engagement,
                "responseTime": self.config.defaults.response_time,
                "helpUsage": self.config.defaults.help_usage,
            }
        )
        needed = adaptive.teacher_alert_score > self.config.intervention.alert_threshold
        if needed:
            logger.info(
                "Intervention flagged for {} (alert={:.3f}, mastery={:.3f}, engagement={:.3f})",
                student_id,
                adaptive.teacher_alert_score,
                average_mastery,
                engagement,
            )
        return InterventionAssessment(
            student_id=student_id,
            average_mastery=average_mastery,
            engagement=engagement,
            needed=needed,
            priority=adaptive.teacher_alert_label,
            adaptive=adaptive,
        )

    def assess_classroom(self, student_ids: Iterable[str]) -> List[InterventionAssessment]:
        """Assess every student; a failing student is reported in its own row."""
        assessments: List[InterventionAssessment] = []
        for student_id in student_ids:
            try:
                assessments.append(self.assess_student(student_id))
            except TutorCoreError as exc:
                logger.warning("Could not assess {}: {}", student_id, exc)
                assessments.append(
                    InterventionAssessment(
                        student_id=student_id,
                        average_mastery=0.0,
                        engagement=self.config.defaults.engagement,
                        needed=False,
                        priority="",
                        error=str(exc),
                    )
                )
        return assessments

    def class_mastery_report(
        self,
        student_ids: Iterable[str],
        components: Iterable[KnowledgeComponent],
    ) -> pd.DataFrame:
        states = []
        for student_id in student_ids:
            states.extend(self.store.list_knowledge_states(student_id))
        return summarize_class_mastery(states, components)

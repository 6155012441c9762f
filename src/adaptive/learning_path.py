# ABOUTME: Sequences a student's knowledge components from weakest to strongest mastery.
# ABOUTME: Keeps one active path per student and swaps it in whole on every change.

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional, Tuple

from loguru import logger

from src.common.errors import NotFoundError
from src.common.locks import KeyedLocks
from src.common.schemas import (
    STATUS_COMPLETED,
    STATUS_PENDING,
    LearningPath,
    LearningPathEntry,
    utc_now,
)
from src.common.stores import StudentStore


class LearningPathScheduler:
    """
    Orders knowledge components by ascending mastery and tracks pending/completed progress.

    Regeneration replaces the previous sequence wholesale; completed history is not carried over.
    """

    def __init__(self, store: StudentStore):
        self.store = store
        self._locks = KeyedLocks()

    def _lock_for(self, student_id: str) -> threading.RLock:
        return self._locks(student_id)

    def generate(self, student_id: str) -> LearningPath:
        with self._lock_for(student_id):
            path = self._build_path(student_id)
            self.store.put_learning_path(path)
        logger.info("Generated learning path for {} with {} components", student_id, len(path.sequence))
        return path

    def _build_path(self, student_id: str) -> LearningPath:
        student = self.store.get_student(student_id)
        components = self.store.get_knowledge_components(student.grade_level)
        masteries = {
            state.knowledge_component_id: state.p_mastery
            for state in self.store.list_knowledge_states(student_id)
        }

        # Components without a state are scheduled first (mastery 0).
        ordered = sorted(components, key=lambda kc: (masteries.get(kc.id, 0.0), kc.curriculum_code))
        sequence = tuple(
            LearningPathEntry(
                knowledge_component_id=kc.id,
                mastery_snapshot=masteries.get(kc.id, 0.0),
                status=STATUS_PENDING,
                name=kc.name,
                curriculum_code=kc.curriculum_code,
            )
            for kc in ordered
        )

        return LearningPath(student_id=student_id, sequence=sequence)

    def get_path(self, student_id: str) -> Optional[LearningPath]:
        return self.store.get_learning_path(student_id)

    def get_next(self, student_id: str) -> LearningPathEntry:
        """
        First pending entry in path order.

        A missing or exhausted path is regenerated once; if it is still empty NotFoundError is raised.
        """

        with self._lock_for(student_id):
            path = self.store.get_learning_path(student_id)
            entry = path.first_pending() if path is not None else None
            if entry is not None:
                return entry

            logger.debug("No pending entries for {}; regenerating learning path", student_id)
            path = self.generate(student_id)
            entry = path.first_pending()
            if entry is None:
                raise NotFoundError(f"No knowledge components available for student '{student_id}'")
            return entry

    def mark_complete(self, student_id: str, kc_id: str) -> Optional[LearningPath]:
        """Mark matching entries completed. Idempotent; returns the current path (or None without one)."""
        with self._lock_for(student_id):
            path = self.store.get_learning_path(student_id)
            if path is None:
                return None
            if not any(
                e.knowledge_component_id == kc_id and e.status != STATUS_COMPLETED for e in path.sequence
            ):
                return path

            sequence = tuple(
                replace(e, status=STATUS_COMPLETED) if e.knowledge_component_id == kc_id else e
                for e in path.sequence
            )
            updated = replace(path, sequence=sequence, updated_at=utc_now())
            self.store.put_learning_path(updated)
        logger.debug("Marked {} complete for {}", kc_id, student_id)
        return updated

    def progress(self, student_id: str) -> Tuple[int, int]:
        """(completed, total) entries of the current path."""
        path = self.store.get_learning_path(student_id)
        if path is None:
            return 0, 0
        completed = sum(1 for e in path.sequence if e.status == STATUS_COMPLETED)
        return completed, len(path.sequence)

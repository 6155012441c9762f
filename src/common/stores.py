# ABOUTME: Declares the StudentStore and ContentProvider capabilities the core depends on.
# ABOUTME: Ships thread-safe in-memory implementations used by tests and the demo CLI.

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from .errors import NotFoundError
from .schemas import (
    ContentItem,
    EngagementMetrics,
    KnowledgeComponent,
    KnowledgeState,
    LearningPath,
    Student,
    utc_now,
)


class StudentStore(Protocol):
    def get_student(self, student_id: str) -> Student: ...

    def get_knowledge_components(self, grade_level: int) -> List[KnowledgeComponent]: ...

    def get_knowledge_component(self, kc_id: str) -> KnowledgeComponent: ...

    def get_knowledge_state(self, student_id: str, kc_id: str) -> Optional[KnowledgeState]: ...

    def put_knowledge_state(self, state: KnowledgeState) -> KnowledgeState: ...

    def list_knowledge_states(self, student_id: str) -> List[KnowledgeState]: ...

    def get_learning_path(self, student_id: str) -> Optional[LearningPath]: ...

    def put_learning_path(self, path: LearningPath) -> LearningPath: ...

    def get_latest_engagement_metrics(self, student_id: str) -> Optional[EngagementMetrics]: ...


class ContentProvider(Protocol):
    def get_content_for_component(
        self, kc_id: str, difficulty_score: float, language: str
    ) -> List[ContentItem]: ...

    def get_content_item(self, content_id: str) -> ContentItem: ...


def difficulty_to_level(difficulty_score: float) -> int:
    """Map a 0-1 difficulty score onto the 1-5 content scale."""
    return int(round(difficulty_score * 4)) + 1


class InMemoryStudentStore:
    """
    Dictionary-backed StudentStore.

    Knowledge states are copied on the way in and out so callers never hold a
    reference to the stored record; every write bumps ``version``.
    """

    def __init__(
        self,
        students: Iterable[Student] = (),
        components: Iterable[KnowledgeComponent] = (),
    ):
        self._lock = threading.Lock()
        self._students: Dict[str, Student] = {s.id: s for s in students}
        self._components: Dict[str, KnowledgeComponent] = {kc.id: kc for kc in components}
        self._states: Dict[Tuple[str, str], KnowledgeState] = {}
        self._paths: Dict[str, LearningPath] = {}
        self._metrics: Dict[str, List[EngagementMetrics]] = {}

    def add_student(self, student: Student) -> None:
        with self._lock:
            self._students[student.id] = student

    def add_component(self, component: KnowledgeComponent) -> None:
        with self._lock:
            self._components[component.id] = component

    def record_engagement(self, student_id: str, metrics: EngagementMetrics) -> None:
        with self._lock:
            self._metrics.setdefault(student_id, []).append(metrics)

    def get_student(self, student_id: str) -> Student:
        student = self._students.get(student_id)
        if student is None:
            raise NotFoundError(f"Student '{student_id}' not found")
        return student

    def get_knowledge_components(self, grade_level: int) -> List[KnowledgeComponent]:
        with self._lock:
            components = [kc for kc in self._components.values() if kc.grade_level == grade_level]
        return sorted(components, key=lambda kc: kc.curriculum_code)

    def get_knowledge_component(self, kc_id: str) -> KnowledgeComponent:
        component = self._components.get(kc_id)
        if component is None:
            raise NotFoundError(f"Knowledge component '{kc_id}' not found")
        return component

    def get_knowledge_state(self, student_id: str, kc_id: str) -> Optional[KnowledgeState]:
        with self._lock:
            state = self._states.get((student_id, kc_id))
            return replace(state) if state is not None else None

    def put_knowledge_state(self, state: KnowledgeState) -> KnowledgeState:
        with self._lock:
            previous = self._states.get(state.key)
            version = previous.version + 1 if previous is not None else 1
            stored = replace(state, version=version, updated_at=utc_now())
            self._states[state.key] = stored
            return replace(stored)

    def list_knowledge_states(self, student_id: str) -> List[KnowledgeState]:
        with self._lock:
            return [replace(s) for (sid, _), s in self._states.items() if sid == student_id]

    def get_learning_path(self, student_id: str) -> Optional[LearningPath]:
        with self._lock:
            return self._paths.get(student_id)

    def put_learning_path(self, path: LearningPath) -> LearningPath:
        with self._lock:
            self._paths[path.student_id] = path
            return path

    def get_latest_engagement_metrics(self, student_id: str) -> Optional[EngagementMetrics]:
        with self._lock:
            samples = self._metrics.get(student_id)
            return samples[-1] if samples else None


class InMemoryContentProvider:
    def __init__(self, items: Iterable[ContentItem] = (), max_items: int = 5):
        self._items: Dict[str, ContentItem] = {item.id: item for item in items}
        self.max_items = max_items

    def add_item(self, item: ContentItem) -> None:
        self._items[item.id] = item

    def get_content_for_component(
        self, kc_id: str, difficulty_score: float, language: str
    ) -> List[ContentItem]:
        """Items for the component in ``language``, closest to the requested difficulty first."""
        level = difficulty_to_level(difficulty_score)
        candidates = [
            item
            for item in self._items.values()
            if item.knowledge_component_id == kc_id and item.language == language
        ]
        candidates.sort(key=lambda item: (abs(item.difficulty - level), item.id))
        return candidates[: self.max_items]

    def get_content_item(self, content_id: str) -> ContentItem:
        item = self._items.get(content_id)
        if item is None:
            raise NotFoundError(f"Content item '{content_id}' not found")
        return item

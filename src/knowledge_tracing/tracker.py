# ABOUTME: Tracks per-student, per-skill mastery with Bayesian Knowledge Tracing.
# ABOUTME: Serializes read-modify-write updates per (student, knowledge component) key.

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Dict, List, Mapping, Optional

from loguru import logger

from src.common.config import BKTConfig
from src.common.errors import NotFoundError
from src.common.locks import KeyedLocks
from src.common.schemas import KnowledgeComponent, KnowledgeState
from src.common.stores import StudentStore

from .bkt import BKT_PARAM_NAMES, bkt_update, validate_bkt_params


class KnowledgeStateTracker:
    """
    Owns the mastery update for (student, knowledge component) pairs.

    p_mastery only changes through ``update`` or ``initialize``; transit, guess
    and slip stay fixed unless a state is explicitly reinitialized.
    """

    def __init__(self, store: StudentStore, config: Optional[BKTConfig] = None):
        self.store = store
        self.config = config or BKTConfig()
        self._locks = KeyedLocks()

    def _lock_for(self, student_id: str, kc_id: str) -> threading.RLock:
        return self._locks((student_id, kc_id))

    def _default_params(self) -> Dict[str, float]:
        return {name: getattr(self.config, name) for name in BKT_PARAM_NAMES}

    def initialize(
        self,
        student_id: str,
        kc_id: str,
        params: Optional[Mapping[str, float]] = None,
    ) -> KnowledgeState:
        """Upsert a state with the given or default probabilities; calling twice overwrites."""
        supplied = dict(params or {})
        validate_bkt_params(supplied)
        values = self._default_params()
        values.update({k: float(v) for k, v in supplied.items() if v is not None})

        with self._lock_for(student_id, kc_id):
            existing = self.store.get_knowledge_state(student_id, kc_id)
            if existing is not None:
                state = replace(existing, **values)
            else:
                state = KnowledgeState(student_id=student_id, knowledge_component_id=kc_id, **values)
            stored = self.store.put_knowledge_state(state)
        logger.debug("Initialized knowledge state {} with {}", stored.key, values)
        return stored

    def _get_or_create(self, student_id: str, kc_id: str) -> KnowledgeState:
        state = self.store.get_knowledge_state(student_id, kc_id)
        if state is None:
            state = self.initialize(student_id, kc_id)
        return state

    def get_state(self, student_id: str, kc_id: str) -> KnowledgeState:
        with self._lock_for(student_id, kc_id):
            return self._get_or_create(student_id, kc_id)

    def update(self, student_id: str, kc_id: str, correct: bool) -> KnowledgeState:
        """Bayesian belief update followed by the learning transition."""
        with self._lock_for(student_id, kc_id):
            state = self._get_or_create(student_id, kc_id)
            posterior, new_mastery = bkt_update(
                state.p_mastery,
                state.p_transit,
                state.p_guess,
                state.p_slip,
                bool(correct),
                epsilon=self.config.epsilon,
            )
            stored = self.store.put_knowledge_state(replace(state, p_mastery=new_mastery))

        logger.debug(
            "BKT update {} correct={} mastery {:.4f} -> posterior {:.4f} -> {:.4f}",
            stored.key,
            bool(correct),
            state.p_mastery,
            posterior,
            new_mastery,
        )
        return stored

    def get_all_states(self, student_id: str) -> List[KnowledgeState]:
        """Every stored state of a student, ordered by grade level and curriculum code."""
        states = self.store.list_knowledge_states(student_id)

        def sort_key(state: KnowledgeState):
            try:
                kc = self.store.get_knowledge_component(state.knowledge_component_id)
            except NotFoundError:
                return (1, 0, "", state.knowledge_component_id)
            return (0, kc.grade_level, kc.curriculum_code, state.knowledge_component_id)

        return sorted(states, key=sort_key)

    def recommend_next_component(self, student_id: str, grade_level: int) -> KnowledgeComponent:
        """
        Lowest-mastery component at ``grade_level``.

        Components without a state count as mastery 0; ties go to the smaller curriculum code.
        """

        components = self.store.get_knowledge_components(grade_level)
        if not components:
            raise NotFoundError(f"No knowledge components found for grade level {grade_level}")

        def priority(kc: KnowledgeComponent):
            state = self.store.get_knowledge_state(student_id, kc.id)
            mastery = state.p_mastery if state is not None else 0.0
            return (mastery, kc.curriculum_code)

        return min(components, key=priority)

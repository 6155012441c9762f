# ABOUTME: Shared pytest fixtures for the tutoring core tests.
# ABOUTME: Builds an in-memory classroom with students, grade 7 components, and content items.

from __future__ import annotations

import pytest

from src.adaptive.composer import RecommendationComposer
from src.common.schemas import ContentItem, KnowledgeComponent, Student
from src.common.stores import InMemoryContentProvider, InMemoryStudentStore


@pytest.fixture
def components():
    """Grade 7 ratio components, declared out of curriculum order on purpose."""
    return [
        KnowledgeComponent("KC2", "7.RP.A.2", 7, "Proportional relationships", name="Proportions"),
        KnowledgeComponent("KC1", "7.RP.A.1", 7, "Unit rates", name="Unit rates"),
        KnowledgeComponent("KC3", "7.RP.A.3", 7, "Percent problems", name="Percents"),
        KnowledgeComponent("KC9", "8.EE.A.1", 8, "Integer exponents", name="Exponents"),
    ]


@pytest.fixture
def store(components):
    return InMemoryStudentStore(
        students=[
            Student("S1", "Ana", 7),
            Student("S2", "Ben", 7, language_preference="Filipino"),
            Student("S5", "Eve", 5),
        ],
        components=components,
    )


@pytest.fixture
def content():
    return InMemoryContentProvider(
        [
            ContentItem("Q1", "KC1", "question", 2, canonical_answer="4", body="12 km in 3 min?"),
            ContentItem("Q2", "KC1", "question", 5, canonical_answer="1/2"),
            ContentItem("L1", "KC1", "lesson", 1, body="Unit rates compare to one unit."),
            ContentItem("Q3", "KC2", "question", 3, canonical_answer="15"),
            ContentItem("Q4", "KC1", "question", 2, canonical_answer="8", language="Filipino"),
        ]
    )


@pytest.fixture
def composer(store, content):
    return RecommendationComposer(store, content)

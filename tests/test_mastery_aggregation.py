# ABOUTME: Tests class-level mastery aggregation per knowledge component.
# ABOUTME: Ensures band counts, averages, and curriculum ordering are computed from states.

import pandas as pd
import pytest

from src.common.mastery_aggregation import MASTERY_BANDS, SUMMARY_COLUMNS, mastery_band, summarize_class_mastery
from src.common.schemas import KnowledgeState


def _state(student_id, kc_id, p_mastery):
    return KnowledgeState(student_id=student_id, knowledge_component_id=kc_id, p_mastery=p_mastery)


@pytest.mark.parametrize(
    "p_mastery, band",
    [(0.0, "veryLow"), (0.19, "veryLow"), (0.2, "low"), (0.5, "medium"), (0.79, "high"), (0.8, "veryHigh"), (1.0, "veryHigh")],
)
def test_mastery_band_edges(p_mastery, band):
    assert mastery_band(p_mastery) == band


def test_summarize_counts_bands_and_sorts_by_code(components):
    states = [
        _state("S1", "KC2", 0.1),
        _state("S2", "KC2", 0.45),
        _state("S3", "KC2", 0.5),
        _state("S1", "KC1", 0.85),
        _state("S1", "UNKNOWN", 0.5),
    ]

    summary = summarize_class_mastery(states, components)

    assert list(summary.columns) == SUMMARY_COLUMNS
    assert list(summary["curriculum_code"]) == ["7.RP.A.1", "7.RP.A.2"]

    kc2 = summary[summary["knowledge_component_id"] == "KC2"].iloc[0]
    assert kc2["total_students"] == 3
    assert kc2["average_mastery"] == pytest.approx(1.05 / 3)
    assert [kc2[band] for band in MASTERY_BANDS] == [1, 0, 2, 0, 0]
    assert kc2["name"] == "Proportions"

    kc1 = summary[summary["knowledge_component_id"] == "KC1"].iloc[0]
    assert [kc1[band] for band in MASTERY_BANDS] == [0, 0, 0, 0, 1]


def test_summarize_without_states_is_empty(components):
    summary = summarize_class_mastery([], components)
    assert summary.empty
    assert list(summary.columns) == SUMMARY_COLUMNS


def test_summarize_with_unmatched_states_is_empty():
    summary = summarize_class_mastery([_state("S1", "KC1", 0.4)], [])
    assert isinstance(summary, pd.DataFrame)
    assert summary.empty

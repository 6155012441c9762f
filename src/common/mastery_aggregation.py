# ABOUTME: Aggregates per-student knowledge states into class-level mastery summaries.
# ABOUTME: Buckets mastery into bands per knowledge component for teacher reports.

from __future__ import annotations

from typing import Iterable

import pandas as pd

from .schemas import KnowledgeComponent, KnowledgeState

MASTERY_BANDS = ["veryLow", "low", "medium", "high", "veryHigh"]
# Right-open bins: [0, 0.2), [0.2, 0.4), ... with the top band closed at 1.
_BAND_EDGES = [0.2, 0.4, 0.6, 0.8]

SUMMARY_COLUMNS = [
    "knowledge_component_id",
    "curriculum_code",
    "name",
    "grade_level",
    "total_students",
    "average_mastery",
] + MASTERY_BANDS


def mastery_band(p_mastery: float) -> str:
    for edge, band in zip(_BAND_EDGES, MASTERY_BANDS):
        if p_mastery < edge:
            return band
    return MASTERY_BANDS[-1]


def summarize_class_mastery(
    states: Iterable[KnowledgeState],
    components: Iterable[KnowledgeComponent],
) -> pd.DataFrame:
    """
    Summarize mastery per knowledge component across a cohort.

    Steps:
    - Keep states whose knowledge component is in ``components``.
    - Count students and average mastery per component.
    - Count students in each mastery band.
    - Drop components without data and sort by curriculum code.
    """

    kc_frame = pd.DataFrame(
        [
            {
                "knowledge_component_id": kc.id,
                "curriculum_code": kc.curriculum_code,
                "name": kc.name,
                "grade_level": kc.grade_level,
            }
            for kc in components
        ],
        columns=["knowledge_component_id", "curriculum_code", "name", "grade_level"],
    )
    state_frame = pd.DataFrame(
        [
            {
                "student_id": s.student_id,
                "knowledge_component_id": s.knowledge_component_id,
                "p_mastery": s.p_mastery,
            }
            for s in states
        ],
        columns=["student_id", "knowledge_component_id", "p_mastery"],
    )

    if kc_frame.empty or state_frame.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    joined = state_frame.merge(kc_frame, on="knowledge_component_id", how="inner")
    if joined.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    joined["band"] = joined["p_mastery"].apply(mastery_band)

    grouped = (
        joined.groupby(["knowledge_component_id", "curriculum_code", "name", "grade_level"])
        .agg(
            total_students=("student_id", "nunique"),
            average_mastery=("p_mastery", "mean"),
        )
        .reset_index()
    )
    bands = (
        joined.pivot_table(
            index="knowledge_component_id",
            columns="band",
            values="student_id",
            aggfunc="count",
            fill_value=0,
        )
        .reindex(columns=MASTERY_BANDS, fill_value=0)
        .reset_index()
    )
    bands.columns.name = None

    summary = grouped.merge(bands, on="knowledge_component_id", how="left")
    summary[MASTERY_BANDS] = summary[MASTERY_BANDS].fillna(0).astype(int)
    summary = summary.sort_values("curriculum_code", kind="mergesort").reset_index(drop=True)
    return summary[SUMMARY_COLUMNS]

# ABOUTME: Groups the Bayesian Knowledge Tracing math and the per-student state tracker.
# ABOUTME: Re-exports the tracker and pure update helpers.

from .bkt import bkt_posterior, bkt_update, probability_correct, validate_bkt_params
from .tracker import KnowledgeStateTracker

__all__ = [
    "KnowledgeStateTracker",
    "bkt_posterior",
    "bkt_update",
    "probability_correct",
    "validate_bkt_params",
]

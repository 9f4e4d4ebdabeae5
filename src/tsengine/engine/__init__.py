"""
tsengine.engine - the query pipeline.

Pure stages (no I/O, O(n), no locking):
    resampler.resample         frequency conversion by bucket end
    transformer.apply_transform DIFF / PCT_CHANGE / MOM / YOY / YTD
    filler.fill                 forward / backward fill
    pagination.paginate         1-based page slice
    fingerprint.build_fingerprint

Composition:
    orchestrator.QueryOrchestrator  stores + stages → QueryResult
"""

from tsengine.engine.filler import fill
from tsengine.engine.fingerprint import build_fingerprint, matches_validator
from tsengine.engine.orchestrator import QueryOrchestrator
from tsengine.engine.pagination import Page, paginate
from tsengine.engine.render import render, render_csv, render_json
from tsengine.engine.resampler import bucket_end, resample
from tsengine.engine.revisions import merge_as_of
from tsengine.engine.transformer import apply_transform

__all__ = [
    "QueryOrchestrator",
    "resample",
    "bucket_end",
    "apply_transform",
    "fill",
    "paginate",
    "Page",
    "build_fingerprint",
    "matches_validator",
    "merge_as_of",
    "render",
    "render_csv",
    "render_json",
]

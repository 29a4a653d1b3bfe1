"""Use cases for submitting a batch and following it to completion."""

from .aggregator import ProgressAggregator
from .batch import build_request, collect_items, new_request_id, parse_crop_size, validate_factor
from .ports import (
    Listener,
    ProgressSource,
    ProgressView,
    RequestChannel,
    ResponseChannel,
    ServiceLauncher,
    SnapshotCallback,
)
from .session import ItemProgress, JobSession, SessionSnapshot

__all__ = [
    "ItemProgress",
    "JobSession",
    "Listener",
    "ProgressAggregator",
    "ProgressSource",
    "ProgressView",
    "RequestChannel",
    "ResponseChannel",
    "ServiceLauncher",
    "SessionSnapshot",
    "SnapshotCallback",
    "build_request",
    "collect_items",
    "new_request_id",
    "parse_crop_size",
    "validate_factor",
]

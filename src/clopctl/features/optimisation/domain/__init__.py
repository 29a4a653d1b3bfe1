"""Domain records, wire codec and error taxonomy for batch optimisation."""

from clopctl.shared.errors import (
    ChannelError,
    ChannelTimeoutError,
    ChannelUnreachableError,
    ClopError,
    IncompleteError,
    OptimisationError,
    PayloadDecodeError,
    ValidationError,
)
from .codec import decode, encode, report_to_json
from .models import (
    CropSize,
    FinalReport,
    OptimisationRequest,
    OptimisationResponse,
    OptimisationResponseError,
    ProgressSnapshot,
    StopRequest,
    WireRecord,
    WorkItem,
)

__all__ = [
    "ChannelError",
    "ChannelTimeoutError",
    "ChannelUnreachableError",
    "ClopError",
    "CropSize",
    "FinalReport",
    "IncompleteError",
    "OptimisationError",
    "OptimisationRequest",
    "OptimisationResponse",
    "OptimisationResponseError",
    "PayloadDecodeError",
    "ProgressSnapshot",
    "StopRequest",
    "ValidationError",
    "WireRecord",
    "WorkItem",
    "decode",
    "encode",
    "report_to_json",
]

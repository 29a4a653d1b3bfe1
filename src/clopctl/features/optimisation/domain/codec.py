"""
Summary: JSON wire codec for records exchanged with the optimisation service.
Why: Every frame carries a ``type`` discriminator so receivers know what arrived.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import asdict
from typing import Any, Final

from clopctl.shared.errors import PayloadDecodeError
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

TYPE_KEY: Final[str] = "type"


def _size_to_wire(size: CropSize | None) -> dict[str, int] | None:
    return asdict(size) if size is not None else None


def _size_from_wire(raw: Any) -> CropSize | None:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return CropSize(width=int(raw["width"]), height=int(raw["height"]))
    # [width, height] pairs are accepted as well
    width, height = raw
    return CropSize(width=int(width), height=int(height))


def _optional_float(raw: Any) -> float | None:
    return None if raw is None else float(raw)


def response_to_dict(response: OptimisationResponse) -> dict[str, Any]:
    return {
        "path": response.path,
        "forURL": response.for_item.locator,
        "convertedFrom": response.converted_from,
        "oldBytes": response.old_bytes,
        "newBytes": response.new_bytes,
        "oldSize": _size_to_wire(response.old_size),
        "newSize": _size_to_wire(response.new_size),
    }


def error_to_dict(error: OptimisationResponseError) -> dict[str, Any]:
    return {"error": error.error, "forURL": error.for_item.locator}


def _request_to_dict(request: OptimisationRequest) -> dict[str, Any]:
    return {
        "id": request.request_id,
        "urls": [item.locator for item in request.items],
        "size": _size_to_wire(request.size),
        "downscaleFactor": request.downscale_factor,
        "speedUpFactor": request.speed_up_factor,
        "hideFloatingResult": request.hide_floating_result,
        "copyToClipboard": request.copy_to_clipboard,
        "aggressiveOptimisation": request.aggressive_optimisation,
        "source": request.source,
    }


def _progress_to_dict(snapshot: ProgressSnapshot) -> dict[str, Any]:
    return {
        "forURL": snapshot.for_item.locator,
        "fractionCompleted": snapshot.fraction_completed,
        "description": snapshot.description,
    }


def _stop_to_dict(stop: StopRequest) -> dict[str, Any]:
    return {"ids": list(stop.ids), "remove": stop.remove}


def _request_from_dict(data: Mapping[str, Any]) -> OptimisationRequest:
    return OptimisationRequest(
        request_id=str(data["id"]),
        items=tuple(WorkItem(str(url)) for url in data["urls"]),
        size=_size_from_wire(data.get("size")),
        downscale_factor=_optional_float(data.get("downscaleFactor")),
        speed_up_factor=_optional_float(data.get("speedUpFactor")),
        hide_floating_result=bool(data.get("hideFloatingResult", True)),
        copy_to_clipboard=bool(data.get("copyToClipboard", False)),
        aggressive_optimisation=bool(data.get("aggressiveOptimisation", False)),
        source=str(data.get("source", "cli")),
    )


def _response_from_dict(data: Mapping[str, Any]) -> OptimisationResponse:
    return OptimisationResponse(
        path=str(data["path"]),
        for_item=WorkItem(str(data["forURL"])),
        converted_from=data.get("convertedFrom"),
        old_bytes=int(data.get("oldBytes") or 0),
        new_bytes=int(data.get("newBytes") or 0),
        old_size=_size_from_wire(data.get("oldSize")),
        new_size=_size_from_wire(data.get("newSize")),
    )


def _error_from_dict(data: Mapping[str, Any]) -> OptimisationResponseError:
    return OptimisationResponseError(error=str(data["error"]), for_item=WorkItem(str(data["forURL"])))


def _progress_from_dict(data: Mapping[str, Any]) -> ProgressSnapshot:
    description = data.get("description")
    return ProgressSnapshot(
        for_item=WorkItem(str(data["forURL"])),
        fraction_completed=float(data["fractionCompleted"]),
        description=str(description) if description else None,
    )


def _stop_from_dict(data: Mapping[str, Any]) -> StopRequest:
    return StopRequest(ids=tuple(str(i) for i in data["ids"]), remove=bool(data.get("remove", False)))


_ENCODERS: Final[dict[type, tuple[str, Callable[[Any], dict[str, Any]]]]] = {
    OptimisationRequest: ("request", _request_to_dict),
    OptimisationResponse: ("response", response_to_dict),
    OptimisationResponseError: ("error", error_to_dict),
    ProgressSnapshot: ("progress", _progress_to_dict),
    StopRequest: ("stop", _stop_to_dict),
}

_DECODERS: Final[dict[str, Callable[[Mapping[str, Any]], WireRecord]]] = {
    "request": _request_from_dict,
    "response": _response_from_dict,
    "error": _error_from_dict,
    "progress": _progress_from_dict,
    "stop": _stop_from_dict,
}


def encode(record: WireRecord) -> bytes:
    """Serialize ``record`` into a self-describing JSON payload."""

    try:
        type_name, to_dict = _ENCODERS[type(record)]
    except KeyError:
        raise TypeError(f"Cannot encode {type(record).__name__}") from None
    payload = {TYPE_KEY: type_name, **to_dict(record)}
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def decode(payload: bytes) -> WireRecord:
    """Parse a payload produced by :func:`encode` (or by the service).

    Raises:
        PayloadDecodeError: When the payload is not JSON, carries an unknown
            ``type``, or misses required fields.
    """

    try:
        data = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise PayloadDecodeError(f"Malformed payload: {exc}") from exc

    if not isinstance(data, dict):
        raise PayloadDecodeError("Payload is not a JSON object")

    type_name = data.get(TYPE_KEY)
    decoder = _DECODERS.get(str(type_name))
    if decoder is None:
        raise PayloadDecodeError(f"Unknown payload type: {type_name!r}")

    try:
        return decoder(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise PayloadDecodeError(f"Invalid {type_name} payload: {exc}") from exc


def report_to_json(report: FinalReport) -> str:
    """Render the final report for stdout."""

    document: dict[str, Sequence[Any]] = {
        "done": [response_to_dict(response) for response in report.done],
        "failed": [error_to_dict(error) for error in report.failed],
    }
    if report.pending:
        document["pending"] = [item.locator for item in report.pending]
    return json.dumps(document, indent=2, sort_keys=True, ensure_ascii=False)


__all__ = [
    "TYPE_KEY",
    "decode",
    "encode",
    "error_to_dict",
    "report_to_json",
    "response_to_dict",
]

"""Translate a GenerationRequest into the upstream wire format."""

from __future__ import annotations

from enum import Enum
from typing import Any

from .errors import UsageError
from .models import GenerationRequest
from .registry import (
    CHARACTER_REFERENCE_FIELD,
    CHARACTER_REFERENCE_MAX_BYTES,
    CHARACTER_REFERENCE_MIME_TYPES,
    REQUEST_FIELDS,
)


def _wire_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def build_payload(request: GenerationRequest) -> dict[str, Any]:
    """Build the JSON body for ``request``.

    Required fields are always present; optional fields are left out
    entirely when unset so the API applies its own defaults.
    """

    payload: dict[str, Any] = {}
    for attribute, (wire_name, required) in REQUEST_FIELDS.items():
        value = getattr(request, attribute)
        if value is None and not required:
            continue
        payload[wire_name] = _wire_value(value)
    return payload


def build_multipart(
    request: GenerationRequest,
) -> tuple[dict[str, str], dict[str, tuple[str, bytes, str]]]:
    """Build multipart form fields and file parts for ``request``.

    Used when a character reference image accompanies the prompt. The image
    is read here, before any network traffic; a missing, unreadable or
    oversized file raises ``UsageError``.
    """

    reference = request.character_reference
    if reference is None:
        raise ValueError("multipart bodies require a character reference image")

    mime_type = CHARACTER_REFERENCE_MIME_TYPES.get(reference.suffix.lower())
    if mime_type is None:
        raise UsageError("character reference image must be JPEG, PNG, or WebP")
    try:
        data = reference.read_bytes()
    except OSError as exc:
        raise UsageError(
            f"could not read {reference}: {exc.strerror or exc}"
        ) from exc
    if len(data) > CHARACTER_REFERENCE_MAX_BYTES:
        raise UsageError("character reference image exceeds 10MB limit")

    fields = {key: str(value) for key, value in build_payload(request).items()}
    files = {CHARACTER_REFERENCE_FIELD: (reference.name, data, mime_type)}
    return fields, files


def build_body(request: GenerationRequest) -> dict[str, Any]:
    """Return the ``requests`` body keyword arguments for ``request``.

    A JSON body normally; multipart ``data``/``files`` when a character
    reference image is attached.
    """

    if request.character_reference is not None:
        fields, files = build_multipart(request)
        return {"data": fields, "files": files}
    return {"json": build_payload(request)}

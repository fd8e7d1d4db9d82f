"""Base64url segment encoding and canonical JSON for headers and claims."""

import base64
import binascii
import json
import re
from collections.abc import Mapping
from typing import Any

from tokensmith.core.errors import ErrorKind, TokenError

SEGMENT_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def b64url_encode(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(segment: str) -> bytes:
    """Strictly decode an unpadded base64url segment.

    Raises ``ValueError`` for characters outside the URL-safe alphabet, an
    impossible segment length, or trailing bits that are not zero.
    """
    if not SEGMENT_ALPHABET.fullmatch(segment):
        raise ValueError("Segment contains characters outside base64url")
    if len(segment) % 4 == 1:
        raise ValueError("Segment has an impossible base64url length")
    padded = segment + "=" * (-len(segment) % 4)
    try:
        decoded = base64.urlsafe_b64decode(padded)
    except binascii.Error as exc:
        raise ValueError(str(exc)) from exc
    if b64url_encode(decoded) != segment:
        raise ValueError("Segment is not canonical base64url")
    return decoded


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite number {name} is not valid JSON")


def dump_json(value: Mapping[str, Any]) -> bytes:
    """Serialize a header or claim map to compact JSON bytes."""
    try:
        text = json.dumps(dict(value), separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise TokenError(ErrorKind.JSON_ERROR, f"JSON failed: {exc}") from exc
    return text.encode("utf-8")


def encode_segment(value: Mapping[str, Any] | bytes) -> str:
    """Encode a map as base64url JSON, or raw bytes as base64url."""
    if isinstance(value, bytes):
        return b64url_encode(value)
    return b64url_encode(dump_json(value))


def decode_segment(segment: str) -> Any:
    """Decode a base64url JSON segment into its JSON value."""
    try:
        raw = b64url_decode(segment)
        return json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise TokenError(ErrorKind.JSON_ERROR, f"JSON failed: {exc}") from exc

"""
Layout <-> transport string (URL-safe base64 of the layout JSON).
"""
from __future__ import annotations

import base64
import binascii
import logging

from pydantic import ValidationError

from room_fit.schemas.layout import LayoutState, Room

logger = logging.getLogger(__name__)


class LayoutDecodeError(ValueError):
    """The transport string is not a complete, valid layout."""


def encode_layout(state: LayoutState) -> str:
    payload = state.model_dump_json(exclude_none=True).encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii")


def decode_layout(encoded: str) -> LayoutState:
    """
    Parse a transport string or raw layout JSON.

    Raises LayoutDecodeError; never returns a partially-built layout.
    """
    text = encoded.strip()
    if not text:
        raise LayoutDecodeError("Empty layout string.")

    if not text.startswith("{"):
        try:
            text = base64.urlsafe_b64decode(text + "=" * (-len(text) % 4)).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, ValueError) as error:
            raise LayoutDecodeError(f"Layout string is not valid base64: {error}") from error

    try:
        return LayoutState.model_validate_json(text)
    except ValidationError as error:
        raise LayoutDecodeError(f"Layout JSON is invalid ({error.error_count()} errors).") from error


def default_layout(width: float = 120.0, height: float = 144.0) -> LayoutState:
    return LayoutState(room=Room(width=width, height=height))


def decode_layout_or_default(encoded: str | None, *, width: float = 120.0, height: float = 144.0) -> LayoutState:
    """Decode, falling back to an empty default room on any malformed input."""
    if encoded is None:
        return default_layout(width, height)
    try:
        return decode_layout(encoded)
    except LayoutDecodeError as error:
        logger.warning("Falling back to the default layout: %s", error)
        return default_layout(width, height)

"""Reversible encoding of message identifiers into storage-safe tokens."""

from __future__ import annotations

import base64

__all__ = ["decode", "encode"]


def encode(text: str) -> str:
    """Return a filesystem and JSON-key safe token for ``text``.

    Tokens use the URL-safe base64 alphabet over the UTF-8 bytes of the
    message, so the mapping is injective and reversible.
    """

    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def decode(token: str) -> str:
    """Return the message encoded in ``token``.

    Tokens written with the standard base64 alphabet are accepted too.
    """

    padded = token + "=" * (-len(token) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")

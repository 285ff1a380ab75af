"""Payload codec for captured API responses.

Responses arrive as a JSON envelope ``{"data": ...}``. Encoded responses
carry ``data`` as an obfuscated string: base64, reversed, base64 again and
reversed again around the JSON text. The scheme is fixed by the target
application and must decode byte-for-byte.

Decoding follows the browser-side decoder: whitespace and missing padding
are tolerated, the URL-safe alphabet (``-``, ``_``) is accepted alongside
the standard one, and invalid UTF-8 becomes U+FFFD instead of failing.
Characters outside the base64 alphabets still raise.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from pagebridge.errors import PayloadDecodeError

# Envelope without a usable ``data`` field
NO_PAYLOAD: Any = object()

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def _b64decode(text: str) -> str:
    text = "".join(text.split()).translate(_URLSAFE_TO_STANDARD)
    text += "=" * (-len(text) % 4)
    return base64.b64decode(text, validate=True).decode("utf-8", errors="replace")


def _b64encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _reverse(text: str) -> str:
    # Reverses code points; the browser reverses UTF-16 code units, which
    # splits surrogate pairs. Payloads outside the BMP differ from the browser.
    return text[::-1]


def unobfuscate(data: str) -> Any:
    """Decode an obfuscated ``data`` string into its JSON value."""
    return json.loads(_reverse(_b64decode(_reverse(_b64decode(data)))))


def obfuscate(value: Any) -> str:
    """Inverse of :func:`unobfuscate`."""
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return _b64encode(_reverse(_b64encode(_reverse(text))))


def decode_payload(target: str, raw: str, encoded: bool = False) -> Any:
    """Extract the payload of a captured response body.

    Returns ``NO_PAYLOAD`` when the body is valid JSON but carries no ``data``
    field, leaving the target pending. Raises PayloadDecodeError when the body
    (or the encoded ``data``) is not decodable.
    """
    try:
        envelope = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PayloadDecodeError(target, f"invalid JSON body ({e.msg})") from e

    if not isinstance(envelope, dict) or envelope.get("data") is None:
        return NO_PAYLOAD

    data = envelope["data"]
    if not encoded:
        return data

    if not isinstance(data, str):
        raise PayloadDecodeError(target, f"encoded data must be a string, got {type(data).__name__}")
    try:
        return unobfuscate(data)
    except (binascii.Error, json.JSONDecodeError) as e:
        raise PayloadDecodeError(target, str(e)) from e


def encode_payload(value: Any, encoded: bool = True) -> str:
    """Build a response body that :func:`decode_payload` turns back into ``value``."""
    data = obfuscate(value) if encoded else value
    return json.dumps({"data": data})

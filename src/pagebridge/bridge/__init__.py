"""Page-side response capture and payload decoding."""

from pagebridge.bridge.capture import DEFAULT_NAMESPACE, ResponseCaptureBridge
from pagebridge.bridge.codec import NO_PAYLOAD, decode_payload, encode_payload

__all__ = [
    "DEFAULT_NAMESPACE",
    "NO_PAYLOAD",
    "ResponseCaptureBridge",
    "decode_payload",
    "encode_payload",
]

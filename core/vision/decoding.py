"""Image payload decoding.

Turns the ``photoData``/``imageData`` payloads sent by the client (data URI or
bare base64, or raw bytes) into an RGB ``uint8`` array for the embedding
provider.
"""

from __future__ import annotations

import base64
import binascii
import io
from typing import Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from core.errors import InvalidImage

Payload = Union[str, bytes, bytearray]


def split_data_uri(payload: str) -> Tuple[str, str]:
    """Return ``(media_type, base64_body)`` for a data URI or bare base64 string."""
    payload = payload.strip()
    if payload.startswith("data:") and "," in payload:
        header, body = payload.split(",", 1)
        media_type = header[5:].split(";", 1)[0] or "application/octet-stream"
        return media_type, body
    return "", payload


def payload_to_bytes(payload: Payload) -> bytes:
    if isinstance(payload, (bytes, bytearray)):
        raw = bytes(payload)
    elif isinstance(payload, str):
        _, body = split_data_uri(payload)
        if not body:
            raise InvalidImage("Missing image data.")
        try:
            raw = base64.b64decode("".join(body.split()), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidImage("Invalid image data: cannot decode base64 payload.") from exc
    else:
        raise InvalidImage("Missing image data.")
    if not raw:
        raise InvalidImage("Missing image data.")
    return raw


def decode_image_bytes(raw: bytes) -> np.ndarray:
    try:
        with Image.open(io.BytesIO(raw)) as probe:
            probe.verify()
        # verify() leaves the image unusable, reopen for the pixel data
        with Image.open(io.BytesIO(raw)) as img:
            rgb = img.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise InvalidImage(f"Invalid image data: {exc}") from exc
    return np.asarray(rgb, dtype=np.uint8)


def decode_image_payload(payload: Payload) -> np.ndarray:
    """Decode a client payload into an ``(H, W, 3)`` RGB array or raise ``InvalidImage``."""
    return decode_image_bytes(payload_to_bytes(payload))


__all__ = [
    "split_data_uri",
    "payload_to_bytes",
    "decode_image_bytes",
    "decode_image_payload",
]

"""Decode QR code images back into token text using OpenCV."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import cv2
import numpy as np

from ..errors import ParseError
from ..token.types import QRToken
from ..token.wire import deserialize


def decode_png(data: bytes) -> str:
    """Return the text carried by the QR code in an encoded image (PNG, JPEG, ...)."""
    buf = np.frombuffer(data, dtype=np.uint8)
    if buf.size == 0:
        raise ParseError("image is empty")

    img = cv2.imdecode(buf, cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise ParseError("image could not be decoded")

    text, _points, _ = cv2.QRCodeDetector().detectAndDecode(img)
    if not text:
        raise ParseError("no QR code found in image")
    return text


def decode_file(path: Union[str, Path]) -> str:
    return decode_png(Path(path).read_bytes())


def decode_token(data: bytes) -> QRToken:
    """Decode an image and parse the token it carries, without verifying it."""
    return deserialize(decode_png(data))

"""Render token text into a scannable QR code image."""

from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path
from typing import Union

import qrcode
from qrcode.constants import ERROR_CORRECT_M

DEFAULT_WIDTH = 256
DEFAULT_BORDER = 1


def _build(text: str, *, width: int, border: int) -> qrcode.QRCode:
    if width <= 0:
        raise ValueError("width must be positive")
    if border < 0:
        raise ValueError("border must not be negative")

    qr = qrcode.QRCode(version=None, error_correction=ERROR_CORRECT_M, box_size=1, border=border)
    qr.add_data(text)
    qr.make(fit=True)
    # Largest whole-pixel module size that keeps the image within ``width``.
    qr.box_size = max(1, width // (qr.modules_count + 2 * border))
    return qr


def render_png(text: str, *, width: int = DEFAULT_WIDTH, border: int = DEFAULT_BORDER) -> bytes:
    """Return PNG bytes of a black-on-white QR code carrying ``text``."""
    img = _build(text, width=width, border=border).make_image(fill_color="black", back_color="white")
    buf = BytesIO()
    img.save(buf)
    return buf.getvalue()


def render_data_url(text: str, *, width: int = DEFAULT_WIDTH, border: int = DEFAULT_BORDER) -> str:
    """Return the QR code as a ``data:image/png;base64`` URL for direct embedding."""
    encoded = base64.b64encode(render_png(text, width=width, border=border)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def save_png(
    text: str,
    path: Union[str, Path],
    *,
    width: int = DEFAULT_WIDTH,
    border: int = DEFAULT_BORDER,
) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(render_png(text, width=width, border=border))
    return target

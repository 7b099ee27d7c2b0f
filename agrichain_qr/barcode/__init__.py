"""Barcode rendering and decoding for QR token text."""

from .render import render_data_url, render_png, save_png

__all__ = ["render_png", "render_data_url", "save_png", "decode_png", "decode_file", "decode_token"]


def __getattr__(name: str):
    if name in {"decode_png", "decode_file", "decode_token"}:
        from . import decode

        return getattr(decode, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

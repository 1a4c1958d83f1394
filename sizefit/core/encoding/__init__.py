"""Pillow-backed encoders."""

from .encoder import Encoder, PillowEncoder

__all__ = ["Encoder", "PillowEncoder"]

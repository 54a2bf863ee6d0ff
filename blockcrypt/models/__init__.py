"""
Domain models for blockcrypt.

These are immutable (frozen) dataclasses and enums describing block geometry
and padding.
"""

from blockcrypt.models.crypto import PADDING_OVERHEAD, BlockSizes, PaddingScheme

__all__ = [
    "PADDING_OVERHEAD",
    "BlockSizes",
    "PaddingScheme",
]

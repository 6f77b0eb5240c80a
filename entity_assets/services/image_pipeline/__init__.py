"""
Image Pipeline

- TransformImage: decode, orient, flip, rotate, resize and encode one image
- DerivativeGenerator: one size-bounded derivative per configured format
"""

from .derivative_generator import DerivativeGenerator
from .image import TransformImage

__all__ = [
    "TransformImage",
    "DerivativeGenerator",
]

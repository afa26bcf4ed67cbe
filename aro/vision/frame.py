"""
Video frame snapshot passed through one detection cycle
"""

from dataclasses import dataclass

import cv2
import numpy as np


@dataclass(frozen=True)
class Frame:
    """
    One captured video frame

    pixels: (height, width, 4) uint8 RGBA buffer
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        shape = getattr(self.pixels, "shape", None)
        if shape != (self.height, self.width, 4):
            raise ValueError(
                f"Frame buffer shape {shape} does not match {self.width}x{self.height} RGBA"
            )
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Frame buffer must be uint8, got {self.pixels.dtype}")

    @classmethod
    def from_bgr(cls, image: np.ndarray) -> "Frame":
        """Build an RGBA frame from an OpenCV BGR image"""
        rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        height, width = rgba.shape[:2]
        return cls(width=width, height=height, pixels=rgba)

    @classmethod
    def from_rgba(cls, pixels: np.ndarray) -> "Frame":
        """Wrap an existing RGBA buffer (no copy)"""
        pixels = np.asarray(pixels)
        if pixels.ndim != 3:
            raise ValueError(f"RGBA buffer must be 3-dimensional, got shape {pixels.shape}")
        height, width = pixels.shape[:2]
        return cls(width=width, height=height, pixels=pixels)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

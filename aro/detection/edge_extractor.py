"""
Sobel edge extraction - Numba JIT compiled
RGBA frame -> binary edge mask (255 = edge, 0 = no edge)
"""

import math

import numpy as np
from numba import njit, prange

from ..vision.frame import Frame


@njit(fastmath=True, cache=True)
def luminance(pixels: np.ndarray, y: int, x: int) -> float:
    """Unweighted RGB average (alpha ignored)"""
    return (float(pixels[y, x, 0]) + float(pixels[y, x, 1]) + float(pixels[y, x, 2])) / 3.0


@njit(parallel=True, fastmath=True, cache=True)
def sobel_edge_mask(pixels: np.ndarray, threshold: float, mask: np.ndarray):
    """
    Write the edge mask for every interior pixel into mask (in place)

    Border rows/columns are never written, so a zero-initialised mask keeps
    them non-edge across reuse.

    Args:
        pixels: (height, width, 4) uint8
        threshold: gradient magnitude threshold
        mask: (height, width) uint8 output buffer
    """
    height, width = mask.shape

    for y in prange(1, height - 1):
        for x in range(1, width - 1):
            # 3x3 鄰域亮度
            tl = luminance(pixels, y - 1, x - 1)
            tc = luminance(pixels, y - 1, x)
            tr = luminance(pixels, y - 1, x + 1)
            ml = luminance(pixels, y, x - 1)
            mr = luminance(pixels, y, x + 1)
            bl = luminance(pixels, y + 1, x - 1)
            bc = luminance(pixels, y + 1, x)
            br = luminance(pixels, y + 1, x + 1)

            gx = (tr + 2.0 * mr + br) - (tl + 2.0 * ml + bl)
            gy = (bl + 2.0 * bc + br) - (tl + 2.0 * tc + tr)

            magnitude = math.sqrt(gx * gx + gy * gy)
            if magnitude > threshold:
                mask[y, x] = 255
            else:
                mask[y, x] = 0


class EdgeExtractor:
    """
    Converts frames into edge masks

    The mask buffer is allocated once per frame size and reused; callers that
    need to keep a mask past the next extract() must copy it.
    """

    def __init__(self, threshold: float = 50.0):
        self.threshold = float(threshold)
        self.mask = np.zeros((0, 0), dtype=np.uint8)

    def extract(self, frame: Frame) -> np.ndarray:
        """Compute the edge mask for one frame"""
        if self.mask.shape != (frame.height, frame.width):
            self.mask = np.zeros((frame.height, frame.width), dtype=np.uint8)

        if frame.width >= 3 and frame.height >= 3:
            sobel_edge_mask(np.ascontiguousarray(frame.pixels), self.threshold, self.mask)

        return self.mask

"""
Rectangle candidates: random proposal and perimeter edge scoring
"""

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class Marker:
    """Selected rectangle, normalized to 0-1 of the frame"""

    x: float
    y: float
    width: float
    height: float
    score: float


@dataclass(frozen=True)
class Candidate:
    """Proposed rectangle in pixel space with its edge score"""

    x: float
    y: float
    width: float
    height: float
    score: float = 0.0

    def normalized(self, frame_width: int, frame_height: int) -> Marker:
        return Marker(
            x=self.x / frame_width,
            y=self.y / frame_height,
            width=self.width / frame_width,
            height=self.height / frame_height,
            score=self.score,
        )


Rect = Tuple[float, float, float, float]


class CandidateGenerator:
    """
    Random rectangle proposals with a fixed per-frame budget

    Sizes are fractions of min(width, height). Rectangles that would extend
    past the frame are dropped, so fewer than `iterations` may be yielded.
    """

    def __init__(self,
                 iterations: int = 20,
                 min_size_ratio: float = 0.1,
                 max_size_ratio: float = 0.8,
                 rng: Optional[np.random.Generator] = None):
        if not 0.0 < min_size_ratio <= max_size_ratio:
            raise ValueError(f"Invalid size bounds {min_size_ratio}-{max_size_ratio}")
        self.iterations = iterations
        self.min_size_ratio = min_size_ratio
        self.max_size_ratio = max_size_ratio
        self.rng = rng if rng is not None else np.random.default_rng()

    def generate(self, width: int, height: int) -> Iterator[Rect]:
        """Yield (x, y, w, h) rectangles in pixels"""
        min_size = min(width, height) * self.min_size_ratio
        max_size = min(width, height) * self.max_size_ratio
        if min_size <= 0:
            return

        for _ in range(self.iterations):
            x = self.rng.random() * (width - min_size)
            y = self.rng.random() * (height - min_size)
            w = min_size + self.rng.random() * (max_size - min_size)
            h = min_size + self.rng.random() * (max_size - min_size)

            if x + w < width and y + h < height:
                yield (x, y, w, h)


class EdgeScorer:
    """Fraction of perimeter samples that land on edge pixels"""

    def __init__(self, step: int = 5):
        if step <= 0:
            raise ValueError(f"Sample step must be positive, got {step}")
        self.step = step

    def score(self, mask: np.ndarray, x: float, y: float, w: float, h: float) -> float:
        if w <= 0 or h <= 0:
            return 0.0

        mask_h, mask_w = mask.shape
        edge_count = 0
        total = 0

        def sample(row: float, col: float):
            nonlocal edge_count, total
            r = math.floor(row)
            c = math.floor(col)
            # Off-mask samples are skipped, not counted
            if 0 <= r < mask_h and 0 <= c < mask_w:
                total += 1
                if mask[r, c] > 0:
                    edge_count += 1

        # Top and bottom
        i = x
        while i < x + w:
            sample(y, i)
            sample(y + h, i)
            i += self.step

        # Left and right
        i = y
        while i < y + h:
            sample(i, x)
            sample(i, x + w)
            i += self.step

        return edge_count / total if total > 0 else 0.0

    def score_candidate(self, mask: np.ndarray, rect: Rect) -> Candidate:
        x, y, w, h = rect
        return Candidate(x, y, w, h, self.score(mask, x, y, w, h))

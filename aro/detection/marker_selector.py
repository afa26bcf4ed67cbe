"""
Top-K marker selection
"""

from typing import Iterable, List

from .candidates import Candidate, Marker


class MarkerSelector:
    """Threshold, rank and keep the best K candidates of one frame"""

    def __init__(self, score_threshold: float = 0.3, max_markers: int = 3):
        self.score_threshold = score_threshold
        self.max_markers = max_markers

    def select(self, candidates: Iterable[Candidate], frame_width: int, frame_height: int) -> List[Marker]:
        kept = [c for c in candidates if c.score >= self.score_threshold]
        # sorted() is stable: equal scores keep generation order
        kept = sorted(kept, key=lambda c: c.score, reverse=True)[:max(0, self.max_markers)]
        return [c.normalized(frame_width, frame_height) for c in kept]

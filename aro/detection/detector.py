"""
Per-frame marker detection: edges -> random candidates -> scores -> top-K
"""

import time
from dataclasses import dataclass, fields
from typing import List, Optional

import numpy as np

from ..vision.frame import Frame
from .candidates import Candidate, CandidateGenerator, EdgeScorer, Marker
from .edge_extractor import EdgeExtractor
from .marker_selector import MarkerSelector


@dataclass(frozen=True)
class DetectionConfig:
    edge_threshold: float = 50.0
    iterations: int = 20
    min_size_ratio: float = 0.1
    max_size_ratio: float = 0.8
    sample_step: int = 5
    score_threshold: float = 0.3
    max_markers: int = 3
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, values: dict) -> "DetectionConfig":
        """Build from a config section, ignoring unknown keys"""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (values or {}).items() if k in names})


class MarkerDetector:
    """
    Runs one detection cycle per frame

    Owns the reusable edge buffer and the random source. Every call is an
    independent detection; no state carries over except those buffers.
    """

    def __init__(self, config: DetectionConfig = None, rng: Optional[np.random.Generator] = None):
        self.config = config or DetectionConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        self.extractor = EdgeExtractor(self.config.edge_threshold)
        self.generator = CandidateGenerator(
            iterations=self.config.iterations,
            min_size_ratio=self.config.min_size_ratio,
            max_size_ratio=self.config.max_size_ratio,
            rng=self.rng,
        )
        self.scorer = EdgeScorer(self.config.sample_step)
        self.selector = MarkerSelector(self.config.score_threshold, self.config.max_markers)

        # Timing of the last cycle (ms)
        self.t_edges = 0.0
        self.t_scoring = 0.0

    def score_candidates(self, mask: np.ndarray, width: int, height: int) -> List[Candidate]:
        return [self.scorer.score_candidate(mask, rect)
                for rect in self.generator.generate(width, height)]

    def detect(self, frame: Frame) -> List[Marker]:
        """Markers for one frame, best first (at most max_markers)"""
        if frame.is_empty:
            return []

        t0 = time.time()
        mask = self.extractor.extract(frame)
        self.t_edges = (time.time() - t0) * 1000

        t0 = time.time()
        candidates = self.score_candidates(mask, frame.width, frame.height)
        markers = self.selector.select(candidates, frame.width, frame.height)
        self.t_scoring = (time.time() - t0) * 1000

        return markers

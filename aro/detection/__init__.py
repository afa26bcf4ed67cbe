"""Marker detection pipeline"""

from .candidates import Candidate, CandidateGenerator, EdgeScorer, Marker
from .detector import DetectionConfig, MarkerDetector
from .edge_extractor import EdgeExtractor
from .marker_selector import MarkerSelector

__all__ = [
    "Candidate",
    "CandidateGenerator",
    "DetectionConfig",
    "EdgeExtractor",
    "EdgeScorer",
    "Marker",
    "MarkerDetector",
    "MarkerSelector",
]

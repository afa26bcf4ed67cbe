#!/usr/bin/env python3
"""
Candidate generation, perimeter scoring, top-K selection and the full
per-frame detector
"""

import numpy as np
import pytest

from aro.detection import (
    Candidate,
    CandidateGenerator,
    DetectionConfig,
    EdgeExtractor,
    EdgeScorer,
    MarkerDetector,
    MarkerSelector,
)
from aro.vision.frame import Frame


def black_pixels(width=100, height=100):
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    return pixels


def square_frame():
    pixels = black_pixels()
    pixels[10:61, 10:61, :3] = 255
    return Frame.from_rgba(pixels)


def checker_frame(width=160, height=120, cell=8):
    pixels = black_pixels(width, height)
    ys, xs = np.indices((height, width))
    pixels[((ys // cell + xs // cell) % 2) == 1, :3] = 255
    return Frame.from_rgba(pixels)


# ----------------------------------------------------------------------
# CandidateGenerator
# ----------------------------------------------------------------------

def test_generated_rectangles_stay_inside_frame_and_bounds():
    generator = CandidateGenerator(iterations=500, rng=np.random.default_rng(1))
    rects = list(generator.generate(200, 100))

    assert 0 < len(rects) <= 500
    for x, y, w, h in rects:
        assert 0 <= x and 0 <= y
        assert x + w < 200 and y + h < 100
        assert 10 <= w <= 80 and 10 <= h <= 80


def test_generator_yields_at_most_iterations():
    generator = CandidateGenerator(iterations=20, rng=np.random.default_rng(2))
    assert len(list(generator.generate(640, 480))) <= 20


def test_generator_yields_nothing_for_degenerate_frames():
    generator = CandidateGenerator(rng=np.random.default_rng(3))
    assert list(generator.generate(0, 480)) == []


def test_generator_is_deterministic_for_a_seed():
    a = list(CandidateGenerator(rng=np.random.default_rng(42)).generate(320, 240))
    b = list(CandidateGenerator(rng=np.random.default_rng(42)).generate(320, 240))
    assert a == b


def test_generator_rejects_bad_bounds():
    with pytest.raises(ValueError):
        CandidateGenerator(min_size_ratio=0.9, max_size_ratio=0.5)


# ----------------------------------------------------------------------
# EdgeScorer
# ----------------------------------------------------------------------

def test_zero_area_rectangle_scores_zero():
    mask = np.full((50, 50), 255, dtype=np.uint8)
    scorer = EdgeScorer()
    assert scorer.score(mask, 10, 10, 0, 20) == 0.0
    assert scorer.score(mask, 10, 10, 20, 0) == 0.0


def test_matching_rectangle_scores_one():
    mask = EdgeExtractor(50).extract(square_frame())
    assert EdgeScorer(5).score(mask, 10, 10, 50, 50) == pytest.approx(1.0)


def test_rectangle_in_empty_area_scores_zero():
    mask = EdgeExtractor(50).extract(square_frame())
    assert EdgeScorer(5).score(mask, 70, 70, 20, 20) == 0.0


def test_scores_are_within_unit_interval():
    mask = EdgeExtractor(50).extract(checker_frame())
    scorer = EdgeScorer(5)
    generator = CandidateGenerator(iterations=200, rng=np.random.default_rng(5))
    for rect in generator.generate(160, 120):
        assert 0.0 <= scorer.score_candidate(mask, rect).score <= 1.0


def test_off_mask_samples_are_skipped():
    mask = np.full((40, 40), 255, dtype=np.uint8)
    # Right and bottom sides fall outside the mask; the rest is all edge
    assert EdgeScorer(5).score(mask, 20, 20, 30, 30) == pytest.approx(1.0)
    assert EdgeScorer(5).score(mask, 100, 100, 10, 10) == 0.0


# ----------------------------------------------------------------------
# MarkerSelector
# ----------------------------------------------------------------------

def test_selector_filters_sorts_and_limits():
    candidates = [
        Candidate(0, 0, 10, 10, 0.2),
        Candidate(10, 0, 10, 10, 0.9),
        Candidate(20, 0, 10, 10, 0.3),
        Candidate(30, 0, 10, 10, 0.5),
        Candidate(40, 0, 10, 10, 0.7),
    ]
    markers = MarkerSelector(score_threshold=0.3, max_markers=3).select(candidates, 100, 50)

    assert [m.score for m in markers] == [0.9, 0.7, 0.5]
    assert markers[0].x == pytest.approx(0.1)
    assert markers[0].y == 0.0
    assert markers[0].width == pytest.approx(0.1)
    assert markers[0].height == pytest.approx(0.2)


def test_selector_keeps_threshold_score_and_generation_order_on_ties():
    candidates = [
        Candidate(1, 0, 10, 10, 0.3),
        Candidate(2, 0, 10, 10, 0.6),
        Candidate(3, 0, 10, 10, 0.3),
        Candidate(4, 0, 10, 10, 0.6),
    ]
    markers = MarkerSelector(0.3, 10).select(candidates, 100, 100)
    assert [round(m.x * 100) for m in markers] == [2, 4, 1, 3]


def test_selector_with_no_survivors():
    assert MarkerSelector(0.3, 3).select([Candidate(0, 0, 5, 5, 0.1)], 10, 10) == []
    assert MarkerSelector(0.3, 0).select([Candidate(0, 0, 5, 5, 0.9)], 10, 10) == []


def test_matching_candidate_ranks_ahead_of_random_ones():
    frame = square_frame()
    mask = EdgeExtractor(50).extract(frame)
    scorer = EdgeScorer(5)
    generator = CandidateGenerator(iterations=20, rng=np.random.default_rng(11))

    candidates = [scorer.score_candidate(mask, rect) for rect in generator.generate(100, 100)]
    candidates.append(scorer.score_candidate(mask, (10, 10, 50, 50)))
    markers = MarkerSelector(0.3, 3).select(candidates, 100, 100)

    assert markers[0].x == pytest.approx(0.1)
    assert markers[0].y == pytest.approx(0.1)
    assert markers[0].score == pytest.approx(1.0)


# ----------------------------------------------------------------------
# MarkerDetector
# ----------------------------------------------------------------------

def test_black_frame_yields_no_markers():
    detector = MarkerDetector(DetectionConfig(seed=0))
    assert detector.detect(Frame.from_rgba(black_pixels())) == []


def test_detector_output_invariants():
    config = DetectionConfig(iterations=300, seed=9)
    markers = MarkerDetector(config).detect(checker_frame())

    assert len(markers) <= config.max_markers
    scores = [m.score for m in markers]
    assert scores == sorted(scores, reverse=True)
    for m in markers:
        assert m.score >= config.score_threshold
        assert 0.0 <= m.x <= 1.0 and 0.0 <= m.y <= 1.0
        assert 0.0 < m.width <= 1.0 and 0.0 < m.height <= 1.0


def test_same_frame_and_seed_give_identical_markers():
    frame = checker_frame()
    a = MarkerDetector(DetectionConfig(seed=123)).detect(frame)
    b = MarkerDetector(DetectionConfig(seed=123)).detect(frame)
    assert a == b


def test_empty_frame_is_tolerated():
    frame = Frame.from_rgba(np.zeros((0, 0, 4), dtype=np.uint8))
    assert MarkerDetector().detect(frame) == []


def test_malformed_frame_is_rejected():
    with pytest.raises(ValueError):
        Frame(width=10, height=10, pixels=np.zeros((10, 10, 3), dtype=np.uint8))


def test_config_from_dict_ignores_unknown_keys():
    config = DetectionConfig.from_dict({"max_markers": 5, "camera_id": 2})
    assert config.max_markers == 5
    assert config.edge_threshold == 50.0


if __name__ == "__main__":
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"✓ {name}")

#!/usr/bin/env python3
"""
Edge extractor tests - Sobel mask on synthetic frames
"""

import numpy as np

from aro.detection.edge_extractor import EdgeExtractor
from aro.vision.frame import Frame


def make_frame(width=100, height=100, value=0):
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = value
    pixels[:, :, 3] = 255
    return pixels


def filled_square_frame():
    """Bright filled square (10,10)-(60,60) on black, 100x100"""
    pixels = make_frame()
    pixels[10:61, 10:61, :3] = 255
    return Frame.from_rgba(pixels)


def test_mask_matches_frame_size_and_border_is_clear():
    rng = np.random.default_rng(0)
    pixels = rng.integers(0, 256, size=(48, 64, 4), dtype=np.uint8)
    mask = EdgeExtractor(50).extract(Frame.from_rgba(pixels))

    assert mask.shape == (48, 64)
    assert mask.any()
    assert not mask[0, :].any()
    assert not mask[-1, :].any()
    assert not mask[:, 0].any()
    assert not mask[:, -1].any()


def test_black_frame_has_no_edges():
    mask = EdgeExtractor(50).extract(Frame.from_rgba(make_frame()))
    assert mask.shape == (100, 100)
    assert not mask.any()


def test_filled_square_outline_is_marked():
    mask = EdgeExtractor(50).extract(filled_square_frame())

    # Both sides of each boundary see the step
    for i in range(10, 61):
        assert mask[10, i] == 255
        assert mask[60, i] == 255
        assert mask[i, 10] == 255
        assert mask[i, 60] == 255
        assert mask[9, i] == 255

    # Flat interior and far background stay clear
    assert not mask[15:56, 15:56].any()
    assert not mask[70:99, 70:99].any()


def test_threshold_is_strict_on_magnitude():
    # Vertical step of 10 -> |Gx| = 40, step of 20 -> |Gx| = 80
    low = make_frame(20, 20)
    low[:, 10:, :3] = 10
    high = make_frame(20, 20)
    high[:, 10:, :3] = 20

    extractor = EdgeExtractor(50)
    assert not extractor.extract(Frame.from_rgba(low)).any()
    mask = extractor.extract(Frame.from_rgba(high))
    assert mask[5, 9] == 255 and mask[5, 10] == 255
    assert mask[5, 5] == 0


def test_alpha_channel_is_ignored():
    pixels = make_frame(20, 20)
    pixels[:, 10:, 3] = 0
    assert not EdgeExtractor(50).extract(Frame.from_rgba(pixels)).any()


def test_buffer_is_reused_for_same_size():
    extractor = EdgeExtractor(50)
    first = extractor.extract(filled_square_frame())
    second = extractor.extract(Frame.from_rgba(make_frame()))

    assert first is second
    # Previous edges fully overwritten
    assert not second.any()

    resized = extractor.extract(Frame.from_rgba(make_frame(30, 20)))
    assert resized.shape == (20, 30)


def test_tiny_frames_have_no_interior():
    extractor = EdgeExtractor(50)
    mask = extractor.extract(Frame.from_rgba(np.full((2, 2, 4), 255, dtype=np.uint8)))
    assert mask.shape == (2, 2)
    assert not mask.any()


if __name__ == "__main__":
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"✓ {name}")

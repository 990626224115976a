"""Tests for the fit calculator."""

import pytest

from photostream.imaging.geometry import (
    approximate_bounds,
    center_crop_fit,
    contain_fit,
    sample_size,
    validate_source,
    validate_target,
)
from photostream.shared.errors import DecodeError, InvalidArgumentError

SIZES = [1, 3, 7, 40, 50, 99, 100, 640, 1081]


def test_center_crop_wide_source_centers_horizontally():
    transform = center_crop_fit(100, 50, 40, 40)

    assert transform.scale_x == pytest.approx(0.8)
    assert transform.scale_y == pytest.approx(0.8)
    assert transform.translate_x == -20
    assert transform.translate_y == 0
    assert (transform.out_width, transform.out_height) == (40, 40)


def test_center_crop_tall_source_centers_vertically():
    transform = center_crop_fit(50, 100, 40, 40)

    assert transform.scale_x == pytest.approx(0.8)
    assert transform.translate_x == 0
    assert transform.translate_y == -20


def test_center_crop_equal_aspect_takes_vertical_branch():
    # 200*50 == 100*100: scale by width, dy is zero
    transform = center_crop_fit(200, 100, 100, 50)

    assert transform.scale_x == pytest.approx(0.5)
    assert transform.translate_x == 0
    assert transform.translate_y == 0


def test_center_crop_identity_is_noop():
    transform = center_crop_fit(64, 48, 64, 48)

    assert transform.is_identity
    assert transform.affine_data() == (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)


def test_center_crop_rounds_translate_to_whole_pixels():
    # dx = (10 - 15) / 2 = -2.5 -> -2
    transform = center_crop_fit(30, 20, 10, 10)

    assert transform.translate_x == -2
    assert float(transform.translate_x).is_integer()


@pytest.mark.parametrize("src_w", SIZES)
@pytest.mark.parametrize("src_h", SIZES)
def test_center_crop_always_covers_target(src_w, src_h):
    for dst_w, dst_h in [(1, 1), (40, 40), (33, 71), (640, 10)]:
        transform = center_crop_fit(src_w, src_h, dst_w, dst_h)
        scaled_w, scaled_h = transform.scaled_size(src_w, src_h)

        assert transform.scale_x > 0
        assert scaled_w >= dst_w - 1e-6
        assert scaled_h >= dst_h - 1e-6
        # The scaled source starts at or left of the target and ends at or right of it.
        assert transform.translate_x <= 0 and transform.translate_y <= 0
        assert transform.translate_x + scaled_w >= dst_w - 1
        assert transform.translate_y + scaled_h >= dst_h - 1


def test_contain_fit_example():
    transform = contain_fit(200, 100, 50, 50)

    assert (transform.out_width, transform.out_height) == (50, 25)
    assert transform.scale_x == pytest.approx(0.25)
    assert transform.scale_y == pytest.approx(0.25)
    assert (transform.translate_x, transform.translate_y) == (0, 0)


def test_contain_fit_upscales_small_source():
    transform = contain_fit(10, 20, 100, 100)

    assert (transform.out_width, transform.out_height) == (50, 100)


@pytest.mark.parametrize("src_w", SIZES)
@pytest.mark.parametrize("src_h", SIZES)
def test_contain_fit_stays_within_bounds(src_w, src_h):
    for max_w, max_h in [(1, 1), (50, 50), (33, 71), (640, 10)]:
        transform = contain_fit(src_w, src_h, max_w, max_h)
        scaled_w, scaled_h = transform.scaled_size(src_w, src_h)

        assert scaled_w <= max_w + 1e-6
        assert scaled_h <= max_h + 1e-6
        assert transform.out_width == max_w or transform.out_height == max_h
        assert transform.out_width >= 1 and transform.out_height >= 1


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5), (5, -3), (2.5, 4), (True, 3), (None, 4)])
def test_invalid_targets_are_rejected(width, height):
    with pytest.raises(InvalidArgumentError):
        validate_target(width, height)
    with pytest.raises(InvalidArgumentError):
        center_crop_fit(10, 10, width, height)
    with pytest.raises(InvalidArgumentError):
        contain_fit(10, 10, width, height)


def test_invalid_argument_error_is_value_error():
    with pytest.raises(ValueError):
        validate_target(0, 0)


def test_empty_source_is_decode_failure():
    with pytest.raises(DecodeError):
        validate_source(0, 10)
    with pytest.raises(DecodeError):
        center_crop_fit(10, 0, 5, 5)


def test_approximate_bounds_relax_larger_axis():
    assert approximate_bounds(200, 100) == (1, 100)
    assert approximate_bounds(100, 200) == (100, 1)
    assert approximate_bounds(80, 80) == (80, 80)


def test_sample_size_stays_within_one_step_of_bound():
    assert sample_size(800, 600, 100, 100) == 4
    assert sample_size(100, 100, 100, 100) == 1
    assert sample_size(50, 50, 100, 100) == 1
    assert sample_size(4000, 1000, 1, 100) == 8


def test_sample_size_is_capped():
    assert sample_size(100_000, 100_000, 1, 1) == 64

# photostream/imaging/geometry.py
"""
Pure geometry for the fitting policies. No I/O, no threading: every function
here maps source and target dimensions to a FitTransform or a decode bound.
"""

import math

from photostream.domain.data_models import FitTransform
from photostream.shared.constants import MAX_SAMPLE_SIZE
from photostream.shared.errors import DecodeError, InvalidArgumentError


def validate_target(width, height):
    """Rejects target dimensions that are not positive integers."""
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidArgumentError(f"Target {name} must be a positive integer, got {value!r}")


def validate_source(width: int, height: int):
    """A decoded image with an empty axis cannot be fitted."""
    if width <= 0 or height <= 0:
        raise DecodeError(f"Decoded image has an empty dimension: {width}x{height}")


def _round_pixel(value: float) -> int:
    # Nearest pixel, halves rounded up, so crops never land on a sub-pixel seam.
    return math.floor(value + 0.5)


def center_crop_fit(src_w: int, src_h: int, dst_w: int, dst_h: int) -> FitTransform:
    """
    Scales the source uniformly so it covers the whole target, then centers the
    overflow on the axis that sticks out. Output size is exactly (dst_w, dst_h).

    The comparison is done on cross products to stay in integers:
    src_w * dst_h > dst_w * src_h means the source is relatively wider than the target.
    """
    validate_source(src_w, src_h)
    validate_target(dst_w, dst_h)

    dx = dy = 0.0
    if src_w * dst_h > dst_w * src_h:
        scale = dst_h / src_h
        dx = (dst_w - src_w * scale) * 0.5
    else:
        scale = dst_w / src_w
        dy = (dst_h - src_h * scale) * 0.5

    return FitTransform(
        scale_x=scale,
        scale_y=scale,
        translate_x=_round_pixel(dx),
        translate_y=_round_pixel(dy),
        out_width=dst_w,
        out_height=dst_h,
    )


def contain_fit(src_w: int, src_h: int, max_w: int, max_h: int) -> FitTransform:
    """
    Scales the source so it fits entirely inside (max_w, max_h) with its aspect
    ratio preserved. The output buffer is the scaled source size, not the bound.
    """
    validate_source(src_w, src_h)
    validate_target(max_w, max_h)

    scale = min(max_w / src_w, max_h / src_h)
    out_w = min(max_w, max(1, round(src_w * scale)))
    out_h = min(max_h, max(1, round(src_h * scale)))

    # Per-axis scales map the source exactly onto the rounded output.
    return FitTransform(
        scale_x=out_w / src_w,
        scale_y=out_h / src_h,
        translate_x=0,
        translate_y=0,
        out_width=out_w,
        out_height=out_h,
    )


def approximate_bounds(width: int, height: int) -> tuple[int, int]:
    """
    Decode bound used before a contain-fit. The larger target axis is relaxed to 1
    so that only the smaller axis limits how far the decoder subsamples.
    """
    return (1 if width > height else width, 1 if height > width else height)


def sample_size(src_w: int, src_h: int, bound_w: int, bound_h: int) -> int:
    """
    Largest power-of-two subsampling factor that keeps both decoded axes at or
    above the requested bound.
    """
    sample = 1
    while (
        sample < MAX_SAMPLE_SIZE
        and src_w // (sample * 2) >= bound_w
        and src_h // (sample * 2) >= bound_h
    ):
        sample *= 2
    return sample

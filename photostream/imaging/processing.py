# photostream/imaging/processing.py
"""
Compositing helpers that draw a decoded image through a FitTransform.
"""

import logging

from PIL import Image

from photostream.domain.data_models import FitTransform, PixelBuffer
from photostream.shared.constants import DEFAULT_RESAMPLE, RESAMPLE_FILTERS

app_logger = logging.getLogger("PhotoStream.imaging.processing")


def resolve_resample(name: str) -> Image.Resampling:
    """Maps a configured filter name to a Pillow resampling filter."""
    try:
        return RESAMPLE_FILTERS[name.upper()]
    except KeyError:
        raise ValueError(f"Unknown resample filter '{name}'") from None


def composite(
    source: PixelBuffer,
    transform: FitTransform,
    resample: Image.Resampling = RESAMPLE_FILTERS[DEFAULT_RESAMPLE],
) -> PixelBuffer:
    """
    Allocates a (out_width, out_height) image in the source's mode and draws the
    source into it through the transform. Regions the source does not cover stay zeroed.
    """
    return source.transform(
        (transform.out_width, transform.out_height),
        Image.Transform.AFFINE,
        transform.affine_data(),
        resample=resample,
    )


def apply_fit(source: PixelBuffer, transform: FitTransform, resample: Image.Resampling) -> PixelBuffer:
    """
    Composites the source unless the transform is the identity and the source
    already has the requested output size, in which case the source object itself
    is returned without a copy.
    """
    if transform.is_identity and source.size == (transform.out_width, transform.out_height):
        app_logger.debug(f"Source already {source.width}x{source.height}; skipping composite.")
        return source
    scaled_w, scaled_h = transform.scaled_size(source.width, source.height)
    app_logger.debug(
        f"Compositing {source.width}x{source.height} scaled to {scaled_w:.1f}x{scaled_h:.1f} "
        f"into {transform.out_width}x{transform.out_height}"
    )
    return composite(source, transform, resample)

# photostream/imaging/image_io.py
"""
Image codec used by the resize pipeline.

Orchestrates the loader cascade and turns every loader failure into a DecodeError,
so the task pipeline only ever sees the pipeline's own error types.
"""

import io
import logging
from pathlib import Path

from PIL import Image

from photostream.domain.data_models import ImageSource, PixelBuffer
from photostream.imaging.geometry import validate_source
from photostream.imaging.loaders import BaseLoader, PillowLoader
from photostream.shared.errors import DecodeError

app_logger = logging.getLogger("PhotoStream.image_io")

# --- Loader Instantiation and Prioritization ---
LOADERS: list[BaseLoader] = [PillowLoader()]


def _describe(source: ImageSource) -> str:
    if isinstance(source, (str, Path)):
        return Path(source).name
    return f"<{type(source).__name__}>"


def _load(source: ImageSource, bound: tuple[int, int] | None, exif_transpose: bool) -> Image.Image:
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise DecodeError(f"Image file not found: {path}")
        source = path

    errors: list[str] = []
    for loader in LOADERS:
        if not loader.can_load(source):
            continue
        if isinstance(source, io.IOBase) and source.seekable():
            start = source.tell()
        else:
            start = None
        try:
            image = loader.load(source, bound, exif_transpose=exif_transpose)
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            # SyntaxError is what several Pillow plugins raise for malformed headers.
            app_logger.debug(f"Loader '{loader.name}' failed for '{_describe(source)}': {e}")
            errors.append(f"{loader.name}: {e}")
            if start is not None:
                source.seek(start)
            continue

        validate_source(image.width, image.height)
        return image

    detail = "; ".join(errors) if errors else "no loader available"
    raise DecodeError(f"All available loaders failed for '{_describe(source)}' ({detail})")


def decode_approx(source: ImageSource, bound_w: int, bound_h: int, exif_transpose: bool = True) -> PixelBuffer:
    """
    Decodes an image at reduced resolution close to (bound_w, bound_h).

    The result is at least the bound on both axes (unless the source is smaller)
    and at most one power-of-two step above it on the tighter axis.
    """
    return _load(source, (bound_w, bound_h), exif_transpose)


def decode_full(source: ImageSource, reuse: PixelBuffer | None = None, exif_transpose: bool = True) -> PixelBuffer:
    """
    Decodes an image at full resolution.

    If `reuse` matches the decoded size and mode, the pixels are written into it and
    it is returned; otherwise a freshly allocated image is returned and `reuse` is
    left untouched. The reuse buffer is caller-owned scratch memory: it must not be
    handed to two tasks that are in flight at the same time.
    """
    image = _load(source, None, exif_transpose)
    if reuse is not None:
        if reuse.size == image.size and reuse.mode == image.mode:
            reuse.paste(image)
            return reuse
        app_logger.debug(
            f"Reuse buffer {reuse.size}/{reuse.mode} does not match decoded {image.size}/{image.mode}; allocating."
        )
    return image

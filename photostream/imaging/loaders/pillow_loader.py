# photostream/imaging/loaders/pillow_loader.py
import logging

from PIL import ExifTags, Image

from photostream.domain.data_models import ImageSource
from photostream.imaging.geometry import sample_size
from photostream.shared.constants import PILLOW_AVAILABLE

from .base_loader import BaseLoader

app_logger = logging.getLogger("PhotoStream.pillow_loader")

# EXIF orientation tag -> transpose that brings the stored pixels upright.
_ORIENTATION_TRANSPOSE = {
    2: Image.Transpose.FLIP_LEFT_RIGHT,
    3: Image.Transpose.ROTATE_180,
    4: Image.Transpose.FLIP_TOP_BOTTOM,
    5: Image.Transpose.TRANSPOSE,
    6: Image.Transpose.ROTATE_270,
    7: Image.Transpose.TRANSVERSE,
    8: Image.Transpose.ROTATE_90,
}
_QUARTER_TURN_ORIENTATIONS = (5, 6, 7, 8)


class PillowLoader(BaseLoader):
    """Loader for common image formats using Pillow, with subsampled decoding."""

    name = "pillow"

    def can_load(self, source: ImageSource) -> bool:
        return PILLOW_AVAILABLE

    def load(
        self,
        source: ImageSource,
        bound: tuple[int, int] | None = None,
        exif_transpose: bool = True,
    ) -> Image.Image:
        with Image.open(source) as img:
            orientation = img.getexif().get(ExifTags.Base.Orientation, 1) if exif_transpose else 1

            if bound is None:
                # Force loading data into memory so the file can be closed
                img.load()
                result = img
            else:
                bound_w, bound_h = bound
                if orientation in _QUARTER_TURN_ORIENTATIONS:
                    # The bound applies to the upright image, which is rotated relative to storage.
                    bound_w, bound_h = bound_h, bound_w

                sample = sample_size(img.width, img.height, bound_w, bound_h)
                if sample > 1:
                    # JPEG decodes straight to 1/2, 1/4 or 1/8 scale; other formats ignore this.
                    img.draft(img.mode, (img.width // sample, img.height // sample))

                img.load()
                result = img
                remaining = sample_size(img.width, img.height, bound_w, bound_h)
                if remaining > 1:
                    if result.mode in ("1", "P"):
                        # reduce() averages pixels, which palette and bilevel modes cannot hold.
                        result = result.convert("RGBA" if "transparency" in result.info else "RGB")
                    result = result.reduce(remaining)
                app_logger.debug(f"Decoded at {result.width}x{result.height} for bound {bound_w}x{bound_h}")

            method = _ORIENTATION_TRANSPOSE.get(orientation)
            if method is not None:
                result = result.transpose(method)

        return result

# photostream/imaging/loaders/base_loader.py
from abc import ABC, abstractmethod

from PIL import Image

from photostream.domain.data_models import ImageSource


class BaseLoader(ABC):
    """Abstract base class defining the interface for all image loaders."""

    name: str = "base"

    @abstractmethod
    def load(
        self,
        source: ImageSource,
        bound: tuple[int, int] | None = None,
        exif_transpose: bool = True,
    ) -> Image.Image:
        """
        Decodes image data into a Pillow Image object.

        Args:
            source: Path to the image file or an open binary stream.
            bound: Approximate (width, height) to decode at. None decodes at full size.
            exif_transpose: Apply the EXIF orientation tag to the decoded pixels.

        Raises:
            OSError: If the data cannot be read or is not a supported image.
        """
        pass

    @abstractmethod
    def can_load(self, source: ImageSource) -> bool:
        """Cheap check whether this loader should be attempted for the source."""
        pass

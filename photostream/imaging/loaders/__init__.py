# photostream/imaging/loaders/__init__.py
from .base_loader import BaseLoader
from .pillow_loader import PillowLoader

# Define the public API for the 'loaders' package
__all__ = [
    "BaseLoader",
    "PillowLoader",
]

# photostream/shared/errors.py
"""
Error taxonomy for the resize pipeline.

Every failure that reaches a ResizeCallback is a ResizeError subclass, so UI code
can branch on the type without importing Pillow or knowing about the codec.
"""


class ResizeError(Exception):
    """Base class for all errors raised by the resize pipeline."""


class InvalidArgumentError(ResizeError, ValueError):
    """Raised synchronously when a request has non-positive or non-integer target dimensions."""


class DecodeError(ResizeError):
    """The codec could not read the source, or it decoded to an empty image."""


class UnexpectedResizeError(ResizeError):
    """Any other failure while fitting or compositing a decoded image."""

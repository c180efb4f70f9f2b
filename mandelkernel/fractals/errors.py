class RenderError(ValueError):
    """Base class for rejected render requests."""


class InvalidViewport(RenderError):
    """Non-positive image size or zero zoom."""


class NullOutput(RenderError):
    """No destination buffer was supplied."""


class PixelCountOverflow(RenderError):
    """width * height does not fit the platform's pixel-count type."""


class BufferTooSmall(RenderError):
    """The destination holds fewer slots than the image has pixels."""

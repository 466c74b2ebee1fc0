"""Domain-specific exceptions for the sprite atlas pipeline."""


class DecodeError(ValueError):
    """Raised when a pixel buffer's byte length disagrees with its dimensions."""

    def __init__(self, width: int, height: int, length: int, reason: str | None = None):
        message = f"Invalid pixel buffer: {width}x{height} needs {width * height * 4} bytes, got {length}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.width = width
        self.height = height
        self.length = length


class InvalidCutError(ValueError):
    """Raised when a cut list is not strictly increasing or leaves the image."""

    def __init__(self, axis: str, cuts, reason: str):
        super().__init__(f"Invalid {axis} cuts {list(cuts)}: {reason}")
        self.axis = axis


class EmptyInputError(ValueError):
    """Raised when an atlas is requested with no sprites."""


class DuplicateSpriteNameError(ValueError):
    """Raised when two sprites in one atlas request share a name."""

    def __init__(self, names: list[str]):
        super().__init__(f"Duplicate sprite names: {', '.join(sorted(names))}")
        self.names = names


class ValidationError(ValueError):
    """Raised when user-provided settings fail validation."""


class ProcessingError(RuntimeError):
    """Raised when the pipeline fails unexpectedly."""


class PackingOverflowError(ProcessingError):
    """Raised when no bin up to the maximum edge can hold every box."""

    def __init__(self, box_count: int, max_edge: int):
        super().__init__(f"Could not pack {box_count} sprites into {max_edge}x{max_edge}")
        self.box_count = box_count
        self.max_edge = max_edge

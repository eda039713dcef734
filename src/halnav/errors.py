class HalError(Exception):
    """Base error for halnav failures."""


class HalTransportError(HalError):
    """The HTTP transport could not obtain a response."""

    def __init__(self, message: str, *, url: str):
        super().__init__(message)
        self.url = url


class HalParseError(HalError):
    """The response body is not a well-formed HAL+JSON document."""


class HalPreconditionError(HalError, RuntimeError):
    """A method was called in a state that does not allow it."""


__all__ = [
    "HalError",
    "HalTransportError",
    "HalParseError",
    "HalPreconditionError",
]

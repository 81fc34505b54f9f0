"""
Exception hierarchy for plant generation.

Every failure aborts the whole request; nothing here is retried.
"""


class SeedbloomError(Exception):
    """Base class for all generation failures."""


class ConfigError(SeedbloomError):
    """Invalid request parameters, detected before any work starts."""


class AssetError(ConfigError):
    """A sprite required by a species is missing or cannot be decoded."""

    def __init__(self, path, reason: str = "not found"):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Asset {self.path}: {reason}")


class GenerationError(SeedbloomError):
    """The structure builder received arguments it cannot grow from."""


class DegenerateGeometryError(GenerationError):
    """Bounds or transform contain NaN/Infinity or have no usable extent."""


class EncoderError(SeedbloomError):
    """The external video encoder could not be started, died, or exited non-zero."""

    def __init__(self, message: str, returncode=None, stderr_tail: str = ""):
        self.returncode = returncode
        self.stderr_tail = stderr_tail
        if stderr_tail:
            message = f"{message}\n{stderr_tail}"
        super().__init__(message)

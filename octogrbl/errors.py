# octogrbl/errors.py
from typing import Optional


class DriverError(Exception):
    """Base class for everything the driver reports to its host."""


class ConfigError(DriverError):
    """Raised when a configuration value is rejected."""


class PropertyError(DriverError):
    """Raised for property names this driver does not expose."""


class EmitError(DriverError):
    """Raised when a G-code line cannot be written to the program sink."""


class UploadError(DriverError):
    """Raised when the print host did not accept the job."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

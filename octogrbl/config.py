# octogrbl/config.py
"""Typed configuration of the OctoPrint+Grbl driver."""

from typing import List

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

DEFAULT_UPLOAD_URL = "http://octopi.local/api/files/local"

# Defaults of the generic G-code driver
GENERIC_PRE_JOB_GCODE = ["G21", "G90"]
GENERIC_POST_JOB_GCODE = ["G0 X0 Y0"]

LASER_ON = "M3"
LASER_OFF = "M5"


def _split_gcode(value):
    """Accepts a comma separated string as well as a list of lines."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(line).strip() for line in value if str(line).strip()]


class DriverConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    upload_url: str = DEFAULT_UPLOAD_URL
    api_key: str = ""
    autoplay: bool = True
    blank_laser_during_rapids: bool = True

    flip_x: bool = False
    flip_y: bool = False
    bed_width: float = Field(250.0, gt=0)
    bed_height: float = Field(280.0, gt=0)

    # mm/min; grbl ignores F on G0 so this is informational only
    travel_speed: float = Field(3600.0, gt=0)
    max_speed: float = Field(1200.0, gt=0)
    spindle_max: float = Field(1.0, gt=0)

    resolutions: List[float] = Field(default_factory=lambda: [100.0, 500.0, 1000.0])
    file_extension: str = ".gcode"

    pre_job_gcode: List[str] = Field(default_factory=lambda: GENERIC_PRE_JOB_GCODE + [LASER_ON])
    post_job_gcode: List[str] = Field(default_factory=lambda: [LASER_OFF] + GENERIC_POST_JOB_GCODE)

    @field_validator("upload_url")
    @classmethod
    def _check_upload_url(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(f"unparseable URL: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("upload URL must be an absolute http:// or https:// URL")
        return value

    @field_validator("api_key")
    @classmethod
    def _check_api_key(cls, value: str) -> str:
        # sent verbatim as a header value; the message must not echo the key
        if not all(" " <= ch <= "~" for ch in value):
            raise ValueError("API key may only contain printable ASCII characters")
        return value

    @field_validator("pre_job_gcode", "post_job_gcode", mode="before")
    @classmethod
    def _parse_gcode_lines(cls, value):
        return _split_gcode(value)

    @field_validator("resolutions", mode="before")
    @classmethod
    def _parse_resolutions(cls, value):
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        return value

    @field_validator("resolutions")
    @classmethod
    def _check_resolutions(cls, value: List[float]) -> List[float]:
        if not value or any(r <= 0 for r in value):
            raise ValueError("resolutions must be a non-empty list of positive dpi values")
        return value

    @field_validator("file_extension")
    @classmethod
    def _normalize_extension(cls, value: str) -> str:
        value = value.strip()
        if value and not value.startswith("."):
            value = "." + value
        return value

    def update(self, field: str, value) -> None:
        """Assigns one field, reporting rejected values as ``ConfigError``."""
        try:
            setattr(self, field, value)
        except ValidationError as e:
            raise ConfigError(f"Invalid value for {field}: {e.errors()[0]['msg']}") from e

    def clone(self) -> "DriverConfig":
        return self.model_copy(deep=True)

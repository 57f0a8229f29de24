# octogrbl/driver.py
"""Driver for Grbl based laser controllers attached to an OctoPrint host.

The driver is a named construction: a :class:`DriverConfig`, the Grbl motion
dialect and the OctoPrint upload transport. Jobs are rendered to a complete
program first and uploaded with a single request afterwards, so the host never
sees a partial job.
"""

import logging
from io import StringIO
from typing import Any, Dict, Iterable, List, Optional

import httpx

from .config import DriverConfig
from .errors import PropertyError
from .gcode import GcodeDialect, GcodeWriter, JobArtifact
from .grbl import GrblDialect
from .models import LineOperation, MoveOperation, PowerOperation, SpeedOperation
from .uploader import OctoPrintUploader

SETTING_UPLOAD_URL = "HTTP Upload URL"
SETTING_AUTOPLAY = "Start immediately after HTTP upload"
SETTING_BLANK_LASER_DURING_RAPIDS = "Force laser off during G0 moves"
SETTING_FLIP_X = "Flip X Axis"
SETTING_FLIP_Y = "Flip Y Axis"
SETTING_BEDWIDTH = "Laserbed width"
SETTING_BEDHEIGHT = "Laserbed height"
SETTING_MAX_SPEED = "Max speed (in mm/min)"
SETTING_SPINDLE_MAX = "S value for 100% laser power"
SETTING_RESOLUTIONS = "Supported DPI (comma separated)"
SETTING_FILE_EXTENSION = "File Extension"
SETTING_PRE_JOB_GCODE = "Pre-Job GCode (comma separated)"
SETTING_POST_JOB_GCODE = "Post-Job GCode (comma separated)"
SETTING_OCTOPRINT_API_KEY = "OctoPrint API key"

# Generic driver settings that mean nothing for an HTTP upload
HIDDEN_SETTINGS = (
    "IP/Hostname",
    "COM Port/Device",
    "Baud Rate (Serial)",
    "Lineend (CR,LF,CRLF)",
    "Board Identification String (startsWith)",
    "Wait for OK after each line (interactive mode)",
    "Travel (non laser moves) speed (in mm/min)",
    "Seconds to wait for board reset (Serial)",
    "Milliseconds to wait for response",
    "Upload method",
)

PROPERTY_FIELDS = {
    SETTING_UPLOAD_URL: "upload_url",
    SETTING_AUTOPLAY: "autoplay",
    SETTING_BLANK_LASER_DURING_RAPIDS: "blank_laser_during_rapids",
    SETTING_FLIP_X: "flip_x",
    SETTING_FLIP_Y: "flip_y",
    SETTING_BEDWIDTH: "bed_width",
    SETTING_BEDHEIGHT: "bed_height",
    SETTING_MAX_SPEED: "max_speed",
    SETTING_SPINDLE_MAX: "spindle_max",
    SETTING_RESOLUTIONS: "resolutions",
    SETTING_FILE_EXTENSION: "file_extension",
    SETTING_PRE_JOB_GCODE: "pre_job_gcode",
    SETTING_POST_JOB_GCODE: "post_job_gcode",
    SETTING_OCTOPRINT_API_KEY: "api_key",
}

UPLOAD_METHOD_HTTP = "http"


def _format_value(value: Any) -> Any:
    if isinstance(value, list):
        return ",".join(("%g" % v) if isinstance(v, float) else str(v) for v in value)
    return value


class OctoPrintGrblDriver:
    MODEL_NAME = "OctoPrint+Grbl Gcode Driver"

    def __init__(self, config: Optional[DriverConfig] = None, dialect: Optional[GcodeDialect] = None):
        self.config = config if config is not None else DriverConfig()
        self.dialect = dialect if dialect is not None else GrblDialect()

    @property
    def upload_method(self) -> str:
        return UPLOAD_METHOD_HTTP

    @classmethod
    def from_settings(cls, settings) -> "OctoPrintGrblDriver":
        """Driver seeded from the service settings."""
        config = DriverConfig(
            upload_url=settings.upload_url,
            api_key=settings.api_key,
            autoplay=settings.autoplay,
            bed_width=settings.bed_width,
            bed_height=settings.bed_height,
            flip_x=settings.flip_x,
            flip_y=settings.flip_y,
        )
        return cls(config)

    # Named property interface

    def get_property_keys(self) -> List[str]:
        return list(PROPERTY_FIELDS)

    def _field(self, name: str) -> str:
        if name in HIDDEN_SETTINGS:
            raise PropertyError(f"Property '{name}' is not available on {self.MODEL_NAME}")
        try:
            return PROPERTY_FIELDS[name]
        except KeyError:
            raise PropertyError(f"Unknown property '{name}'") from None

    def get_property(self, name: str) -> Any:
        return _format_value(getattr(self.config, self._field(name)))

    def set_property(self, name: str, value: Any) -> None:
        field = self._field(name)
        self.config.update(field, value)
        if field != "api_key":
            logging.info(f"Driver property '{name}' set to {_format_value(getattr(self.config, field))!r}")
        else:
            logging.info(f"Driver property '{name}' updated")

    def get_properties(self) -> Dict[str, Any]:
        return {name: self.get_property(name) for name in self.get_property_keys()}

    def clone(self) -> "OctoPrintGrblDriver":
        """Per-job snapshot sharing no mutable state with this driver."""
        return type(self)(self.config.clone(), self.dialect)

    # Jobs

    def write_job(self, writer: GcodeWriter, operations: Iterable, resolution: float) -> None:
        writer.write_pre_job()
        for op in operations:
            if isinstance(op, MoveOperation):
                writer.move(op.x, op.y, resolution)
            elif isinstance(op, LineOperation):
                writer.line(op.x, op.y, resolution)
            elif isinstance(op, PowerOperation):
                writer.set_power(op.value)
            elif isinstance(op, SpeedOperation):
                writer.set_speed(op.value)
            else:
                raise TypeError(f"Unsupported job operation: {type(op).__name__}")
        writer.write_post_job()

    def build_program(self, operations: Iterable, resolution: float) -> str:
        buf = StringIO()
        self.write_job(GcodeWriter(self.config, self.dialect, buf), operations, resolution)
        return buf.getvalue()

    def build_job(self, operations: Iterable, resolution: float, filename: str) -> JobArtifact:
        return JobArtifact(gcode=self.build_program(operations, resolution), filename=filename)

    async def send_job(
        self, client: httpx.AsyncClient, operations: Iterable, resolution: float, filename: str
    ) -> JobArtifact:
        """Renders the job and uploads it once. Failures raise ``UploadError``."""
        job = self.build_job(operations, resolution, filename)
        uploader = OctoPrintUploader(client, api_key=self.config.api_key, autoplay=self.config.autoplay)
        await uploader.upload(self.config.upload_url, job.gcode, job.filename)
        await uploader.play(job.filename)
        return job

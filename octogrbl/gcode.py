# octogrbl/gcode.py
"""Generic G-code writer.

The writer owns the program sink and the power/speed state of a job. How a
motion primitive is spelled is left to a dialect, so a controller variant only
overrides the commands it treats differently.
"""

from dataclasses import dataclass
from typing import List, Optional, TextIO, Tuple

from .config import DriverConfig
from .errors import EmitError
from .units import to_machine

LINE_END = "\n"


@dataclass(frozen=True)
class JobArtifact:
    """A finished program and the filename suggested to the print host."""

    gcode: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.gcode.encode("utf-8"))


class GcodeDialect:
    """Plain G-code as understood by most laser firmwares."""

    def move(self, writer: "GcodeWriter", x: float, y: float, resolution: float) -> None:
        """Rapid traversal, laser blanked with ``S0`` when configured."""
        x, y = writer.to_machine(x, y, resolution)
        cfg = writer.config
        writer.current_speed = cfg.travel_speed
        words = self._rapid_feed(cfg)
        if cfg.blank_laser_during_rapids:
            writer.current_power = 0.0
            words += " S0"
        writer.send_line("G0 X%f Y%f" + words, x, y)

    def _rapid_feed(self, config: DriverConfig) -> str:
        return " F%d" % int(config.travel_speed)

    def line(self, writer: "GcodeWriter", x: float, y: float, resolution: float) -> None:
        """Cutting move; ``S`` and ``F`` words only when they change."""
        x, y = writer.to_machine(x, y, resolution)
        append = ""
        if writer.next_power != writer.current_power:
            append += " S%f" % writer.next_power
            writer.current_power = writer.next_power
        if writer.next_speed != writer.current_speed:
            append += " F%d" % int(writer.next_speed)
            writer.current_speed = writer.next_speed
        writer.send_line("G1 X%f Y%f" + append, x, y)

    def pre_job(self, config: DriverConfig) -> List[str]:
        return list(config.pre_job_gcode)

    def post_job(self, config: DriverConfig) -> List[str]:
        return list(config.post_job_gcode)


class GcodeWriter:
    """Writes one job's program lines to ``sink`` in emission order."""

    def __init__(self, config: DriverConfig, dialect: GcodeDialect, sink: TextIO, line_end: str = LINE_END):
        self.config = config
        self.dialect = dialect
        self.sink = sink
        self.line_end = line_end
        self.current_power: Optional[float] = None
        self.current_speed: Optional[float] = None
        self.next_power = 0.0
        self.next_speed = config.max_speed

    def send_line(self, template: str, *args) -> None:
        line = template % args if args else template
        try:
            self.sink.write(line + self.line_end)
        except OSError as e:
            raise EmitError(f"Error while writing G-code: {e}") from e

    def to_machine(self, x: float, y: float, resolution: float) -> Tuple[float, float]:
        cfg = self.config
        return (
            to_machine(x, resolution, cfg.bed_width, cfg.flip_x),
            to_machine(y, resolution, cfg.bed_height, cfg.flip_y),
        )

    def set_power(self, percent: float) -> None:
        self.next_power = percent * self.config.spindle_max / 100.0

    def set_speed(self, percent: float) -> None:
        self.next_speed = self.config.max_speed * percent / 100.0

    def move(self, x: float, y: float, resolution: float) -> None:
        self.dialect.move(self, x, y, resolution)

    def line(self, x: float, y: float, resolution: float) -> None:
        self.dialect.line(self, x, y, resolution)

    def write_pre_job(self) -> None:
        for line in self.dialect.pre_job(self.config):
            self.send_line(line)

    def write_post_job(self) -> None:
        for line in self.dialect.post_job(self.config):
            self.send_line(line)

# octogrbl/grbl.py
"""Grbl flavour of the G-code dialect.

Grbl runs ``G0`` at its configured maximum rapid rate and drops any ``F`` word,
so rapids carry no feed. It also keeps the laser firing during ``G0`` unless
the same line sets ``S0``.
"""

from typing import List

from .config import LASER_OFF, LASER_ON, DriverConfig
from .gcode import GcodeDialect


class GrblDialect(GcodeDialect):

    def _rapid_feed(self, config: DriverConfig) -> str:
        return ""

    def pre_job(self, config: DriverConfig) -> List[str]:
        lines = list(config.pre_job_gcode)
        if not lines or lines[-1].upper() != LASER_ON:
            lines.append(LASER_ON)
        return lines

    def post_job(self, config: DriverConfig) -> List[str]:
        # laser off before the return-to-home rapid
        lines = list(config.post_job_gcode)
        if not lines or lines[0].upper() != LASER_OFF:
            lines.insert(0, LASER_OFF)
        return lines

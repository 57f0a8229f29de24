# octogrbl/models.py
from typing import Annotated, Any, List, Literal, Union

from pydantic import BaseModel, Field


class MoveOperation(BaseModel):
    """Rapid traversal to a pixel position."""
    type: Literal["move"] = "move"
    x: float
    y: float

class LineOperation(BaseModel):
    """Cutting move to a pixel position."""
    type: Literal["line"] = "line"
    x: float
    y: float

class PowerOperation(BaseModel):
    type: Literal["power"] = "power"
    value: float = Field(..., ge=0, le=100)

class SpeedOperation(BaseModel):
    type: Literal["speed"] = "speed"
    value: float = Field(..., gt=0, le=100)

JobOperation = Annotated[
    Union[MoveOperation, LineOperation, PowerOperation, SpeedOperation],
    Field(discriminator="type"),
]

class JobPayload(BaseModel):
    filename: str = "job"
    resolution: float = Field(500.0, gt=0)
    operations: List[JobOperation]

class PropertyValuePayload(BaseModel):
    value: Any

"""Movement file schema validation and loading.

Movement files let movements be produced by any tool (a CAD plugin export,
a slicer post-processor, a hand-written test case) and compiled from the
command line.  They are YAML (JSON parses too) validated with pydantic:

    schema: silkworm.movements.v1
    movements:
      - kind: path            # extruding polyline
        points: [[0, 0, 0.4], [20, 0, 0.4]]
        flow: 0.6             # mm²
        speed: 25             # mm/s
      - kind: point           # stationary deposit
        position: [0, 0, 0.4]
        flow: 2.0             # mm³
        speed: 5
        dwell_s: 0.5
      - kind: raw             # literal G-code
        text: "M106 S255"

Missing ``flow``/``speed`` default to 0: such movements are *incomplete*
and are skipped at compile time, they are not schema errors.

Units:
    - Geometry: millimeters (mm)
    - Speed: mm/s

Usage:
    from silkworm.utils import validators
    movements = validators.load_movements("part.movements.yaml")
"""

from pathlib import Path
from typing import Annotated, List, Literal, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from silkworm.movement.model import Movement, PathSegment, Point, RawInstruction


SCHEMA_ID = "silkworm.movements.v1"


# ============================================================================
# MOVEMENT SCHEMA V1
# ============================================================================

class PathMovementV1(BaseModel):
    """Extruding polyline (>= 2 vertices, xyz in mm)."""
    kind: Literal["path"]
    points: List[Tuple[float, float, float]] = Field(..., min_length=2)
    flow: float = Field(0.0, ge=0.0, description="Extrusion cross-section (mm²)")
    speed: float = Field(0.0, ge=0.0, description="Print speed (mm/s)")

    def to_movement(self) -> PathSegment:
        return PathSegment(points=tuple(self.points), flow=self.flow, speed=self.speed)


class PointMovementV1(BaseModel):
    """Stationary deposit with optional dwell."""
    kind: Literal["point"]
    position: Tuple[float, float, float]
    flow: float = Field(0.0, ge=0.0, description="Volume deposited in place (mm³)")
    speed: float = Field(0.0, ge=0.0, description="Extruder feed (mm/s)")
    dwell_s: float = Field(0.0, ge=0.0, description="Pause after extruding (s)")

    def to_movement(self) -> Point:
        return Point(
            position=self.position,
            flow=self.flow,
            speed=self.speed,
            dwell_s=self.dwell_s,
        )


class RawMovementV1(BaseModel):
    """Literal G-code, one or more lines."""
    kind: Literal["raw"]
    text: str

    @field_validator('text')
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Raw movement text must contain at least one non-blank line")
        return v

    def to_movement(self) -> RawInstruction:
        return RawInstruction(text=self.text)


MovementV1 = Annotated[
    Union[PathMovementV1, PointMovementV1, RawMovementV1],
    Field(discriminator="kind"),
]


class MovementsFileV1(BaseModel):
    """Container for a movement sequence (silkworm.movements.v1 schema)."""
    schema_id: str = Field(SCHEMA_ID, alias="schema")
    movements: List[MovementV1]

    @field_validator('schema_id')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != SCHEMA_ID:
            raise ValueError(f"Unsupported schema {v!r}, expected {SCHEMA_ID!r}")
        return v

    def to_movements(self) -> List[Movement]:
        return [m.to_movement() for m in self.movements]


# ============================================================================
# PUBLIC API
# ============================================================================

def load_movements(path: Union[str, Path]) -> List[Movement]:
    """Load and validate a movement file.

    Parameters
    ----------
    path : Union[str, Path]
        Path to a silkworm.movements.v1 YAML or JSON file

    Returns
    -------
    List[Movement]
        Movements in file order

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Movement file not found: {path}")

    data = fs.load_yaml(path)
    if not isinstance(data, dict):
        raise ValueError(f"Movement file validation failed at {path}: root must be a mapping")
    try:
        return MovementsFileV1(**data).to_movements()
    except ValueError as e:
        raise ValueError(f"Movement file validation failed at {path}: {e}") from e

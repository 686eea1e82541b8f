"""Pydantic schemas for pipes. Create bodies are a tagged union on `kind`."""

from datetime import datetime
from typing import Literal, Union

from pydantic import Field, field_validator

from waternet.schemas.base import ApiModel

PipeStatus = Literal["normal", "high", "blocked", "maintenance"]
PipeKind = Literal["referential", "geometric"]

# Geometric pipes store flow as a direction flag.
FLOW_DIRECTIONS = (0, 1)
INVALID_FLOW_MESSAGE = "Invalid flow direction. Must be 0 or 1."
MIN_COORDINATES = 2


class Coordinate(ApiModel):
    latitude: float
    longitude: float


class _PipeAttributes(ApiModel):
    """Descriptive fields shared by both pipe kinds."""

    status: PipeStatus = "normal"
    length: float | None = Field(default=None, ge=0)
    diameter: float | None = Field(default=None, ge=0)
    material: str | None = Field(default=None, max_length=255)


class ReferentialPipeCreate(_PipeAttributes):
    """Pipe between two existing nodes."""

    kind: Literal["referential"]
    start_node: int
    end_node: int
    flow: float = Field(default=0, ge=0, strict=True)


class GeometricPipeCreate(_PipeAttributes):
    """Freeform polyline pipe; flow is a 0/1 direction flag and is required."""

    kind: Literal["geometric"]
    coordinates: list[Coordinate] = Field(..., min_length=MIN_COORDINATES)
    flow: float = Field(..., strict=True)

    @field_validator("flow")
    @classmethod
    def check_flow_direction(cls, v: float) -> float:
        if v not in FLOW_DIRECTIONS:
            raise ValueError(INVALID_FLOW_MESSAGE)
        return v


# Request bodies select the variant through the `kind` field.
PipeCreate = Union[ReferentialPipeCreate, GeometricPipeCreate]
PIPE_KIND_DISCRIMINATOR = "kind"


class PipeUpdate(ApiModel):
    """
    Body for PUT /pipe/{id}. Absent fields are left untouched.

    Shape fields are kind-specific: coordinates only for geometric pipes,
    startNode/endNode only for referential ones. Kind itself cannot change.
    """

    status: PipeStatus | None = None
    flow: float | None = Field(default=None, strict=True)
    length: float | None = Field(default=None, ge=0)
    diameter: float | None = Field(default=None, ge=0)
    material: str | None = Field(default=None, max_length=255)
    coordinates: list[Coordinate] | None = Field(default=None, min_length=MIN_COORDINATES)
    start_node: int | None = None
    end_node: int | None = None

    def to_column_changes(self) -> dict[str, object]:
        """Fields the client actually sent, keyed by ORM column name."""
        sent = self.model_dump(exclude_unset=True)
        for column in ("status", "flow", "coordinates", "start_node", "end_node"):
            if sent.get(column, "") is None:
                sent.pop(column)
        if "start_node" in sent:
            sent["start_node_id"] = sent.pop("start_node")
        if "end_node" in sent:
            sent["end_node_id"] = sent.pop("end_node")
        return sent


class PipeRead(ApiModel):
    id: int
    kind: PipeKind
    start_node: int | None = None
    end_node: int | None = None
    coordinates: list[Coordinate] | None = None
    status: str
    flow: float
    length: float | None
    diameter: float | None
    material: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, pipe: object) -> "PipeRead":
        return cls(
            id=pipe.id,
            kind=pipe.kind,
            start_node=pipe.start_node_id,
            end_node=pipe.end_node_id,
            coordinates=pipe.coordinates,
            status=pipe.status,
            flow=pipe.flow,
            length=pipe.length,
            diameter=pipe.diameter,
            material=pipe.material,
            created_at=pipe.created_at,
            updated_at=pipe.updated_at,
        )


class PipeDeleteResponse(ApiModel):
    message: str
    deleted_pipe: PipeRead


class PipeSearchParams(ApiModel):
    """Optional pipe filters; every field left as None imposes no constraint."""

    status: str | None = None
    kind: str | None = None
    node: int | None = None
    min_flow: float | None = None
    max_flow: float | None = None
    min_length: float | None = None
    max_length: float | None = None

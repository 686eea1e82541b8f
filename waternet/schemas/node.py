"""Pydantic schemas for network nodes: create/update bodies, responses and search filters."""

from datetime import datetime
from typing import Literal

from pydantic import field_validator, model_validator

from waternet.core.bounds import OUT_OF_BOUNDS_MESSAGE, within_bounds
from waternet.models.node import NODE_TYPES
from waternet.schemas.base import ApiModel, Name

NodeStatus = Literal["active", "maintenance", "inactive"]

NODE_TYPE_VALUES: frozenset[str] = frozenset(NODE_TYPES)


def _validate_node_type(value: str) -> str:
    """Ensure type is one of the known node types (exact match, localized names included)."""
    value = value.strip()
    if value not in NODE_TYPE_VALUES:
        raise ValueError(f"type must be one of {list(NODE_TYPES)}, got {value!r}")
    return value


class Location(ApiModel):
    """A node position; must fall inside the network bounding box."""

    latitude: float
    longitude: float

    @model_validator(mode="after")
    def check_bounds(self) -> "Location":
        if not within_bounds(self.latitude, self.longitude):
            raise ValueError(OUT_OF_BOUNDS_MESSAGE)
        return self


class NodeCreate(ApiModel):
    """Body for POST /node."""

    name: Name
    type: str
    location: Location
    capacity: float | None = None
    status: NodeStatus = "active"
    description: str = ""

    @field_validator("type")
    @classmethod
    def check_type(cls, v: str) -> str:
        return _validate_node_type(v)

    @field_validator("status", mode="before")
    @classmethod
    def default_blank_status(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return "active"
        return v

    @field_validator("description", mode="before")
    @classmethod
    def default_blank_description(cls, v: object) -> object:
        return "" if v is None else v


class NodeUpdate(ApiModel):
    """Body for PUT /node/{id}. Absent fields are left untouched."""

    name: Name | None = None
    type: str | None = None
    location: Location | None = None
    capacity: float | None = None
    status: NodeStatus | None = None
    description: str | None = None

    @field_validator("type")
    @classmethod
    def check_type(cls, v: str | None) -> str | None:
        return None if v is None else _validate_node_type(v)

    def to_column_changes(self) -> dict[str, object]:
        """Flatten the fields the client actually sent into ORM column values."""
        sent = self.model_dump(exclude_unset=True)
        location = sent.pop("location", None)
        if location is not None:
            sent["latitude"] = location["latitude"]
            sent["longitude"] = location["longitude"]
        # name/type/status are NOT NULL; an explicit null means "leave as is"
        for column in ("name", "type", "status", "description"):
            if sent.get(column, "") is None:
                sent.pop(column)
        return sent


class NodeRead(ApiModel):
    id: int
    name: str
    type: str
    location: Location
    capacity: float | None
    status: str
    description: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, node: object) -> "NodeRead":
        return cls(
            id=node.id,
            name=node.name,
            type=node.type,
            location=Location.model_construct(
                latitude=node.latitude, longitude=node.longitude
            ),
            capacity=node.capacity,
            status=node.status,
            description=node.description or "",
            created_at=node.created_at,
            updated_at=node.updated_at,
        )


class NodeSearchParams(ApiModel):
    """Optional node filters; every field left as None imposes no constraint."""

    types: list[str] | None = None
    min_latitude: float | None = None
    max_latitude: float | None = None
    min_longitude: float | None = None
    max_longitude: float | None = None
    min_capacity: float | None = None
    max_capacity: float | None = None
    status: str | None = None
    name: str | None = None

    @field_validator("types", mode="before")
    @classmethod
    def split_types(cls, v: object) -> object:
        """Accept the raw comma-separated query value as well as a list."""
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list):
            v = [t.strip() for t in v if isinstance(t, str) and t.strip()]
            return v or None
        return v

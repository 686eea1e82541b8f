"""
Queries and writes over the network model: nodes and pipes.

Search filters are built as a list of independent SQLAlchemy predicates, one
per supplied parameter, and combined conjunctively. Writes enforce the
referential rules the schemas cannot see (node existence, node-in-use,
kind-specific pipe fields) before touching the store.
"""

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from waternet.models import Node, Pipe
from waternet.schemas.node import NodeCreate, NodeSearchParams, NodeUpdate
from waternet.schemas.pipe import (
    FLOW_DIRECTIONS,
    INVALID_FLOW_MESSAGE,
    GeometricPipeCreate,
    PipeCreate,
    PipeRead,
    PipeSearchParams,
    PipeUpdate,
)
from waternet.services.updates import apply_changes

logger = logging.getLogger(__name__)


class NetworkError(Exception):
    """Base class for network write failures; `message` is safe to return to clients."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EntityNotFoundError(NetworkError):
    """Raised when a node or pipe id does not exist."""


class MissingNodeError(NetworkError):
    """Raised when a referential pipe points at a node that does not exist."""


class NodeInUseError(NetworkError):
    """Raised when deleting a node that pipes still reference as an endpoint."""

    def __init__(self, message: str, pipe_ids: list[int]) -> None:
        self.pipe_ids = pipe_ids
        super().__init__(message)


class PipeShapeError(NetworkError):
    """Raised when an update does not fit the pipe's kind (fields or flow)."""


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _range_clauses(column, low: float | None, high: float | None) -> list[ColumnElement[bool]]:
    clauses = []
    if low is not None:
        clauses.append(column >= low)
    if high is not None:
        clauses.append(column <= high)
    return clauses


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


def node_search_clauses(params: NodeSearchParams) -> list[ColumnElement[bool]]:
    """One predicate per supplied filter; an empty list matches every node."""
    clauses: list[ColumnElement[bool]] = []
    if params.types:
        clauses.append(Node.type.in_(params.types))
    clauses += _range_clauses(Node.latitude, params.min_latitude, params.max_latitude)
    clauses += _range_clauses(Node.longitude, params.min_longitude, params.max_longitude)
    clauses += _range_clauses(Node.capacity, params.min_capacity, params.max_capacity)
    if params.status:
        clauses.append(Node.status == params.status)
    if params.name:
        clauses.append(Node.name.ilike(f"%{_escape_like(params.name)}%", escape="\\"))
    return clauses


def search_nodes(db: Session, params: NodeSearchParams) -> list[Node]:
    return db.query(Node).filter(*node_search_clauses(params)).order_by(Node.id).all()


def list_nodes(db: Session) -> list[Node]:
    return db.query(Node).order_by(Node.id).all()


def get_node(db: Session, node_id: int) -> Node:
    node = db.get(Node, node_id)
    if node is None:
        raise EntityNotFoundError("Node not found")
    return node


def create_node(db: Session, body: NodeCreate) -> Node:
    """Insert a node. Location bounds were already checked by the schema."""
    node = Node(
        name=body.name,
        type=body.type,
        latitude=body.location.latitude,
        longitude=body.location.longitude,
        capacity=body.capacity,
        status=body.status,
        description=body.description,
    )
    db.add(node)
    db.commit()
    db.refresh(node)
    logger.info("Node created: id=%s type=%s", node.id, node.type)
    return node


def update_node(db: Session, node_id: int, body: NodeUpdate) -> Node:
    node = get_node(db, node_id)
    if apply_changes(node, body.to_column_changes()):
        db.commit()
        db.refresh(node)
        logger.info("Node updated: id=%s", node.id)
    return node


def connected_pipe_ids(db: Session, node_id: int) -> list[int]:
    """Ids of pipes that use the node as start or end."""
    rows = (
        db.query(Pipe.id)
        .filter(or_(Pipe.start_node_id == node_id, Pipe.end_node_id == node_id))
        .order_by(Pipe.id)
        .all()
    )
    return [row[0] for row in rows]


def delete_node(db: Session, node_id: int) -> None:
    """Delete a node unless a pipe still references it (NodeInUseError lists those pipes)."""
    node = get_node(db, node_id)
    pipe_ids = connected_pipe_ids(db, node_id)
    if pipe_ids:
        logger.info("Node delete blocked: id=%s pipes=%s", node_id, pipe_ids)
        raise NodeInUseError(
            "Cannot delete node. It is connected to existing pipes.",
            pipe_ids=pipe_ids,
        )
    db.delete(node)
    db.commit()
    logger.info("Node deleted: id=%s", node_id)


# ---------------------------------------------------------------------------
# Pipes
# ---------------------------------------------------------------------------


def pipe_search_clauses(params: PipeSearchParams) -> list[ColumnElement[bool]]:
    """One predicate per supplied filter; an empty list matches every pipe."""
    clauses: list[ColumnElement[bool]] = []
    if params.status:
        clauses.append(Pipe.status == params.status)
    if params.kind:
        clauses.append(Pipe.kind == params.kind)
    if params.node is not None:
        clauses.append(or_(Pipe.start_node_id == params.node, Pipe.end_node_id == params.node))
    clauses += _range_clauses(Pipe.flow, params.min_flow, params.max_flow)
    clauses += _range_clauses(Pipe.length, params.min_length, params.max_length)
    return clauses


def search_pipes(db: Session, params: PipeSearchParams) -> list[Pipe]:
    return db.query(Pipe).filter(*pipe_search_clauses(params)).order_by(Pipe.id).all()


def list_pipes(db: Session) -> list[Pipe]:
    return db.query(Pipe).order_by(Pipe.id).all()


def get_pipe(db: Session, pipe_id: int) -> Pipe:
    pipe = db.get(Pipe, pipe_id)
    if pipe is None:
        raise EntityNotFoundError("Pipe not found")
    return pipe


def _require_node(db: Session, node_id: int, role: str) -> None:
    if db.get(Node, node_id) is None:
        raise MissingNodeError(f"{role} node not found")


def create_pipe(db: Session, body: PipeCreate) -> Pipe:
    """Insert a pipe of either kind; referential pipes need both endpoint nodes to exist."""
    if isinstance(body, GeometricPipeCreate):
        pipe = Pipe(
            kind="geometric",
            coordinates=[c.model_dump() for c in body.coordinates],
        )
    else:
        _require_node(db, body.start_node, "Start")
        _require_node(db, body.end_node, "End")
        pipe = Pipe(
            kind="referential",
            start_node_id=body.start_node,
            end_node_id=body.end_node,
        )
    pipe.status = body.status
    pipe.flow = body.flow
    pipe.length = body.length
    pipe.diameter = body.diameter
    pipe.material = body.material
    db.add(pipe)
    db.commit()
    db.refresh(pipe)
    logger.info("Pipe created: id=%s kind=%s", pipe.id, pipe.kind)
    return pipe


def _check_pipe_changes(db: Session, pipe: Pipe, changes: dict[str, object]) -> None:
    """Reject changes that do not fit the pipe's kind."""
    flow = changes.get("flow")
    if pipe.kind == "geometric":
        if "start_node_id" in changes or "end_node_id" in changes:
            raise PipeShapeError("startNode/endNode apply only to referential pipes")
        if flow is not None and flow not in FLOW_DIRECTIONS:
            raise PipeShapeError(INVALID_FLOW_MESSAGE)
        return
    if "coordinates" in changes:
        raise PipeShapeError("coordinates apply only to geometric pipes")
    if flow is not None and flow < 0:
        raise PipeShapeError("flow must be non-negative")
    if "start_node_id" in changes:
        _require_node(db, changes["start_node_id"], "Start")
    if "end_node_id" in changes:
        _require_node(db, changes["end_node_id"], "End")


def update_pipe(db: Session, pipe_id: int, body: PipeUpdate) -> Pipe:
    pipe = get_pipe(db, pipe_id)
    changes = body.to_column_changes()
    _check_pipe_changes(db, pipe, changes)
    if apply_changes(pipe, changes):
        db.commit()
        db.refresh(pipe)
        logger.info("Pipe updated: id=%s", pipe.id)
    return pipe


def delete_pipe(db: Session, pipe_id: int) -> PipeRead:
    """Delete a pipe and return a snapshot of what was removed."""
    pipe = get_pipe(db, pipe_id)
    snapshot = PipeRead.from_model(pipe)
    db.delete(pipe)
    db.commit()
    logger.info("Pipe deleted: id=%s", pipe_id)
    return snapshot

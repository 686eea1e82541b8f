"""Node and pipe endpoints. Reads are public; every write requires an admin access token."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from waternet.api.auth import require_admin
from waternet.core.database import get_db
from waternet.schemas.auth import CurrentUser
from waternet.schemas.base import MessageResponse
from waternet.schemas.node import NodeCreate, NodeRead, NodeSearchParams, NodeUpdate
from waternet.schemas.pipe import (
    PIPE_KIND_DISCRIMINATOR,
    PipeCreate,
    PipeDeleteResponse,
    PipeRead,
    PipeSearchParams,
    PipeUpdate,
)
from waternet.services import network as svc
from waternet.services.network import NetworkError, NodeInUseError

router = APIRouter()

Admin = Annotated[CurrentUser, Depends(require_admin)]
DB = Annotated[Session, Depends(get_db)]


def _http_error(e: NetworkError) -> HTTPException:
    """Map a network service failure to its HTTP response."""
    if isinstance(e, NodeInUseError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": e.message, "connectedPipes": e.pipe_ids},
        )
    if isinstance(e, (svc.EntityNotFoundError, svc.MissingNodeError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


@router.get("/nodes", response_model=list[NodeRead])
def get_nodes(db: DB) -> list[NodeRead]:
    return [NodeRead.from_model(n) for n in svc.list_nodes(db)]


@router.get("/nodes/search", response_model=list[NodeRead])
def search_nodes(
    db: DB,
    node_type: Annotated[
        str | None, Query(alias="type", description="Comma-separated node types")
    ] = None,
    min_latitude: Annotated[float | None, Query(alias="minLatitude", allow_inf_nan=False)] = None,
    max_latitude: Annotated[float | None, Query(alias="maxLatitude", allow_inf_nan=False)] = None,
    min_longitude: Annotated[float | None, Query(alias="minLongitude", allow_inf_nan=False)] = None,
    max_longitude: Annotated[float | None, Query(alias="maxLongitude", allow_inf_nan=False)] = None,
    min_capacity: Annotated[float | None, Query(alias="minCapacity", allow_inf_nan=False)] = None,
    max_capacity: Annotated[float | None, Query(alias="maxCapacity", allow_inf_nan=False)] = None,
    node_status: Annotated[str | None, Query(alias="status")] = None,
    name: Annotated[str | None, Query(description="Case-insensitive substring")] = None,
) -> list[NodeRead]:
    """
    Filter nodes. Every supplied parameter narrows the result; none returns all nodes.
    """
    params = NodeSearchParams(
        types=node_type,
        min_latitude=min_latitude,
        max_latitude=max_latitude,
        min_longitude=min_longitude,
        max_longitude=max_longitude,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        status=node_status,
        name=name,
    )
    return [NodeRead.from_model(n) for n in svc.search_nodes(db, params)]


@router.get("/node/{node_id}", response_model=NodeRead)
def get_node(node_id: int, db: DB) -> NodeRead:
    try:
        return NodeRead.from_model(svc.get_node(db, node_id))
    except NetworkError as e:
        raise _http_error(e)


@router.post("/node", status_code=status.HTTP_201_CREATED, response_model=NodeRead)
def create_node(body: NodeCreate, db: DB, _admin: Admin) -> NodeRead:
    """Create a node (admin only). Location must lie inside the network bounds."""
    return NodeRead.from_model(svc.create_node(db, body))


@router.put("/node/{node_id}", response_model=NodeRead)
def update_node(node_id: int, body: NodeUpdate, db: DB, _admin: Admin) -> NodeRead:
    """Partially update a node (admin only). A supplied location is bounds-checked."""
    try:
        return NodeRead.from_model(svc.update_node(db, node_id, body))
    except NetworkError as e:
        raise _http_error(e)


@router.delete("/node/{node_id}", response_model=MessageResponse)
def delete_node(node_id: int, db: DB, _admin: Admin) -> MessageResponse:
    """Delete a node (admin only). 400 with connectedPipes while pipes still reference it."""
    try:
        svc.delete_node(db, node_id)
    except NetworkError as e:
        raise _http_error(e)
    return MessageResponse(message="Node deleted successfully")


# ---------------------------------------------------------------------------
# Pipes
# ---------------------------------------------------------------------------


@router.get("/pipes", response_model=list[PipeRead])
def get_pipes(db: DB) -> list[PipeRead]:
    return [PipeRead.from_model(p) for p in svc.list_pipes(db)]


@router.get("/pipes/search", response_model=list[PipeRead])
def search_pipes(
    db: DB,
    pipe_status: Annotated[str | None, Query(alias="status")] = None,
    kind: Annotated[str | None, Query(description="referential or geometric")] = None,
    node: Annotated[int | None, Query(description="Pipes starting or ending at this node")] = None,
    min_flow: Annotated[float | None, Query(alias="minFlow", allow_inf_nan=False)] = None,
    max_flow: Annotated[float | None, Query(alias="maxFlow", allow_inf_nan=False)] = None,
    min_length: Annotated[float | None, Query(alias="minLength", allow_inf_nan=False)] = None,
    max_length: Annotated[float | None, Query(alias="maxLength", allow_inf_nan=False)] = None,
) -> list[PipeRead]:
    params = PipeSearchParams(
        status=pipe_status,
        kind=kind,
        node=node,
        min_flow=min_flow,
        max_flow=max_flow,
        min_length=min_length,
        max_length=max_length,
    )
    return [PipeRead.from_model(p) for p in svc.search_pipes(db, params)]


@router.get("/pipe/{pipe_id}", response_model=PipeRead)
def get_pipe(pipe_id: int, db: DB) -> PipeRead:
    try:
        return PipeRead.from_model(svc.get_pipe(db, pipe_id))
    except NetworkError as e:
        raise _http_error(e)


@router.post("/pipe", status_code=status.HTTP_201_CREATED, response_model=PipeRead)
def create_pipe(
    body: Annotated[PipeCreate, Body(discriminator=PIPE_KIND_DISCRIMINATOR)],
    db: DB,
    _admin: Admin,
) -> PipeRead:
    """
    Create a pipe (admin only).

    kind=referential: startNode and endNode must both exist.
    kind=geometric: at least two coordinates and a flow of exactly 0 or 1.
    """
    try:
        return PipeRead.from_model(svc.create_pipe(db, body))
    except NetworkError as e:
        raise _http_error(e)


@router.put("/pipe/{pipe_id}", response_model=PipeRead)
def update_pipe(pipe_id: int, body: PipeUpdate, db: DB, _admin: Admin) -> PipeRead:
    """Partially update a pipe (admin only). The pipe's kind and id never change."""
    try:
        return PipeRead.from_model(svc.update_pipe(db, pipe_id, body))
    except NetworkError as e:
        raise _http_error(e)


@router.delete("/pipe/{pipe_id}", response_model=PipeDeleteResponse)
def delete_pipe(pipe_id: int, db: DB, _admin: Admin) -> PipeDeleteResponse:
    try:
        deleted = svc.delete_pipe(db, pipe_id)
    except NetworkError as e:
        raise _http_error(e)
    return PipeDeleteResponse(message="Pipe deleted successfully", deleted_pipe=deleted)

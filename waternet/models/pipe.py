"""ORM model for pipes: node-referential or freeform geometric polylines."""

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB

from waternet.models.base import Base, in_list_clause

PIPE_KINDS = ("referential", "geometric")
PIPE_STATUSES = ("normal", "high", "blocked", "maintenance")


class Pipe(Base):
    """
    A connection in the network, tagged by `kind`.

    referential: start_node_id/end_node_id point at nodes; coordinates is NULL.
    geometric: coordinates holds >= 2 {latitude, longitude} points; node ids are NULL.
    """

    __tablename__ = "pipes"
    __table_args__ = (
        CheckConstraint(in_list_clause("kind", PIPE_KINDS), name="ck_pipes_kind"),
        CheckConstraint(in_list_clause("status", PIPE_STATUSES), name="ck_pipes_status"),
        CheckConstraint(
            "(kind = 'referential' AND start_node_id IS NOT NULL AND end_node_id IS NOT NULL)"
            " OR (kind = 'geometric' AND coordinates IS NOT NULL)",
            name="ck_pipes_shape",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(16), nullable=False, index=True)
    start_node_id = Column(
        Integer,
        ForeignKey("nodes.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    end_node_id = Column(
        Integer,
        ForeignKey("nodes.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    coordinates = Column(
        JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql"),
        nullable=True,
    )
    status = Column(String(32), nullable=False, default="normal")
    flow = Column(Float, nullable=False, default=0)
    length = Column(Float, nullable=True)
    diameter = Column(Float, nullable=True)
    material = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

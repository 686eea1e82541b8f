"""ORM model for network nodes (sources, junctions, fixtures, ...)."""

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Integer, String, Text, func

from waternet.core.bounds import MAX_LATITUDE, MAX_LONGITUDE, MIN_LATITUDE, MIN_LONGITUDE
from waternet.models.base import Base, in_list_clause

NODE_TYPES = (
    "source",
    "junction",
    "outlet",
    "reservoir",
    "valve",
    "hydrant",
    "Κλειδί",
    "Πυροσβεστικός Κρουνός",
    "Ταφ",
    "Γωνία",
    "Κολεκτέρ",
    "Παροχή",
)

NODE_STATUSES = ("active", "maintenance", "inactive")


class Node(Base):
    """A point in the network. Location is bounded to the service area."""

    __tablename__ = "nodes"
    __table_args__ = (
        CheckConstraint(in_list_clause("type", NODE_TYPES), name="ck_nodes_type"),
        CheckConstraint(in_list_clause("status", NODE_STATUSES), name="ck_nodes_status"),
        CheckConstraint(
            f"latitude >= {MIN_LATITUDE} AND latitude <= {MAX_LATITUDE}",
            name="ck_nodes_latitude_bounds",
        ),
        CheckConstraint(
            f"longitude >= {MIN_LONGITUDE} AND longitude <= {MAX_LONGITUDE}",
            name="ck_nodes_longitude_bounds",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    type = Column(String(64), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    capacity = Column(Float, nullable=True)
    status = Column(String(32), nullable=False, default="active")
    description = Column(Text, nullable=False, default="")
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

"""Create users, nodes and pipes tables.

Revision ID: 20261019000000
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from waternet.core.bounds import MAX_LATITUDE, MAX_LONGITUDE, MIN_LATITUDE, MIN_LONGITUDE
from waternet.models.base import in_list_clause
from waternet.models.node import NODE_STATUSES, NODE_TYPES
from waternet.models.pipe import PIPE_KINDS, PIPE_STATUSES
from waternet.models.user import USER_ROLES

revision: str = "20261019000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="user"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.CheckConstraint(in_list_clause("role", USER_ROLES), name="ck_users_role"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "nodes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=64), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("capacity", sa.Float(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="active"),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_nodes")),
        sa.CheckConstraint(in_list_clause("type", NODE_TYPES), name="ck_nodes_type"),
        sa.CheckConstraint(in_list_clause("status", NODE_STATUSES), name="ck_nodes_status"),
        sa.CheckConstraint(
            f"latitude >= {MIN_LATITUDE} AND latitude <= {MAX_LATITUDE}",
            name="ck_nodes_latitude_bounds",
        ),
        sa.CheckConstraint(
            f"longitude >= {MIN_LONGITUDE} AND longitude <= {MAX_LONGITUDE}",
            name="ck_nodes_longitude_bounds",
        ),
    )
    op.create_index(op.f("ix_nodes_name"), "nodes", ["name"], unique=False)
    op.create_index(op.f("ix_nodes_type"), "nodes", ["type"], unique=False)

    op.create_table(
        "pipes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("kind", sa.String(length=16), nullable=False),
        sa.Column("start_node_id", sa.Integer(), nullable=True),
        sa.Column("end_node_id", sa.Integer(), nullable=True),
        sa.Column("coordinates", postgresql.JSONB(none_as_null=True), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="normal"),
        sa.Column("flow", sa.Float(), nullable=False, server_default="0"),
        sa.Column("length", sa.Float(), nullable=True),
        sa.Column("diameter", sa.Float(), nullable=True),
        sa.Column("material", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_pipes")),
        sa.ForeignKeyConstraint(
            ["start_node_id"],
            ["nodes.id"],
            name=op.f("fk_pipes_start_node_id_nodes"),
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["end_node_id"],
            ["nodes.id"],
            name=op.f("fk_pipes_end_node_id_nodes"),
            ondelete="RESTRICT",
        ),
        sa.CheckConstraint(in_list_clause("kind", PIPE_KINDS), name="ck_pipes_kind"),
        sa.CheckConstraint(in_list_clause("status", PIPE_STATUSES), name="ck_pipes_status"),
        sa.CheckConstraint(
            "(kind = 'referential' AND start_node_id IS NOT NULL AND end_node_id IS NOT NULL)"
            " OR (kind = 'geometric' AND coordinates IS NOT NULL)",
            name="ck_pipes_shape",
        ),
    )
    op.create_index(op.f("ix_pipes_kind"), "pipes", ["kind"], unique=False)
    op.create_index(op.f("ix_pipes_start_node_id"), "pipes", ["start_node_id"], unique=False)
    op.create_index(op.f("ix_pipes_end_node_id"), "pipes", ["end_node_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_pipes_end_node_id"), table_name="pipes")
    op.drop_index(op.f("ix_pipes_start_node_id"), table_name="pipes")
    op.drop_index(op.f("ix_pipes_kind"), table_name="pipes")
    op.drop_table("pipes")
    op.drop_index(op.f("ix_nodes_type"), table_name="nodes")
    op.drop_index(op.f("ix_nodes_name"), table_name="nodes")
    op.drop_table("nodes")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

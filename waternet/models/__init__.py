"""SQLAlchemy ORM models."""

from waternet.models.base import Base
from waternet.models.node import Node
from waternet.models.pipe import Pipe
from waternet.models.user import User

__all__ = ["Base", "Node", "Pipe", "User"]

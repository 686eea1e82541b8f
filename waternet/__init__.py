"""WaterNet API: users, nodes and pipes of a water-distribution network model."""

__version__ = "0.1.0"

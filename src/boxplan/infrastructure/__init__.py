"""Infrastructure layer: snapshot database, layout files, graph view, board.

This layer depends on stdlib, third-party libs (SQLAlchemy, NetworkX,
pluggy), the domain layer, and the reactive engine. It must never import
from services, commands, or output.
"""

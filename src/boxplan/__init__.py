"""boxplan: containment-driven planning board engine."""

__version__ = "0.1.0"

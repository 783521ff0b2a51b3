"""Domain layer: types, geometry, rule descriptors, and layout models.

This layer depends only on stdlib and pydantic.
It must never import from engine, services, infrastructure, commands, or config.
"""

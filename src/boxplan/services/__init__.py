"""Service layer: board operations returning ServiceResult.

Services may import from domain, engine, rules, and infrastructure layers.
They must never import from commands or output.
"""

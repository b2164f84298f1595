"""Domain layer — enums, entity models, filtering rules, and arc geometry.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""

"""Service layer — pipeline, timeline, and playback orchestration.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""

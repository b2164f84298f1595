"""Pluggy hook specifications for pipeline and playback events.

Rendering, haptics, and analytics collaborators implement these hooks to
follow the core without being imported by it. All hooks are dispatched
synchronously on the caller's thread.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("frontiermetrix")


class FrontierHookSpec:
    """Hook specifications for the frontiermetrix plugin system."""

    @hookspec
    def post_load(self, signal_count: int, flow_count: int, dropped: int) -> None:
        """Called after a dataset replaced the pipeline's entities."""

    @hookspec
    def post_load_error(self, code: str, message: str) -> None:
        """Called when a load attempt failed and the old data was kept."""

    @hookspec
    def post_filter_view(self, signal_count: int, flow_count: int, generation: int) -> None:
        """Called after the filtered view was recomputed and published."""

    @hookspec
    def post_timeline_step(self, instant: str, progress: float) -> None:
        """Called after the timeline committed a new instant (ISO 8601)."""

    @hookspec
    def post_timeline_state(self, is_playing: bool) -> None:
        """Called after playback started or stopped."""

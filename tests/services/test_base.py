"""Tests for BaseService and service inheritance."""

from __future__ import annotations

import pluggy
import pytest

from frontiermetrix.plugins.event_bus import EventBus
from frontiermetrix.plugins.manager import PluginManager
from frontiermetrix.services.base import BaseService
from frontiermetrix.services.pipeline import SignalPipeline
from frontiermetrix.services.timeline import TimelineController

hookimpl = pluggy.HookimplMarker("frontiermetrix")


class _Broken:
    @hookimpl
    def post_timeline_state(self, is_playing: bool) -> None:
        raise RuntimeError("boom")


class _BrokenBus:
    def dispatch(self, hook_name: str, payload: dict) -> bool:
        raise RuntimeError("bus down")


class TestBaseService:
    def test_without_bus_is_noop(self) -> None:
        service = BaseService()
        warnings: list[str] = []
        service._dispatch_event("post_timeline_state", {"is_playing": True}, warnings)
        assert service.event_bus is None
        assert warnings == []

    def test_failed_dispatch_adds_warning(self) -> None:
        pm = PluginManager()
        pm.register(_Broken())
        service = BaseService(EventBus(pm))
        warnings: list[str] = []
        service._dispatch_event("post_timeline_state", {"is_playing": True}, warnings)
        assert warnings == ["Event dispatch failed for post_timeline_state"]

    def test_raising_bus_is_contained(self) -> None:
        service = BaseService(_BrokenBus())  # type: ignore[arg-type]
        warnings: list[str] = []
        service._dispatch_event("post_load", {}, warnings)
        assert warnings == ["Event dispatch failed for post_load"]

    def test_warning_list_optional(self) -> None:
        pm = PluginManager()
        pm.register(_Broken())
        BaseService(EventBus(pm))._dispatch_event("post_timeline_state", {"is_playing": False})


class TestServiceInheritance:
    @pytest.mark.parametrize("service_cls", [SignalPipeline, TimelineController])
    def test_inherits_base_service(self, service_cls: type) -> None:
        assert issubclass(service_cls, BaseService)

"""Tests for external tool detection"""
import shutil

from autodev.execution.tools import (
    EVOLUTION_TOOL,
    SPEC_WORKFLOW_TOOL,
    tool_availability,
    tool_for_executable,
)


def test_known_tools_resolved_by_executable():
    assert tool_for_executable("specify") is SPEC_WORKFLOW_TOOL
    assert tool_for_executable("shinka_launch") is EVOLUTION_TOOL


def test_unknown_executable_gets_ad_hoc_tool():
    tool = tool_for_executable("make")
    assert tool.name == "make"
    assert tool.executable == "make"


def test_availability_uses_path(monkeypatch):
    monkeypatch.setattr(shutil, "which", lambda name: "/usr/local/bin/specify" if name == "specify" else None)

    assert SPEC_WORKFLOW_TOOL.is_available()
    assert SPEC_WORKFLOW_TOOL.path() == "/usr/local/bin/specify"
    assert tool_availability() == {"spec-workflow": True, "evolution": False}

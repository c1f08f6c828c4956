"""Tests for visual checkpoint records"""
import json
import logging
import os
from datetime import datetime, timedelta
from unittest.mock import patch

from autodev.orchestration.checkpoint import CheckpointManager, VisualCheckpoint


def make_checkpoint(workflow_id="exec_1", step="/tasks", phase="pre", timestamp=None):
    return VisualCheckpoint(
        workflow_id=workflow_id,
        step=step,
        phase=phase,
        artifact=f"/shots/{workflow_id}_{phase}.png",
        confidence=0.9,
        timestamp=timestamp or datetime(2025, 1, 1, 12, 0, 0),
    )


def test_checkpoint_serialization():
    checkpoint = make_checkpoint()
    restored = VisualCheckpoint.from_dict(checkpoint.to_dict())

    assert restored == checkpoint


def test_save_checkpoint(tmp_path):
    manager = CheckpointManager(tmp_path / "checkpoints")

    path = manager.save_checkpoint(make_checkpoint())

    assert path.exists()
    assert path.name.startswith("exec_1_tasks_pre_")
    with open(path) as f:
        assert json.load(f)["artifact"] == "/shots/exec_1_pre.png"


def test_list_checkpoints_by_workflow_in_capture_order(tmp_path):
    manager = CheckpointManager(tmp_path)
    base = datetime(2025, 1, 1, 12, 0, 0)
    manager.save_checkpoint(make_checkpoint(phase="post", timestamp=base + timedelta(seconds=5)))
    manager.save_checkpoint(make_checkpoint(phase="pre", timestamp=base))
    manager.save_checkpoint(make_checkpoint(workflow_id="exec_2", timestamp=base))

    checkpoints = manager.list_checkpoints("exec_1")

    assert [c.phase for c in checkpoints] == ["pre", "post"]
    assert len(manager.list_checkpoints()) == 3


def test_list_checkpoints_missing_dir(tmp_path):
    manager = CheckpointManager(tmp_path / "nothing")

    assert manager.list_checkpoints() == []
    assert manager.latest() is None


def test_has_recent(tmp_path):
    manager = CheckpointManager(tmp_path)
    captured = datetime(2025, 1, 1, 12, 0, 0)
    manager.save_checkpoint(make_checkpoint(timestamp=captured))

    assert manager.has_recent(captured - timedelta(minutes=30))
    assert not manager.has_recent(captured + timedelta(minutes=1))


def test_unreadable_checkpoints_are_skipped(tmp_path, caplog):
    manager = CheckpointManager(tmp_path)
    manager.save_checkpoint(make_checkpoint())
    (tmp_path / "bad.json").write_text("{")
    (tmp_path / "partial.json").write_text(json.dumps({"workflow_id": "exec_9"}))

    with caplog.at_level(logging.WARNING):
        checkpoints = manager.list_checkpoints()

    assert [c.workflow_id for c in checkpoints] == ["exec_1"]
    assert "bad.json" in caplog.text
    assert not manager.has_recent(datetime(2025, 1, 1, 13, 0, 0))


def test_has_recent_skips_files_written_before_cutoff(tmp_path):
    manager = CheckpointManager(tmp_path)
    path = manager.save_checkpoint(make_checkpoint(timestamp=datetime.now()))
    old = (datetime.now() - timedelta(days=2)).timestamp()
    os.utime(path, (old, old))

    with patch.object(VisualCheckpoint, "from_file") as from_file:
        assert not manager.has_recent(datetime.now() - timedelta(hours=1))

    from_file.assert_not_called()

"""Tests for visual feedback analysis"""
import pytest

from autodev.orchestration.visual import FileVisualAnalyzer, VisualFeedbackAnalyzer, recommend


class ScriptedAnalyzer(VisualFeedbackAnalyzer):
    def __init__(self, changes):
        self.changes = changes

    async def detect_changes(self, before, after, goal):
        return list(self.changes)


@pytest.mark.asyncio
@pytest.mark.parametrize("changes,significance", [([], "none"), (["moved"], "minor"), (["a", "b"], "major")])
async def test_default_classification(changes, significance):
    comparison = await ScriptedAnalyzer(changes).compare("before.png", "after.png", goal="login")

    assert comparison.significance == significance
    assert comparison.changes == changes
    assert comparison.before == "before.png"
    assert "login" in comparison.recommendation


@pytest.mark.asyncio
async def test_zero_changes_always_none():
    class Overeager(ScriptedAnalyzer):
        def classify(self, changes):
            return "major"

    assert (await Overeager([]).compare("a", "b")).significance == "none"


@pytest.mark.asyncio
async def test_file_analyzer_identical_files(tmp_path):
    before = tmp_path / "before.png"
    after = tmp_path / "after.png"
    before.write_bytes(b"pixels")
    after.write_bytes(b"pixels")

    comparison = await FileVisualAnalyzer().compare(str(before), str(after))

    assert comparison.significance == "none"


@pytest.mark.asyncio
async def test_file_analyzer_small_content_change_is_minor(tmp_path):
    before = tmp_path / "before.png"
    after = tmp_path / "after.png"
    before.write_bytes(b"0123456789")
    after.write_bytes(b"0123456780")

    comparison = await FileVisualAnalyzer().compare(str(before), str(after))

    assert comparison.changes == ["Content changed"]
    assert comparison.significance == "minor"


@pytest.mark.asyncio
async def test_file_analyzer_large_size_change_is_major(tmp_path):
    before = tmp_path / "before.png"
    after = tmp_path / "after.png"
    before.write_bytes(b"x" * 100)
    after.write_bytes(b"y" * 200)

    comparison = await FileVisualAnalyzer().compare(str(before), str(after))

    assert comparison.significance == "major"
    assert "Size changed from 100 to 200 bytes" in comparison.changes


@pytest.mark.asyncio
async def test_file_analyzer_missing_files(tmp_path):
    present = tmp_path / "present.png"
    present.write_bytes(b"data")
    missing = tmp_path / "missing.png"
    analyzer = FileVisualAnalyzer()

    assert (await analyzer.compare(str(missing), str(missing))).significance == "none"
    assert (await analyzer.compare(str(missing), str(present))).significance == "major"
    assert "Checkpoint disappeared" in (await analyzer.compare(str(present), str(missing))).changes


def test_recommend():
    assert recommend("major").startswith("Major visual change detected")
    assert recommend("minor", "checkout").startswith("Minor visual change detected toward 'checkout'")
    assert recommend("none").startswith("No visual change detected")

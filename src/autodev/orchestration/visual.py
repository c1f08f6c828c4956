"""Before/after checkpoint comparison"""
import hashlib
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from autodev.orchestration.models import VisualComparison

logger = logging.getLogger(__name__)

# Relative size change above which a content change counts as major
MAJOR_SIZE_DELTA = 0.25


class VisualFeedbackAnalyzer(ABC):
    """Compares two checkpoint artifacts.

    Implementations may be probabilistic; the only fixed rule is that zero
    detected changes means significance "none".
    """

    @abstractmethod
    async def detect_changes(self, before: str, after: str, goal: str) -> list[str]:
        """Free-text descriptions of what changed between before and after"""
        pass

    def classify(self, changes: list[str]) -> str:
        if not changes:
            return "none"
        return "major" if len(changes) > 1 else "minor"

    async def compare(self, before: str, after: str, goal: str = "") -> VisualComparison:
        changes = await self.detect_changes(before, after, goal)
        significance = "none" if not changes else self.classify(changes)
        return VisualComparison(
            changes=changes,
            significance=significance,
            recommendation=recommend(significance, goal),
            before=before,
            after=after,
        )


class FileVisualAnalyzer(VisualFeedbackAnalyzer):
    """Default analyzer: compares checkpoint files by existence, size and digest"""

    async def detect_changes(self, before: str, after: str, goal: str) -> list[str]:
        before_path, after_path = Path(before), Path(after)
        before_exists, after_exists = before_path.is_file(), after_path.is_file()

        if not before_exists and not after_exists:
            logger.debug("Neither checkpoint exists: %s, %s", before, after)
            return []
        if not before_exists:
            return ["Checkpoint appeared", "No baseline to compare against"]
        if not after_exists:
            return ["Checkpoint disappeared", "Result could not be captured"]

        if _digest(before_path) == _digest(after_path):
            return []

        changes = ["Content changed"]
        before_size, after_size = before_path.stat().st_size, after_path.stat().st_size
        if before_size and abs(after_size - before_size) / before_size > MAJOR_SIZE_DELTA:
            changes.append(f"Size changed from {before_size} to {after_size} bytes")
        return changes


def recommend(significance: str, goal: str = "") -> str:
    target = f" toward '{goal}'" if goal else ""
    if significance == "major":
        return f"Major visual change detected{target}; validate the result before the next planning pass"
    if significance == "minor":
        return f"Minor visual change detected{target}; continue and keep monitoring"
    return f"No visual change detected{target}; verify the step had the intended effect"


def _digest(path: Path) -> str:
    sha = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            sha.update(chunk)
    return sha.hexdigest()

"""Visual checkpoint records captured around hybrid and browser steps"""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path

logger = logging.getLogger(__name__)

# checkpoints newer than this count as recent visual analysis data
RECENT_VISUAL_WINDOW = timedelta(hours=1)


@dataclass
class VisualCheckpoint:
    """One captured checkpoint artifact"""
    workflow_id: str
    step: str
    phase: str  # "pre" | "post"
    artifact: str
    confidence: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization"""
        return {
            "workflow_id": self.workflow_id,
            "step": self.step,
            "phase": self.phase,
            "artifact": self.artifact,
            "confidence": self.confidence,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "VisualCheckpoint":
        """Load from dict"""
        return cls(
            workflow_id=data["workflow_id"],
            step=data["step"],
            phase=data["phase"],
            artifact=data["artifact"],
            confidence=data.get("confidence", 0.0),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )

    @classmethod
    def from_file(cls, path: Path) -> "VisualCheckpoint":
        """Load checkpoint from file"""
        with open(path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)


class CheckpointManager:
    """Stores checkpoint records so later planning passes can see recent visual data"""

    def __init__(self, checkpoint_dir: Path):
        self.checkpoint_dir = checkpoint_dir

    def save_checkpoint(self, checkpoint: VisualCheckpoint) -> Path:
        """Save checkpoint record to disk"""
        self.checkpoint_dir.mkdir(parents=True, exist_ok=True)
        step = checkpoint.step.strip("/").replace("/", "_").replace(" ", "_") or "step"
        filename = f"{checkpoint.workflow_id}_{step}_{checkpoint.phase}_{checkpoint.timestamp.strftime('%Y%m%dT%H%M%S%f')}.json"
        filepath = self.checkpoint_dir / filename

        with open(filepath, 'w') as f:
            json.dump(checkpoint.to_dict(), f, indent=2)

        return filepath

    def list_checkpoints(self, workflow_id: str | None = None) -> list[VisualCheckpoint]:
        """Checkpoints in capture order, optionally for one workflow"""
        if not self.checkpoint_dir.exists():
            return []
        pattern = f"{workflow_id}_*.json" if workflow_id else "*.json"
        return self._load_all(self.checkpoint_dir.glob(pattern))

    def latest(self) -> VisualCheckpoint | None:
        checkpoints = self.list_checkpoints()
        return checkpoints[-1] if checkpoints else None

    def has_recent(self, since: datetime) -> bool:
        """Whether any checkpoint was captured at or after since.

        Files last written before since cannot hold a newer capture and are not read.
        """
        if not self.checkpoint_dir.exists():
            return False
        cutoff = since.timestamp()
        candidates = [p for p in self.checkpoint_dir.glob("*.json") if _mtime(p) >= cutoff]
        return any(c.timestamp >= since for c in self._load_all(candidates))

    def _load_all(self, paths) -> list[VisualCheckpoint]:
        """Readable checkpoints in capture order; damaged files are skipped"""
        checkpoints = []
        for path in paths:
            try:
                checkpoints.append(VisualCheckpoint.from_file(path))
            except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable checkpoint %s: %s", path.name, e)
        return sorted(checkpoints, key=lambda c: c.timestamp)


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0

"""Append-only feedback and evolution logs with JSON-lines persistence"""
import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterator

from autodev.feedback.models import EvolutionCycle, FeedbackData, LearningModel

logger = logging.getLogger(__name__)


class FeedbackHistory:
    """Append-only log of feedback events, ordered by arrival"""

    def __init__(self, items: list[FeedbackData] | None = None):
        self._items: list[FeedbackData] = list(items or [])

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[FeedbackData]:
        return iter(list(self._items))

    def append(self, feedback: FeedbackData) -> None:
        self._items.append(feedback)

    def last(self, limit: int = 10) -> list[FeedbackData]:
        return self._items[-limit:] if limit > 0 else []

    def within(self, window: timedelta, now: datetime | None = None) -> list[FeedbackData]:
        """Items whose timestamp falls inside the trailing window"""
        now = now or datetime.now()
        return [f for f in self._items if now - f.timestamp < window]

    def count_high_priority(self, window: timedelta, now: datetime | None = None) -> int:
        return sum(1 for f in self.within(window, now) if f.is_high_priority)

    def by_type(self, feedback_type: str) -> list[FeedbackData]:
        return [f for f in self._items if f.type == feedback_type]

    def by_source(self, source: str) -> list[FeedbackData]:
        return [f for f in self._items if f.source == source]


class EvolutionHistory:
    """Append-only log of completed evolution cycles, ordered by start time"""

    def __init__(self, cycles: list[EvolutionCycle] | None = None):
        self._cycles: list[EvolutionCycle] = list(cycles or [])

    def __len__(self) -> int:
        return len(self._cycles)

    def __iter__(self) -> Iterator[EvolutionCycle]:
        return iter(list(self._cycles))

    def append(self, cycle: EvolutionCycle) -> None:
        self._cycles.append(cycle)

    def last(self) -> EvolutionCycle | None:
        return self._cycles[-1] if self._cycles else None

    def recent(self, limit: int = 5) -> list[EvolutionCycle]:
        return self._cycles[-limit:] if limit > 0 else []

    def last_completed_at(self) -> datetime | None:
        for cycle in reversed(self._cycles):
            if cycle.end_time is not None:
                return cycle.end_time
        return None


class HistoryStore:
    """Persists feedback, cycles and learning models under a state directory"""

    def __init__(self, state_dir: Path):
        self.state_dir = state_dir
        self.feedback_log = self.state_dir / "feedback.jsonl"
        self.cycles_log = self.state_dir / "evolution_cycles.jsonl"
        self.models_file = self.state_dir / "learning_models.json"

    def _ensure_dir(self) -> None:
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def append_feedback(self, feedback: FeedbackData) -> None:
        self._append_line(self.feedback_log, feedback.to_dict())

    def append_cycle(self, cycle: EvolutionCycle) -> None:
        self._append_line(self.cycles_log, cycle.to_dict())

    def save_models(self, models: list[LearningModel]) -> None:
        self._ensure_dir()
        with open(self.models_file, 'w') as f:
            json.dump([m.to_dict() for m in models], f, indent=2)

    def load_feedback(self) -> list[FeedbackData]:
        return self._load_records(self.feedback_log, FeedbackData.from_dict)

    def load_cycles(self) -> list[EvolutionCycle]:
        return self._load_records(self.cycles_log, EvolutionCycle.from_dict)

    def load_models(self) -> list[LearningModel]:
        if not self.models_file.exists():
            return []
        try:
            with open(self.models_file, 'r') as f:
                return [LearningModel.from_dict(d) for d in json.load(f)]
        except (json.JSONDecodeError, TypeError, KeyError, ValueError) as e:
            logger.warning("Could not load learning models from %s: %s", self.models_file, e)
            return []

    def _append_line(self, path: Path, record: dict) -> None:
        self._ensure_dir()
        with open(path, 'a') as f:
            json.dump(record, f)
            f.write('\n')

    def _load_records(self, path: Path, from_dict) -> list:
        """One object per well-formed record; records with bad fields are skipped"""
        loaded = []
        for record in self._read_lines(path):
            try:
                loaded.append(from_dict(record))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping invalid record in %s: %s", path.name, e)
        return loaded

    def _read_lines(self, path: Path) -> list[dict]:
        if not path.exists():
            return []

        records = []
        with open(path, 'r') as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    records.append(json.loads(line))
                except json.JSONDecodeError as e:
                    logger.warning("Skipping corrupt line in %s: %s", path.name, e)
        return records

"""Undo/redo history of formatting runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from typing import Callable, Iterable, Optional
import uuid

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class RuleState:
    """Whether one rule was enabled for a run."""
    id: str
    enabled: bool


@dataclass
class Snapshot:
    """Document content plus the rule configuration that produced it."""

    id: str
    content: str
    rule_states: tuple[RuleState, ...]
    current_preset: str | None
    timestamp: str
    applied_rules: tuple[str, ...] = ()

    @property
    def key(self) -> tuple:
        """Equality key: content, rule enabled states and preset."""
        states = tuple(sorted((s.id, s.enabled) for s in self.rule_states))
        return (self.content, states, self.current_preset)

    def same_state(self, other: Snapshot) -> bool:
        return self.key == other.key

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "rule_states": [{"id": s.id, "enabled": s.enabled} for s in self.rule_states],
            "current_preset": self.current_preset,
            "timestamp": self.timestamp,
            "applied_rules": list(self.applied_rules),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Snapshot:
        return cls(
            id=data["id"],
            content=data["content"],
            rule_states=tuple(RuleState(s["id"], bool(s["enabled"])) for s in data.get("rule_states", [])),
            current_preset=data.get("current_preset"),
            timestamp=data["timestamp"],
            applied_rules=tuple(data.get("applied_rules", ())),
        )


@dataclass
class SnapshotManager:
    """
    Bounded history of snapshots with undo and redo.

    Pushing a snapshot equal to the latest one only refreshes its
    timestamp. Beyond `max_history` entries the oldest are dropped. Any
    new snapshot clears the redo stack.
    """

    max_history: int = 10
    clock: Optional[Callable[[], str]] = None
    _history: list[Snapshot] = field(default_factory=list, repr=False)
    _redo: list[Snapshot] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if self.max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {self.max_history}")

    def _now(self) -> str:
        return self.clock() if self.clock else _utc_now()

    def push(
        self,
        content: str,
        rule_states: Iterable[RuleState],
        current_preset: str | None = None,
        applied_rules: Iterable[str] = ()
    ) -> Snapshot:
        """
        Record a formatting run.

        Returns:
            The stored snapshot (the refreshed latest one when deduplicated)
        """
        snapshot = Snapshot(
            id=str(uuid.uuid4()),
            content=content,
            rule_states=tuple(rule_states),
            current_preset=current_preset,
            timestamp=self._now(),
            applied_rules=tuple(applied_rules),
        )

        latest = self.latest()
        if latest is not None and latest.same_state(snapshot):
            latest.timestamp = snapshot.timestamp
            return latest

        self._history.append(snapshot)
        self._redo.clear()

        while len(self._history) > self.max_history:
            evicted = self._history.pop(0)
            logger.debug(f"Evicted snapshot {evicted.id}")

        return snapshot

    def latest(self) -> Snapshot | None:
        return self._history[-1] if self._history else None

    def list(self) -> list[Snapshot]:
        """Snapshots from oldest to newest."""
        return list(self._history)

    def delete(self, snapshot_id: str) -> bool:
        for stack in (self._history, self._redo):
            for index, snapshot in enumerate(stack):
                if snapshot.id == snapshot_id:
                    del stack[index]
                    return True
        return False

    def clear(self) -> None:
        self._history.clear()
        self._redo.clear()

    @property
    def can_undo(self) -> bool:
        return len(self._history) > 1

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> Snapshot | None:
        """Step back one snapshot and return the new latest."""
        if not self.can_undo:
            return None
        self._redo.append(self._history.pop())
        return self._history[-1]

    def redo(self) -> Snapshot | None:
        """Reapply the most recently undone snapshot."""
        if not self._redo:
            return None
        snapshot = self._redo.pop()
        self._history.append(snapshot)
        return snapshot

    def to_dict(self) -> dict:
        return {
            "max_history": self.max_history,
            "history": [s.to_dict() for s in self._history],
            "redo": [s.to_dict() for s in self._redo],
        }

    @classmethod
    def from_dict(cls, data: dict, clock: Optional[Callable[[], str]] = None) -> SnapshotManager:
        manager = cls(max_history=data.get("max_history", 10), clock=clock)
        manager._history = [Snapshot.from_dict(s) for s in data.get("history", [])]
        manager._redo = [Snapshot.from_dict(s) for s in data.get("redo", [])]
        while len(manager._history) > manager.max_history:
            manager._history.pop(0)
        return manager

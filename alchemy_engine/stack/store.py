"""Layered edit stack: independently toggleable command entries."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field

from ..effects.model import Effect
from ..effects.parser import parse_effects
from ..effects.reconstruct import reconstruct_command
from ..grammar.registry import is_group
from ..grammar.tokens import tokenize

PROVENANCES = ("preset", "generated", "manual")


class EntryIds:
    """Monotonic id source; ids are never handed out twice."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)


@dataclass
class StackEntry:
    id: int
    label: str
    command: str
    enabled: bool = True
    effects: list[Effect] = field(default_factory=list)
    provenance: str = "manual"

    def render(self) -> str:
        if self.effects:
            return reconstruct_command(self.effects)
        return self.command


def _editable_effects(command: str) -> list[Effect]:
    # layer groups cannot be rebuilt from a flat effect list; they stay raw text
    if any(is_group(token) for token in tokenize(command)):
        return []
    return parse_effects(command)


class EffectStack:
    def __init__(self, ids: EntryIds | None = None) -> None:
        self._ids = ids or EntryIds()
        self._entries: list[StackEntry] = []

    @property
    def entries(self) -> list[StackEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, label: str, command: str, provenance: str = "manual") -> StackEntry:
        if provenance not in PROVENANCES:
            raise ValueError(f"Unknown provenance: {provenance}")
        entry = StackEntry(
            id=self._ids.next(),
            label=label,
            command=command,
            effects=_editable_effects(command),
            provenance=provenance,
        )
        self._entries.append(entry)
        return entry

    def get(self, entry_id: int) -> StackEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def _index(self, entry_id: int) -> int:
        for idx, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return idx
        return -1

    def remove(self, entry_id: int) -> bool:
        idx = self._index(entry_id)
        if idx == -1:
            return False
        del self._entries[idx]
        return True

    def toggle(self, entry_id: int) -> bool | None:
        entry = self.get(entry_id)
        if entry is None:
            return None
        entry.enabled = not entry.enabled
        return entry.enabled

    def move(self, entry_id: int, offset: int) -> bool:
        """Swap an entry with its neighbour; out-of-range moves are ignored."""
        idx = self._index(entry_id)
        target = idx + offset
        if idx == -1 or offset not in (-1, 1) or not 0 <= target < len(self._entries):
            return False
        self._entries[idx], self._entries[target] = self._entries[target], self._entries[idx]
        return True

    def update_effects(self, entry_id: int, effects: list[Effect]) -> StackEntry | None:
        entry = self.get(entry_id)
        if entry is None:
            return None
        entry.effects = effects
        entry.command = reconstruct_command(effects)
        return entry

    def pop(self) -> StackEntry | None:
        if not self._entries:
            return None
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()

    def build_command(self) -> str:
        pieces = [entry.render() for entry in self._entries if entry.enabled]
        return " ".join(piece for piece in pieces if piece.strip())

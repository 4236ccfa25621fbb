"""Vibe agent: text in, stack entries out."""

from __future__ import annotations

import threading

from .grammar.splitter import split_command
from .grammar.validator import validate_command
from .presets import lookup_preset
from .runs.events import EventWriter
from .sources.base import CommandSource, GenerationRequest
from .stack.store import EffectStack, StackEntry

FALLBACK_COMMAND = "-charcoal 5 -colorspace Gray"


class VibeAgent:
    def __init__(self, stack: EffectStack, source: CommandSource, events: EventWriter) -> None:
        self.stack = stack
        self.source = source
        self.events = events
        self._busy = threading.Lock()

    def process_vibe(self, vibe: str) -> list[StackEntry]:
        """Resolve a vibe into stack entries.

        A preset name short-circuits generation. Otherwise the source output is
        validated, split, and each segment is pushed as its own entry. Returns
        an empty list when another vibe is still being processed.
        """
        if not self._busy.acquire(blocking=False):
            return []
        try:
            return self._process(vibe)
        finally:
            self._busy.release()

    def _process(self, vibe: str) -> list[StackEntry]:
        preset = lookup_preset(vibe)
        if preset:
            name, command = preset
            self.events.emit("preset_matched", vibe=vibe, preset=name)
            return [self.stack.push(vibe.strip(), command, "preset")]

        try:
            generated = "".join(self.source.stream(GenerationRequest(vibe=vibe)))
        except Exception as exc:
            self.events.emit("generation_failed", vibe=vibe, source=self.source.name, error=str(exc))
            raise
        self.events.emit("command_generated", vibe=vibe, source=self.source.name, command=generated)

        result = validate_command(generated)
        if result.stripped:
            self.events.emit("validation_stripped", stripped=result.stripped)
        command = result.command
        if not command.strip():
            self.events.emit("validation_fallback", command=FALLBACK_COMMAND)
            command = FALLBACK_COMMAND

        entries = [self.stack.push(segment.label, segment.command, "generated") for segment in split_command(command)]
        self.events.emit("entries_pushed", count=len(entries), ids=[entry.id for entry in entries])
        return entries

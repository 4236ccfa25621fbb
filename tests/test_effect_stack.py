from __future__ import annotations

import pytest

from alchemy_engine.stack.store import EffectStack, EntryIds


def test_push_parses_effects_and_assigns_ids() -> None:
    stack = EffectStack()
    first = stack.push("Blur", "-blur 3")
    second = stack.push("Negate", "-negate", "preset")
    assert first.id != second.id
    assert first.effects[0].flag == "blur"
    assert second.provenance == "preset"
    assert [entry.id for entry in stack.entries] == [first.id, second.id]


def test_unknown_provenance_is_rejected() -> None:
    with pytest.raises(ValueError):
        EffectStack().push("Blur", "-blur 3", "ai")


def test_ids_are_never_reused() -> None:
    ids = EntryIds()
    stack = EffectStack(ids)
    entry = stack.push("Blur", "-blur 3")
    stack.remove(entry.id)
    stack.clear()
    other = EffectStack(ids).push("Blur", "-blur 3")
    again = stack.push("Blur", "-blur 3")
    assert len({entry.id, other.id, again.id}) == 3


def test_toggle_excludes_entry_from_command() -> None:
    stack = EffectStack()
    blur = stack.push("Blur", "-blur 3")
    stack.push("Swirl", "-swirl 90")
    assert stack.toggle(blur.id) is False
    assert stack.build_command() == "-swirl 90"
    assert stack.toggle(blur.id) is True
    assert stack.build_command() == "-blur 3 -swirl 90"
    assert stack.toggle(999) is None


def test_move_swaps_neighbours() -> None:
    stack = EffectStack()
    a = stack.push("A", "-blur 3")
    b = stack.push("B", "-swirl 90")
    assert stack.move(b.id, -1)
    assert [entry.id for entry in stack.entries] == [b.id, a.id]
    assert not stack.move(b.id, -1)
    assert not stack.move(a.id, 2)


def test_update_effects_rewrites_command() -> None:
    stack = EffectStack()
    entry = stack.push("Blur", "-blur 3")
    effects = entry.effects
    effects[0].args[0].value = 7
    stack.update_effects(entry.id, effects)
    assert stack.get(entry.id).command == "-blur 7"
    assert stack.build_command() == "-blur 7"


def test_build_command_skips_empty_pieces() -> None:
    stack = EffectStack()
    negate = stack.push("Negate", "-negate")
    negate.effects[0].args[0].value = 0
    stack.push("Blur", "-blur 3")
    assert stack.build_command() == "-blur 3"


def test_layer_groups_keep_raw_text() -> None:
    stack = EffectStack()
    entry = stack.push("Layer Group", "( +clone -negate ) -compose Screen -composite")
    assert entry.effects == []
    assert stack.build_command() == "( +clone -negate ) -compose Screen -composite"


def test_entries_without_effects_use_raw_text() -> None:
    stack = EffectStack()
    entry = stack.push("Blur", "-blur 3")
    entry.effects = []
    entry.command = "-blur 4"
    assert stack.build_command() == "-blur 4"


def test_pop_and_clear() -> None:
    stack = EffectStack()
    assert stack.pop() is None
    stack.push("A", "-blur 3")
    last = stack.push("B", "-negate")
    assert stack.pop() is last
    assert len(stack) == 1
    stack.clear()
    assert stack.entries == []
    assert stack.build_command() == ""

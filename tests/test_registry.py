"""
Tests for ProfileRegistry
"""

import itertools

import pytest

from covmerge_py.core.errors import ModeMismatchError, OverlapError, UnsupportedModeError
from covmerge_py.core.eval import summarize
from covmerge_py.core.profile import Block, Profile
from covmerge_py.core.registry import ProfileRegistry
from covmerge_py.instrumentation.coverage import dumps_profiles


def make(name, mode="count", *blocks):
    return Profile(file_name=name, mode=mode, blocks=list(blocks))


def test_orders_by_file_name():
    reg = ProfileRegistry()
    reg.add(make("z.go", "count", Block(1, 1, 2, 1, 1, 1)))
    reg.add(make("a.go", "count", Block(1, 1, 2, 1, 1, 1)))
    reg.add(make("m.go", "count", Block(1, 1, 2, 1, 1, 1)))
    assert [p.file_name for p in reg.all()] == ["a.go", "m.go", "z.go"]
    assert len(reg) == 3
    assert reg.mode == "count"


def test_result_independent_of_arrival_order():
    inputs = [
        make("b.go", "count", Block(1, 1, 2, 1, 1, 1), Block(4, 1, 5, 1, 2, 0)),
        make("a.go", "count", Block(3, 1, 3, 20, 1, 2)),
        make("b.go", "count", Block(4, 1, 5, 1, 2, 5), Block(7, 1, 8, 1, 1, 0)),
    ]
    outputs = set()
    for order in itertools.permutations(inputs):
        reg = ProfileRegistry()
        for p in order:
            reg.add(p)
        outputs.add(dumps_profiles(reg.all()))
    assert len(outputs) == 1
    assert outputs.pop() == (
        "mode: count\n"
        "a.go:3.1,3.20 1 2\n"
        "b.go:1.1,2.1 1 1\n"
        "b.go:4.1,5.1 2 5\n"
        "b.go:7.1,8.1 1 0\n"
    )


def test_add_existing_merges_blocks():
    reg = ProfileRegistry()
    first = reg.add(make("a.go", "count", Block(1, 1, 2, 1, 1, 1)))
    second = reg.add(make("a.go", "count", Block(1, 1, 2, 1, 1, 2), Block(3, 1, 4, 1, 1, 0)))
    assert first.inserted == 1
    assert (second.inserted, second.combined) == (1, 1)
    p = reg.get("a.go")
    assert [b.count for b in p.blocks] == [3, 0]
    assert reg.get("missing.go") is None


def test_incoming_profiles_are_not_aliased():
    reg = ProfileRegistry()
    first = make("a.go", "count", Block(1, 1, 2, 1, 1, 1))
    reg.add(first)
    reg.add(make("a.go", "count", Block(1, 1, 2, 1, 1, 4), Block(3, 1, 4, 1, 1, 1)))
    assert first.blocks == [Block(1, 1, 2, 1, 1, 1)]
    assert reg.get("a.go").blocks[0].count == 5


def test_run_level_mode_mismatch():
    reg = ProfileRegistry()
    reg.add(make("a.go", "count", Block(1, 1, 2, 1, 1, 1)))
    with pytest.raises(ModeMismatchError):
        reg.add(make("b.go", "set", Block(1, 1, 2, 1, 1, 1)))
    with pytest.raises(ModeMismatchError):
        reg.add(make("a.go", "set", Block(1, 1, 2, 1, 1, 1)))
    assert len(reg) == 1
    assert reg.get("a.go").blocks == [Block(1, 1, 2, 1, 1, 1)]


def test_unknown_mode_rejected():
    reg = ProfileRegistry()
    with pytest.raises(UnsupportedModeError):
        reg.add(make("a.go", "weird", Block(1, 1, 2, 1, 1, 1)))
    assert len(reg) == 0
    assert reg.mode is None


def test_end_to_end_two_runs_same_file():
    reg = ProfileRegistry()
    reg.add(make("pkg/a.go", "count", Block(1, 1, 3, 2, 2, 0)))
    reg.add(make("pkg/a.go", "count", Block(1, 1, 3, 2, 2, 0), Block(5, 1, 6, 2, 3, 2)))

    (p,) = reg.all()
    assert p.file_name == "pkg/a.go"
    assert [(b.start, b.end, b.count) for b in p.blocks] == [
        ((1, 1), (3, 2), 0),
        ((5, 1), (6, 2), 2),
    ]
    covered, not_covered, ratio = summarize(reg)
    assert (covered, not_covered) == (3, 2)
    assert ratio == pytest.approx(60.0)


def test_add_all_sums_stats():
    reg = ProfileRegistry()
    stats = reg.add_all([
        make("a.go", "set", Block(1, 1, 2, 1, 1, 1)),
        make("a.go", "set", Block(1, 1, 2, 1, 1, 0), Block(3, 1, 4, 1, 1, 1)),
    ])
    assert (stats.inserted, stats.combined) == (2, 1)
    assert [p.file_name for p in reg] == ["a.go"]


def test_first_profile_with_overlap_rejected():
    reg = ProfileRegistry()
    with pytest.raises(OverlapError):
        reg.add(make("a.go", "count", Block(1, 1, 1, 5, 1, 1), Block(1, 3, 1, 8, 1, 1)))
    assert len(reg) == 0
    assert reg.mode is None


def test_first_profile_is_sorted_and_deduplicated():
    reg = ProfileRegistry()
    stats = reg.add(make("a.go", "count",
                         Block(5, 1, 6, 1, 1, 1),
                         Block(1, 1, 2, 1, 1, 2),
                         Block(5, 1, 6, 1, 1, 3)))
    assert [(b.start, b.count) for b in reg.get("a.go").blocks] == [((1, 1), 2), ((5, 1), 4)]
    assert (stats.inserted, stats.combined) == (2, 1)


def test_conflicting_inputs_fail_in_any_order():
    overlapping = make("a.go", "count", Block(1, 1, 1, 5, 1, 1), Block(1, 3, 1, 8, 1, 1))
    clean = make("a.go", "count", Block(1, 1, 1, 5, 1, 1))
    for order in itertools.permutations([overlapping, clean]):
        reg = ProfileRegistry()
        with pytest.raises(OverlapError):
            for p in order:
                reg.add(p)

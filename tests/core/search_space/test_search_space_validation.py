"""Testes unitários — validação de JvmSearchSpace.

Cobre:
- restrição global parcial (campos ausentes ficam livres)
- registro completo exigido para `jvm_parameters` de subject
- GC modes distintos como candidatos de mesmo peso; repetidos rejeitados
- propagação de RangeError com o campo ofensor
"""

from __future__ import annotations

import dataclasses

import pytest

from jvmtune.core.config.schema import GcMode, Int64Range, JvmSearchSpace
from jvmtune.core.exceptions import DuplicateGcMode, IncompleteSearchSpace, InvertedBounds
from jvmtune.core.search_space.space import SearchSpaceOrigin, validate_search_space


def test_partial_restriction_is_accepted(program_restriction):
    resolved = validate_search_space(program_restriction, complete=False)

    assert resolved.origin is SearchSpaceOrigin.PROGRAM_RESTRICTION
    assert set(resolved.ranges) == {"heap_size"}
    assert resolved.flags == {}
    assert list(resolved.expand("heap_size")) == [256, 512, 768, 1024]


def test_complete_space_is_accepted(complete_jvm_parameters):
    resolved = validate_search_space(complete_jvm_parameters, complete=True)

    assert resolved.origin is SearchSpaceOrigin.SUBJECT
    assert len(resolved.ranges) == 21
    assert len(resolved.flags) == 3
    assert list(resolved.expand("heap_size")) == [1024, 2048, 3072, 4096]


def test_incomplete_subject_space_lists_missing_fields(complete_jvm_parameters):
    partial = dataclasses.replace(complete_jvm_parameters, new_ratio=None, cms_incremental_mode=None)

    with pytest.raises(IncompleteSearchSpace) as exc:
        validate_search_space(partial, complete=True, scope={"cluster": "prod"})

    assert exc.value.details["missing"] == ["new_ratio", "cms_incremental_mode"]
    assert exc.value.details["cluster"] == "prod"


def test_subject_space_requires_gc_mode(complete_jvm_parameters):
    no_modes = dataclasses.replace(complete_jvm_parameters, gc_mode=())
    with pytest.raises(IncompleteSearchSpace) as exc:
        validate_search_space(no_modes, complete=True)
    assert exc.value.details["missing"] == ["gc_mode"]


def test_distinct_gc_modes_are_equally_weighted():
    space = JvmSearchSpace(gc_mode=(GcMode.USE_PARALLEL, GcMode.USE_SERIAL, GcMode.USE_PARALLEL_OLD))
    candidates = validate_search_space(space, complete=False).gc_mode_candidates()

    assert [mode for mode, _ in candidates] == [GcMode.USE_PARALLEL, GcMode.USE_SERIAL, GcMode.USE_PARALLEL_OLD]
    assert sum(weight for _, weight in candidates) == pytest.approx(1.0)
    assert len({weight for _, weight in candidates}) == 1


def test_repeated_gc_mode_is_rejected():
    space = JvmSearchSpace(gc_mode=(GcMode.USE_SERIAL, GcMode.USE_SERIAL))
    with pytest.raises(DuplicateGcMode):
        validate_search_space(space, complete=False)


def test_invalid_range_reports_field():
    space = JvmSearchSpace(new_size=Int64Range(floor=10, ceiling=1))
    with pytest.raises(InvertedBounds) as exc:
        validate_search_space(space, complete=False)
    assert exc.value.field == "new_size"


def test_expand_unknown_field_raises(program_restriction):
    resolved = validate_search_space(program_restriction, complete=False)
    with pytest.raises(KeyError):
        resolved.expand("new_ratio")


def test_to_dict_is_serializable(program_restriction):
    out = validate_search_space(program_restriction, complete=False).to_dict()
    assert out == {
        "origin": "program_restriction",
        "gc_mode": ["USE_PARALLEL", "USE_PARALLEL_OLD"],
        "ranges": {"heap_size": {"mode": "range", "floor": 256, "ceiling": 1024, "step_size": 256}},
        "flags": {},
    }

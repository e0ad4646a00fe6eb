"""Testes unitários — search space por subject.

Cobre:
- `jvm_parameters` completo substitui a restrição global inteira
- sem `jvm_parameters`, o subject herda a restrição global
- `jvm_parameters` incompleto ou inválido é rejeitado com caminho de escopo
- a saída não compartilha estado com a entrada
"""

from __future__ import annotations

from dataclasses import replace

import pytest

from jvmtune.core.config.schema import ExtendedSubjectConfig, GcMode, Int64Range
from jvmtune.core.exceptions import IncompleteSearchSpace, InvertedBounds
from jvmtune.core.search_space import SearchSpaceOrigin


def _resolve(make_program, **overrides):
    from jvmtune.core.resolver import ConfigResolver

    return ConfigResolver().resolve(make_program(**overrides))


def test_subject_inherits_program_restriction(make_program, program_restriction):
    subjects = _resolve(make_program, program_jvm_search_restriction=program_restriction)

    space = subjects[0].search_space
    assert space.origin is SearchSpaceOrigin.PROGRAM_RESTRICTION
    assert space.gc_modes == (GcMode.USE_PARALLEL, GcMode.USE_PARALLEL_OLD)
    assert list(space.expand("heap_size")) == [256, 512, 768, 1024]
    assert "new_ratio" not in space.ranges


def test_no_restriction_and_no_override_gives_no_search_space(make_program):
    subjects = _resolve(make_program)
    assert all(s.search_space is None for s in subjects)


def test_subject_parameters_replace_restriction(make_program, program_restriction, complete_jvm_parameters):
    entries = (
        ExtendedSubjectConfig(subject_index=0),
        ExtendedSubjectConfig(subject_index=1, jvm_parameters=complete_jvm_parameters),
    )
    subjects = _resolve(
        make_program,
        program_jvm_search_restriction=program_restriction,
        group_number_of_subjects=2,
        group_subject_config=entries,
    )

    inherited, own = subjects[0].search_space, subjects[1].search_space
    assert inherited.origin is SearchSpaceOrigin.PROGRAM_RESTRICTION
    assert own.origin is SearchSpaceOrigin.SUBJECT
    assert own.gc_modes == (GcMode.USE_CONC_MARK_SWEEP,)
    assert list(own.expand("heap_size")) == [1024, 2048, 3072, 4096]
    assert own.flags == {
        "cms_incremental_mode": True,
        "cms_incremental_pacing": True,
        "use_cms_initiating_occupancy_only": True,
    }


def test_incomplete_subject_parameters_fail(make_program, complete_jvm_parameters):
    partial = replace(complete_jvm_parameters, survivor_ratio=None)
    entries = (ExtendedSubjectConfig(subject_index=1, jvm_parameters=partial),)

    with pytest.raises(IncompleteSearchSpace) as exc:
        _resolve(make_program, group_number_of_subjects=2, group_subject_config=(ExtendedSubjectConfig(),) + entries)

    assert exc.value.details["missing"] == ["survivor_ratio"]
    assert exc.value.details["subject_index"] == 1
    assert exc.value.scope_path == "prod → web → subject[1] → jvm_parameters"


def test_invalid_range_in_restriction_fails(make_program, program_restriction):
    bad = replace(program_restriction, new_ratio=Int64Range(floor=8, ceiling=2))
    with pytest.raises(InvertedBounds) as exc:
        _resolve(make_program, program_jvm_search_restriction=bad)
    assert exc.value.field == "new_ratio"


def test_subjects_do_not_share_search_space_dicts(make_program, program_restriction):
    subjects = _resolve(make_program, program_jvm_search_restriction=program_restriction)

    first, second = subjects[0].search_space, subjects[1].search_space
    assert first == second
    assert first.ranges is not second.ranges
    first.ranges.pop("heap_size")
    assert "heap_size" in second.ranges

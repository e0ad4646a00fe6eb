"""Testes unitários — partição baseline / experimental.

Os primeiros `number_of_default_subjects` subjects (por índice) são
baseline: rodam com settings padrão e não recebem search space.
"""

from __future__ import annotations

import pytest

from jvmtune.core.config.schema import ExtendedSubjectConfig
from jvmtune.core.exceptions import InvalidDefaultSubjectCount, NegativeSubjectCount
from jvmtune.core.resolver import ConfigResolver, ResolutionContext


def test_first_subjects_are_baseline(make_program, program_restriction):
    program = make_program(
        group_number_of_subjects=10,
        group_number_of_default_subjects=3,
        program_jvm_search_restriction=program_restriction,
    )
    subjects = ConfigResolver().resolve(program)

    assert len(subjects) == 10
    assert [s.subject_index for s in subjects if s.is_baseline] == [0, 1, 2]
    assert all(s.search_space is None for s in subjects if s.is_baseline)
    assert all(s.search_space is not None for s in subjects if not s.is_baseline)


def test_all_subjects_can_be_baseline(make_program):
    subjects = ConfigResolver().resolve(make_program(group_number_of_default_subjects=5))
    assert all(s.is_baseline for s in subjects)


def test_default_count_above_active_subjects_fails(make_program):
    with pytest.raises(InvalidDefaultSubjectCount) as exc:
        ConfigResolver().resolve(
            make_program(group_number_of_subjects=10, group_number_of_default_subjects=11)
        )
    assert exc.value.field == "number_of_default_subjects"
    assert exc.value.details["active_subjects"] == 10


def test_default_count_checked_against_external_count(make_program):
    program = make_program(group_number_of_subjects=0, group_number_of_default_subjects=3)
    with pytest.raises(InvalidDefaultSubjectCount):
        ConfigResolver().resolve(program, subject_counts={("prod", "web"): 2})


def test_negative_default_count_fails(make_program):
    with pytest.raises(NegativeSubjectCount) as exc:
        ConfigResolver().resolve(make_program(group_number_of_default_subjects=-1))
    assert exc.value.field == "number_of_default_subjects"


def test_baseline_follows_sorted_index_not_declaration_order(make_program):
    entries = tuple(ExtendedSubjectConfig(subject_index=i) for i in (2, 0, 1))
    subjects = ConfigResolver().resolve(
        make_program(group_number_of_subjects=3, group_number_of_default_subjects=1, group_subject_config=entries)
    )
    assert [(s.subject_index, s.is_baseline) for s in subjects] == [(0, True), (1, False), (2, False)]


def test_baseline_jvm_parameters_are_discarded_with_warning(make_program, complete_jvm_parameters):
    entries = (ExtendedSubjectConfig(subject_index=0, jvm_parameters=complete_jvm_parameters),)
    ctx = ResolutionContext()
    subjects = ConfigResolver().resolve(
        make_program(
            group_number_of_subjects=0,
            group_number_of_default_subjects=1,
            group_subject_config=entries,
        ),
        subject_counts={("prod", "web"): 2},
        ctx=ctx,
    )

    assert subjects[0].is_baseline
    assert subjects[0].search_space is None
    assert "prod/web/subject[0]" in ctx.warnings

"""Testes unitários — exceções canônicas e mapeamento para ErrorPayload."""

from __future__ import annotations

import pytest

from jvmtune.core.config.errors import ConfigError, ConfigSchemaError
from jvmtune.core.errors import (
    CONFIG_ERROR,
    DUPLICATE_SUBJECT_INDEX,
    INVERTED_BOUNDS,
    ErrorPayload,
    exception_to_error,
)
from jvmtune.core.exceptions import (
    DuplicateSubjectIndex,
    InvertedBounds,
    JvmTuneException,
    MissingRequiredField,
    RangeError,
)


def test_scope_path_follows_scope_order():
    exc = InvertedBounds(
        message="floor maior que ceiling",
        details={"field": "heap_size", "subject_index": 3, "subject_group": "web", "cluster": "prod"},
    )
    assert exc.scope_path == "prod → web → subject[3] → heap_size"
    assert str(exc) == "floor maior que ceiling [prod → web → subject[3] → heap_size]"


def test_scope_path_skips_absent_keys():
    exc = MissingRequiredField(message="user ausente", details={"cluster": "prod", "field": "user"})
    assert exc.scope_path == "prod → user"
    assert exc.field == "user"


def test_exception_without_scope_has_plain_message():
    exc = JvmTuneException(message="falhou")
    assert exc.scope_path == ""
    assert str(exc) == "falhou"
    assert exc.field is None


def test_hierarchy_is_catchable_as_config_error():
    with pytest.raises(ConfigError):
        raise InvertedBounds(message="x")
    assert issubclass(InvertedBounds, RangeError)


def test_exception_to_error_maps_type_code():
    exc = DuplicateSubjectIndex(
        message="subject_index 1 declarado mais de uma vez",
        details={"cluster": "prod", "subject_group": "web", "subject_index": 1, "field": "subject_index"},
        hint="corrija",
    )
    payload = exception_to_error(exc)

    assert isinstance(payload, ErrorPayload)
    assert payload.type == DUPLICATE_SUBJECT_INDEX
    assert payload.hint == "corrija"
    assert payload.details["scope_path"] == "prod → web → subject[1] → subject_index"
    assert "scope_path" not in exc.details


def test_exception_to_error_for_range_error():
    payload = exception_to_error(InvertedBounds(message="x", details={"field": "new_ratio"}))
    assert payload.type == INVERTED_BOUNDS
    assert payload.to_dict()["details"] == {"field": "new_ratio", "scope_path": "new_ratio"}


def test_exception_to_error_for_loader_errors():
    payload = exception_to_error(ConfigSchemaError("cluster[0]: unknown keys ['foo']"))
    assert payload.type == CONFIG_ERROR
    assert payload.details == {"exception_class": "ConfigSchemaError"}
    assert "unknown keys" in payload.message

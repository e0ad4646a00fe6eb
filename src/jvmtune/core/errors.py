"""
jvmtune — Canonical Error Structures

Este módulo define o payload canônico de erro devolvido quando uma
resolução falha sem propagar exceção (`ConfigResolver.try_resolve`).

Erros fazem parte do contrato com o orquestrador de experimentos e devem ser:

- explícitos
- serializáveis
- acionáveis (sempre com caminho de escopo)

Nenhuma correção implícita é permitida.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .config.errors import ConfigError
from .exceptions import (
    AmbiguousSpecification,
    DuplicateGcMode,
    DuplicateSubjectIndex,
    EmptyConfiguration,
    IncompleteRange,
    IncompleteSearchSpace,
    InvalidDefaultSubjectCount,
    InvalidFieldValue,
    InvertedBounds,
    JvmTuneException,
    MissingRequiredField,
    MissingSubjectCount,
    NegativeSubjectCount,
    SubjectIndexOutOfRange,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do jvmtune.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: caminho de escopo e dados estruturados para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro
# ---------------------------------------------------------------------------

# Estrutura
EMPTY_CONFIGURATION = "EMPTY_CONFIGURATION"
DUPLICATE_SUBJECT_INDEX = "DUPLICATE_SUBJECT_INDEX"
INCOMPLETE_SEARCH_SPACE = "INCOMPLETE_SEARCH_SPACE"
DUPLICATE_GC_MODE = "DUPLICATE_GC_MODE"

# Campos
MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
INVALID_FIELD_VALUE = "INVALID_FIELD_VALUE"

# Ranges
AMBIGUOUS_SPECIFICATION = "AMBIGUOUS_SPECIFICATION"
INCOMPLETE_RANGE = "INCOMPLETE_RANGE"
INVERTED_BOUNDS = "INVERTED_BOUNDS"

# Subjects
INVALID_DEFAULT_SUBJECT_COUNT = "INVALID_DEFAULT_SUBJECT_COUNT"
NEGATIVE_SUBJECT_COUNT = "NEGATIVE_SUBJECT_COUNT"
MISSING_SUBJECT_COUNT = "MISSING_SUBJECT_COUNT"
SUBJECT_INDEX_OUT_OF_RANGE = "SUBJECT_INDEX_OUT_OF_RANGE"

# Carregamento / schema
CONFIG_ERROR = "CONFIG_ERROR"


_TYPE_BY_EXCEPTION = {
    EmptyConfiguration: EMPTY_CONFIGURATION,
    DuplicateSubjectIndex: DUPLICATE_SUBJECT_INDEX,
    IncompleteSearchSpace: INCOMPLETE_SEARCH_SPACE,
    DuplicateGcMode: DUPLICATE_GC_MODE,
    MissingRequiredField: MISSING_REQUIRED_FIELD,
    InvalidFieldValue: INVALID_FIELD_VALUE,
    AmbiguousSpecification: AMBIGUOUS_SPECIFICATION,
    IncompleteRange: INCOMPLETE_RANGE,
    InvertedBounds: INVERTED_BOUNDS,
    InvalidDefaultSubjectCount: INVALID_DEFAULT_SUBJECT_COUNT,
    NegativeSubjectCount: NEGATIVE_SUBJECT_COUNT,
    MissingSubjectCount: MISSING_SUBJECT_COUNT,
    SubjectIndexOutOfRange: SUBJECT_INDEX_OUT_OF_RANGE,
}


def exception_to_error(exc: ConfigError) -> ErrorPayload:
    """Converte uma exceção de configuração em `ErrorPayload`.

    Regras:
    - JvmTuneException: código estável do catálogo + details/hint da exceção.
    - Demais ConfigError (loader, schema): CONFIG_ERROR com a classe em details.
    """
    if isinstance(exc, JvmTuneException):
        code = _TYPE_BY_EXCEPTION.get(type(exc), type(exc).__name__)
        details = dict(exc.details)
        if exc.scope_path:
            details["scope_path"] = exc.scope_path
        return ErrorPayload(
            type=code,
            message=exc.message,
            details=details,
            hint=exc.hint,
        )

    return ErrorPayload(
        type=CONFIG_ERROR,
        message=str(exc) or "Configuração inválida",
        details={"exception_class": exc.__class__.__name__},
        hint="Revise o arquivo de configuração indicado e resolva novamente.",
    )

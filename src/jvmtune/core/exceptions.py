"""
jvmtune — Canonical Exceptions

Este módulo define as exceções tipadas levantadas durante a validação de
ranges e a resolução de escopos (Program → Cluster → SubjectGroup → Subject).

Objetivo:
- Permitir falhas semânticas tipadas em vez de ValueError genéricos
- Carregar o caminho de escopo ofensor em `details` (cluster, subject_group,
  subject_index, field), tornando o erro acionável
- Facilitar o mapeamento determinístico para `ErrorPayload`

Regras:
- Exceções carregam apenas dados estruturados (serializáveis).
- Nenhuma exceção é corrigida silenciosamente: o chamador corrige o input
  e resolve novamente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .config.errors import ConfigError


_SCOPE_KEYS = ("cluster", "subject_group", "subject_index", "field")


@dataclass(frozen=True)
class JvmTuneException(ConfigError):
    """Base class para exceções de resolução do jvmtune.

    Importante:
    - `details` usa as chaves de escopo `cluster`, `subject_group`,
      `subject_index` e `field` quando aplicáveis
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        path = self.scope_path
        return f"{self.message} [{path}]" if path else self.message

    @property
    def field(self) -> Optional[str]:
        return self.details.get("field")

    @property
    def scope_path(self) -> str:
        """Caminho de escopo legível, ex.: `prod → web → subject[3] → heap_size`."""
        parts = []
        for key in _SCOPE_KEYS:
            if key not in self.details or self.details[key] is None:
                continue
            value = self.details[key]
            parts.append(f"subject[{value}]" if key == "subject_index" else str(value))
        return " → ".join(parts)


# ---------------------------------------------------------------------------
# Estrutura
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StructuralError(JvmTuneException):
    """Aninhamento obrigatório ausente ou inconsistente."""


@dataclass(frozen=True)
class EmptyConfiguration(StructuralError):
    """Lista de clusters ou de subject groups vazia."""


@dataclass(frozen=True)
class DuplicateSubjectIndex(StructuralError):
    """Dois `ExtendedSubjectConfig` do mesmo grupo apontam para o mesmo índice."""


@dataclass(frozen=True)
class IncompleteSearchSpace(StructuralError):
    """`jvm_parameters` de subject presente sem todos os campos definidos."""


@dataclass(frozen=True)
class DuplicateGcMode(StructuralError):
    """O mesmo GC mode aparece mais de uma vez em `gc_mode`."""


# ---------------------------------------------------------------------------
# Resolução de campos
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldResolutionError(JvmTuneException):
    """Campo escalar não pôde ser resolvido a partir dos escopos."""


@dataclass(frozen=True)
class MissingRequiredField(FieldResolutionError):
    """Campo obrigatório não definido em nenhum escopo."""


@dataclass(frozen=True)
class InvalidFieldValue(FieldResolutionError):
    """Campo definido com valor fora do domínio permitido."""


# ---------------------------------------------------------------------------
# Ranges numéricos
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RangeError(JvmTuneException):
    """Int64Range ambíguo, incompleto ou invertido."""


@dataclass(frozen=True)
class AmbiguousSpecification(RangeError):
    """`value` definido junto com `floor` e/ou `ceiling`."""


@dataclass(frozen=True)
class IncompleteRange(RangeError):
    """Apenas um de `floor`/`ceiling` definido (ou nenhum campo definido)."""


@dataclass(frozen=True)
class InvertedBounds(RangeError):
    """`floor` maior que `ceiling`."""


# ---------------------------------------------------------------------------
# Contagem de subjects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SubjectCountError(JvmTuneException):
    """Contagem de subjects inconsistente."""


@dataclass(frozen=True)
class InvalidDefaultSubjectCount(SubjectCountError):
    """`number_of_default_subjects` excede o número de subjects ativos."""


@dataclass(frozen=True)
class NegativeSubjectCount(SubjectCountError):
    """Contagem de subjects (declarada ou externa) negativa."""


@dataclass(frozen=True)
class MissingSubjectCount(SubjectCountError):
    """`number_of_subjects` resolvido como 0 sem contagem externa fornecida."""


@dataclass(frozen=True)
class SubjectIndexOutOfRange(SubjectCountError):
    """Override de subject aponta para índice fora dos subjects enumerados."""

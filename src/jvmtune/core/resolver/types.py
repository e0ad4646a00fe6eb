# src/jvmtune/core/resolver/types.py
"""
Tipos de saída da resolução de configuração.

- ResolvedSubjectConfig → configuração totalmente concreta de um subject
- ResolutionOutcome     → resultado tipado (sucesso ou falha) de `try_resolve`

Invariantes:
    - Registros são imutáveis e não compartilham referências com a árvore de entrada
    - `to_dict()` produz estruturas serializáveis em JSON
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..errors import ErrorPayload
from ..search_space.space import ResolvedSearchSpace
from .context import ResolutionContext


@dataclass(frozen=True)
class ResolvedSubjectConfig:
    """
    Configuração resolvida de um subject.

    Subjects baseline (`is_baseline=True`) rodam com settings padrão, são
    pontuados para comparação e nunca recebem search space.
    """
    cluster: str
    subject_group_name: str
    subject_index: int
    user: str
    number_of_subjects: int
    subject_warmup_timeout: int
    is_baseline: bool
    search_space: Optional[ResolvedSearchSpace]
    restart_command: Tuple[str, ...] = ()
    exp_settings_files_dir: Optional[str] = None

    @property
    def exp_settings_file(self) -> Optional[str]:
        """Arquivo de settings do experimento: `<exp_settings_files_dir>/<subject_index>`."""
        if not self.exp_settings_files_dir:
            return None
        return posixpath.join(self.exp_settings_files_dir, str(self.subject_index))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster": self.cluster,
            "subject_group_name": self.subject_group_name,
            "subject_index": self.subject_index,
            "user": self.user,
            "number_of_subjects": self.number_of_subjects,
            "subject_warmup_timeout": self.subject_warmup_timeout,
            "is_baseline": self.is_baseline,
            "search_space": None if self.search_space is None else self.search_space.to_dict(),
            "restart_command": list(self.restart_command),
            "exp_settings_files_dir": self.exp_settings_files_dir,
        }


@dataclass(frozen=True)
class ResolutionOutcome:
    """Resultado tipado de uma resolução: subjects OU erro, nunca ambos."""
    ok: bool
    subjects: Tuple[ResolvedSubjectConfig, ...] = ()
    error: Optional[ErrorPayload] = None
    fingerprint: Optional[str] = None
    context: Optional[ResolutionContext] = None

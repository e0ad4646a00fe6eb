"""
Resolução de escopos do jvmtune.

Componentes:
    - ConfigResolver       → Program → Cluster → SubjectGroup → Subject
    - ResolutionContext    → log estruturado e warnings de uma resolução
    - ResolvedSubjectConfig / ResolutionOutcome → tipos de saída
"""

from .context import ResolutionContext
from .resolver import ConfigResolver, fingerprint_subjects
from .types import ResolutionOutcome, ResolvedSubjectConfig

__all__ = [
    "ConfigResolver",
    "ResolutionContext",
    "ResolutionOutcome",
    "ResolvedSubjectConfig",
    "fingerprint_subjects",
]

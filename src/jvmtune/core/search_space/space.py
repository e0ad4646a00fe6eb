"""Validação de `JvmSearchSpace` e o search space resolvido por subject.

Dois usos:
- restrição global (nível de programa): campos ausentes ficam livres
- registro completo (nível de subject): todos os campos são obrigatórios
  e o registro substitui a restrição global inteira, sem merge campo a campo

Sobre `gc_mode`: vários modos distintos podem ser listados; a exclusividade
"um modo por linha de comando" é aplicada na geração de candidatos, fora
deste pacote. Aqui cada modo listado é um candidato de mesmo peso.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..config.schema import BOOL_FIELDS, RANGE_FIELDS, GcMode, JvmSearchSpace
from ..exceptions import DuplicateGcMode, IncompleteSearchSpace
from .ranges import RangeResolver, ValidatedRange


class SearchSpaceOrigin(str, Enum):
    PROGRAM_RESTRICTION = "program_restriction"
    SUBJECT = "subject"


@dataclass(frozen=True)
class ResolvedSearchSpace:
    """Search space validado entregue ao gerador de hipóteses."""

    origin: SearchSpaceOrigin
    gc_modes: Tuple[GcMode, ...] = ()
    ranges: Dict[str, ValidatedRange] = field(default_factory=dict)
    flags: Dict[str, bool] = field(default_factory=dict)

    def gc_mode_candidates(self) -> List[Tuple[GcMode, float]]:
        """Modos listados com peso uniforme (soma 1). Vazio se nenhum modo."""
        if not self.gc_modes:
            return []
        weight = 1.0 / len(self.gc_modes)
        return [(mode, weight) for mode in self.gc_modes]

    def expand(self, name: str, resolver: Optional[RangeResolver] = None) -> Sequence[int]:
        if name not in self.ranges:
            raise KeyError(name)
        return (resolver or RangeResolver()).expand(self.ranges[name])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "origin": self.origin.value,
            "gc_mode": [m.value for m in self.gc_modes],
            "ranges": {name: self.ranges[name].to_dict() for name in sorted(self.ranges)},
            "flags": {name: self.flags[name] for name in sorted(self.flags)},
        }


def validate_search_space(
    space: JvmSearchSpace,
    *,
    complete: bool,
    scope: Optional[Mapping[str, Any]] = None,
    resolver: Optional[RangeResolver] = None,
) -> ResolvedSearchSpace:
    """Valida um `JvmSearchSpace` e produz o `ResolvedSearchSpace` correspondente.

    Args:
        space: search space bruto.
        complete: True para `jvm_parameters` de subject (todos os campos obrigatórios).
        scope: chaves de escopo para as mensagens de erro.
        resolver: RangeResolver a usar (padrão: novo).

    Raises:
        IncompleteSearchSpace: `complete=True` e algum campo ausente.
        DuplicateGcMode: o mesmo modo listado mais de uma vez.
        RangeError: algum `Int64Range` inválido.
    """
    resolver = resolver or RangeResolver()
    details: Dict[str, Any] = dict(scope or {})

    if complete:
        missing = [name for name in RANGE_FIELDS if getattr(space, name) is None]
        missing += [name for name in BOOL_FIELDS if getattr(space, name) is None]
        if not space.gc_mode:
            missing.insert(0, "gc_mode")
        if missing:
            raise IncompleteSearchSpace(
                message=f"jvm_parameters de subject deve definir todos os campos; ausentes: {len(missing)}",
                details={**details, "field": "jvm_parameters", "missing": missing},
                hint="Defina todos os argumentos em jvm_parameters ou remova o bloco.",
            )

    seen = set()
    for mode in space.gc_mode:
        if mode in seen:
            raise DuplicateGcMode(
                message=f"gc_mode repetido: {mode.value}",
                details={**details, "field": "gc_mode", "gc_mode": mode.value},
                hint="Liste cada modo de GC no máximo uma vez.",
            )
        seen.add(mode)

    ranges: Dict[str, ValidatedRange] = {}
    for name, rng in space.ranges().items():
        if rng is None:
            continue
        ranges[name] = resolver.validate(rng, field=name, scope=details)

    flags = {name: value for name, value in space.flags().items() if value is not None}

    return ResolvedSearchSpace(
        origin=SearchSpaceOrigin.SUBJECT if complete else SearchSpaceOrigin.PROGRAM_RESTRICTION,
        gc_modes=tuple(space.gc_mode),
        ranges=ranges,
        flags=flags,
    )

"""RangeResolver — validação e expansão de `Int64Range`.

Um range é um valor fixo (`value`) ou um intervalo inclusivo
`floor`/`ceiling` com `step_size` opcional.

Invariantes:
- exatamente um de {value} ou {floor e ceiling}
- floor <= ceiling
- step_size só tem efeito com floor/ceiling (ignorado com value)
- todos os membros cabem em int64
- validação não tem efeitos colaterais; expansão é determinística
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

from ..config.schema import INT64_BOUNDS, Int64Range
from ..exceptions import AmbiguousSpecification, IncompleteRange, InvalidFieldValue, InvertedBounds


class RangeMode(str, Enum):
    VALUE = "value"
    RANGE = "range"


@dataclass(frozen=True)
class ValidatedRange:
    """Range já validado. Só é construído por `RangeResolver.validate`."""

    mode: RangeMode
    value: Optional[int] = None
    floor: Optional[int] = None
    ceiling: Optional[int] = None
    step_size: Optional[int] = None

    @property
    def is_fixed(self) -> bool:
        return self.mode is RangeMode.VALUE

    @property
    def is_steppable(self) -> bool:
        return self.mode is RangeMode.RANGE and self.step_size is not None and self.step_size > 0

    def to_dict(self) -> Dict[str, Any]:
        if self.is_fixed:
            return {"mode": self.mode.value, "value": self.value}
        out: Dict[str, Any] = {"mode": self.mode.value, "floor": self.floor, "ceiling": self.ceiling}
        if self.step_size is not None:
            out["step_size"] = self.step_size
        return out


class RangeResolver:
    """Validador/expansor sem estado de `Int64Range`."""

    def validate(
        self,
        rng: Int64Range,
        *,
        field: Optional[str] = None,
        scope: Optional[Mapping[str, Any]] = None,
    ) -> ValidatedRange:
        """Valida um `Int64Range`.

        Ordem das verificações: largura int64, ambiguidade, incompletude,
        limites invertidos.

        Args:
            rng: range bruto vindo do schema.
            field: nome do campo do search space (para o caminho de escopo).
            scope: chaves de escopo (cluster, subject_group, subject_index).

        Raises:
            AmbiguousSpecification: value junto com floor e/ou ceiling.
            IncompleteRange: só um de floor/ceiling, ou nenhum campo.
            InvertedBounds: floor > ceiling.
            InvalidFieldValue: membro fora de int64.
        """
        details: Dict[str, Any] = dict(scope or {})
        if field is not None:
            details["field"] = field

        lo, hi = INT64_BOUNDS
        for member in ("value", "floor", "ceiling", "step_size"):
            number = getattr(rng, member)
            if number is not None and not lo <= number <= hi:
                raise InvalidFieldValue(
                    message=f"{member} fora de int64: {number}",
                    details={**details, "range": rng.to_dict(), "member": member},
                    hint="Membros de Int64Range devem caber em 64 bits com sinal.",
                )

        has_floor = rng.floor is not None
        has_ceiling = rng.ceiling is not None

        if rng.value is not None:
            if has_floor or has_ceiling:
                raise AmbiguousSpecification(
                    message="value é mutuamente exclusivo com floor/ceiling",
                    details={**details, "range": rng.to_dict()},
                    hint="Defina apenas value, ou apenas floor e ceiling.",
                )
            return ValidatedRange(mode=RangeMode.VALUE, value=rng.value)

        if not (has_floor and has_ceiling):
            missing = [name for name, present in (("floor", has_floor), ("ceiling", has_ceiling)) if not present]
            raise IncompleteRange(
                message=f"range incompleto, ausente: {', '.join(missing)}",
                details={**details, "range": rng.to_dict(), "missing": missing},
                hint="floor e ceiling devem ser definidos juntos (ou use value).",
            )

        if rng.floor > rng.ceiling:
            raise InvertedBounds(
                message=f"floor ({rng.floor}) maior que ceiling ({rng.ceiling})",
                details={**details, "range": rng.to_dict()},
                hint="Garanta floor <= ceiling.",
            )

        return ValidatedRange(
            mode=RangeMode.RANGE,
            floor=rng.floor,
            ceiling=rng.ceiling,
            step_size=rng.step_size,
        )

    def expand(self, validated: ValidatedRange) -> Sequence[int]:
        """Expande um range validado em candidatos ordenados.

        - value: `[value]`
        - floor/ceiling com step > 0: `floor, floor+step, ...` até o último termo <= ceiling
        - floor/ceiling sem step (ou step <= 0): `(floor, ceiling)`, range de
          amostragem e não enumeração (sempre dois elementos, mesmo com floor == ceiling)

        O retorno é um `range` (lazy, finito, reiterável) ou uma tupla.
        """
        if validated.is_fixed:
            return range(validated.value, validated.value + 1)
        if validated.is_steppable:
            return range(validated.floor, validated.ceiling + 1, validated.step_size)
        return (validated.floor, validated.ceiling)

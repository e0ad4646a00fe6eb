# src/jvmtune/core/config/merge.py
"""
Políticas de merge de configuração do jvmtune.

Este módulo concentra as duas políticas de sobrescrita usadas pelo
projeto:

1. `deep_merge` — combina um arquivo base com um arquivo local de override
   antes do parse do schema:
    - dict → merge recursivo por chave
    - list → sobrescrita total (ex.: `cluster`, `restart_command`)
    - escalar → sobrescrita direta
    - conflito de tipos → `ConfigTypeConflictError`

2. `innermost_wins` — resolve um campo escalar definido em vários escopos
   (Program → Cluster → SubjectGroup). O escopo mais interno que define o
   campo vence; se nenhum define, vale o default documentado.

Invariantes:
    - Nenhum input é mutado
    - A mesma entrada sempre produz a mesma saída
"""

from copy import deepcopy
from typing import Any, Callable, Dict, Optional, TypeVar

from .errors import ConfigTypeConflictError


T = TypeVar("T")

_UNSET = object()


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois mapas de configuração.

    Args:
        base (Dict[str, Any]): Configuração base (arquivo principal).
        override (Dict[str, Any]): Overrides explícitos (arquivo local).

    Returns:
        Dict[str, Any]: Novo dicionário resultante do merge.

    Raises:
        ConfigTypeConflictError: Se a mesma chave tiver tipos incompatíveis.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result or result[key] is None or override_value is None:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        if isinstance(base_value, list) and isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        if type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result


def innermost_wins(
    *layers: Optional[T],
    default: Any = _UNSET,
    is_set: Callable[[Any], bool] = lambda v: v is not None,
) -> Optional[T]:
    """
    Resolve um valor escalar percorrendo escopos do mais interno ao mais externo.

    Os escopos são passados do mais interno para o mais externo, ex.:
    `innermost_wins(group.user, cluster.user, program.user)`.

    Args:
        *layers: Valores do campo em cada escopo (None = herdar).
        default: Valor documentado quando nenhum escopo define o campo.
            Se omitido, o retorno é None (campo sem default).
        is_set: Predicado que decide se um valor conta como "definido".

    Returns:
        O valor do escopo mais interno que define o campo, o default, ou None.
    """
    for value in layers:
        if is_set(value):
            return value
    return None if default is _UNSET else default

"""
Schema canônico dos escopos de configuração — Program → Cluster → SubjectGroup → Subject.

Cada escopo é um registro imutável e independente. Campos não definidos
(`None` / tupla vazia) significam "herdar do escopo externo"; a precedência
é aplicada apenas pelo `ConfigResolver`, nunca aqui.

Os nomes de campos são contrato de compatibilidade com os produtores e
consumidores externos da configuração e são preservados exatamente.

Esta implementação evita dependências externas de validação para manter
o core leve; o parse é estrito e falha com `ConfigSchemaError`.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ConfigSchemaError


RANGE_FIELDS: Tuple[str, ...] = (
    "adaptive_size_decrement_scale_factor",
    "cms_exp_avg_factor",
    "cms_incremental_duty_cycle",
    "cms_incremental_duty_cycle_min",
    "cms_incremental_offset",
    "cms_incremental_safety_factor",
    "cms_initiating_occupancy_fraction",
    "gc_time_ratio",
    "max_gc_pause_millis",
    "max_heap_free_ratio",
    "max_new_size",
    "max_perm_size",
    "min_heap_free_ratio",
    "new_ratio",
    "new_size",
    "parallel_gc_threads",
    "survivor_ratio",
    "tenured_generation_size_increment",
    "heap_size",
    "young_generation_size_increment",
    "soft_ref_lru_policy_ms_per_mb",
)

BOOL_FIELDS: Tuple[str, ...] = (
    "cms_incremental_mode",
    "cms_incremental_pacing",
    "use_cms_initiating_occupancy_only",
)

DEFAULT_SUBJECT_WARMUP_TIMEOUT = 300

# Larguras do schema: membros de Int64Range são int64; contagens, timeout e
# subject_index são int32.
INT64_BOUNDS: Tuple[int, int] = (-(2 ** 63), 2 ** 63 - 1)
INT32_BOUNDS: Tuple[int, int] = (-(2 ** 31), 2 ** 31 - 1)


class GcMode(str, Enum):
    """
    Modos de GC mutuamente exclusivos em uma mesma linha de comando.

    Vários modos podem ser listados em um search space (candidatos para o
    gerador), mas apenas um fica ativo por trial.
    """
    USE_CONC_MARK_SWEEP = "USE_CONC_MARK_SWEEP"
    USE_PARALLEL = "USE_PARALLEL"
    USE_PARALLEL_OLD = "USE_PARALLEL_OLD"
    USE_SERIAL = "USE_SERIAL"

    @property
    def number(self) -> int:
        return _GC_MODE_NUMBERS[self]

    @classmethod
    def parse(cls, raw: Any) -> "GcMode":
        """Aceita o nome do modo ou sua tag numérica."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, int) and not isinstance(raw, bool):
            for mode, number in _GC_MODE_NUMBERS.items():
                if number == raw:
                    return mode
            raise ValueError(f"unknown gc_mode tag: {raw}")
        if isinstance(raw, str):
            try:
                return cls(raw.strip().upper())
            except ValueError:
                raise ValueError(f"unknown gc_mode: {raw!r}") from None
        raise ValueError(f"gc_mode must be a name or a tag number, got {type(raw).__name__}")


_GC_MODE_NUMBERS = {
    GcMode.USE_CONC_MARK_SWEEP: 0,
    GcMode.USE_PARALLEL: 1,
    GcMode.USE_PARALLEL_OLD: 2,
    GcMode.USE_SERIAL: 3,
}


def _compact(items: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in items.items():
        if value is None:
            continue
        if isinstance(value, tuple):
            if not value:
                continue
            value = [v.to_dict() if hasattr(v, "to_dict") else v for v in value]
        elif hasattr(value, "to_dict"):
            value = value.to_dict()
        out[key] = value
    return out


# ---------------------------------------------------------------------------
# Registros
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Int64Range:
    """Valor fixo (`value`) OU range `floor`/`ceiling` com `step_size` opcional."""

    value: Optional[int] = None
    floor: Optional[int] = None
    ceiling: Optional[int] = None
    step_size: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "value": self.value,
                "floor": self.floor,
                "ceiling": self.ceiling,
                "step_size": self.step_size,
            }
        )


@dataclass(frozen=True)
class JvmSearchSpace:
    """
    Conjunto de knobs de GC pesquisáveis.

    No nível de programa atua como restrição global (campos ausentes ficam
    livres). No nível de subject é um registro completo: todos os campos
    devem estar definidos (ver `validate_search_space(complete=True)`).
    """

    gc_mode: Tuple[GcMode, ...] = ()
    adaptive_size_decrement_scale_factor: Optional[Int64Range] = None
    cms_exp_avg_factor: Optional[Int64Range] = None
    cms_incremental_duty_cycle: Optional[Int64Range] = None
    cms_incremental_duty_cycle_min: Optional[Int64Range] = None
    cms_incremental_offset: Optional[Int64Range] = None
    cms_incremental_safety_factor: Optional[Int64Range] = None
    cms_initiating_occupancy_fraction: Optional[Int64Range] = None
    gc_time_ratio: Optional[Int64Range] = None
    max_gc_pause_millis: Optional[Int64Range] = None
    max_heap_free_ratio: Optional[Int64Range] = None
    max_new_size: Optional[Int64Range] = None
    max_perm_size: Optional[Int64Range] = None
    min_heap_free_ratio: Optional[Int64Range] = None
    new_ratio: Optional[Int64Range] = None
    new_size: Optional[Int64Range] = None
    parallel_gc_threads: Optional[Int64Range] = None
    survivor_ratio: Optional[Int64Range] = None
    tenured_generation_size_increment: Optional[Int64Range] = None
    heap_size: Optional[Int64Range] = None
    young_generation_size_increment: Optional[Int64Range] = None
    cms_incremental_mode: Optional[bool] = None
    cms_incremental_pacing: Optional[bool] = None
    use_cms_initiating_occupancy_only: Optional[bool] = None
    soft_ref_lru_policy_ms_per_mb: Optional[Int64Range] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "gc_mode", tuple(self.gc_mode))

    def ranges(self) -> Dict[str, Optional[Int64Range]]:
        return {name: getattr(self, name) for name in RANGE_FIELDS}

    def flags(self) -> Dict[str, Optional[bool]]:
        return {name: getattr(self, name) for name in BOOL_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        items: Dict[str, Any] = {"gc_mode": tuple(m.value for m in self.gc_mode)}
        items.update(self.ranges())
        items.update(self.flags())
        return _compact(items)


@dataclass(frozen=True)
class DeprecatedMessageA:
    """Bloco obsoleto preservado apenas para compatibilidade (nunca interpretado)."""

    deprecated_a: Optional[str] = None
    deprecated_b: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "deprecated_b", tuple(self.deprecated_b))

    def to_dict(self) -> Dict[str, Any]:
        return _compact({"deprecated_a": self.deprecated_a, "deprecated_b": self.deprecated_b})


@dataclass(frozen=True)
class ExtendedSubjectConfig:
    subject_index: Optional[int] = None
    jvm_parameters: Optional[JvmSearchSpace] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({"subject_index": self.subject_index, "jvm_parameters": self.jvm_parameters})


@dataclass(frozen=True)
class SubjectGroupConfig:
    subject_config: Tuple[ExtendedSubjectConfig, ...] = ()
    subject_group_name: Optional[str] = None
    user: Optional[str] = None
    exp_settings_files_dir: Optional[str] = None
    number_of_subjects: Optional[int] = None
    subject_warmup_timeout: Optional[int] = None
    restart_command: Tuple[str, ...] = ()
    number_of_default_subjects: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "subject_config", tuple(self.subject_config))
        object.__setattr__(self, "restart_command", tuple(self.restart_command))

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "subject_config": self.subject_config,
                "subject_group_name": self.subject_group_name,
                "user": self.user,
                "exp_settings_files_dir": self.exp_settings_files_dir,
                "number_of_subjects": self.number_of_subjects,
                "subject_warmup_timeout": self.subject_warmup_timeout,
                "restart_command": self.restart_command,
                "number_of_default_subjects": self.number_of_default_subjects,
            }
        )


@dataclass(frozen=True)
class ClusterConfig:
    subject_group: Tuple[SubjectGroupConfig, ...] = ()
    cluster: Optional[str] = None
    user: Optional[str] = None
    number_of_subjects: Optional[int] = None
    subject_warmup_timeout: Optional[int] = None
    number_of_default_subjects: Optional[int] = None
    restart_command: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "subject_group", tuple(self.subject_group))
        object.__setattr__(self, "restart_command", tuple(self.restart_command))

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "subject_group": self.subject_group,
                "cluster": self.cluster,
                "user": self.user,
                "number_of_subjects": self.number_of_subjects,
                "subject_warmup_timeout": self.subject_warmup_timeout,
                "number_of_default_subjects": self.number_of_default_subjects,
                "restart_command": self.restart_command,
            }
        )


@dataclass(frozen=True)
class ProgramConfiguration:
    """Raiz da configuração: defaults globais + lista de clusters."""

    cluster: Tuple[ClusterConfig, ...] = ()
    user: Optional[str] = None
    jvm_search_restriction: Optional[JvmSearchSpace] = None
    deprecated_message_a: Optional[DeprecatedMessageA] = None
    param_block: Optional[Dict[str, Any]] = None
    number_of_subjects: Optional[int] = None
    subject_warmup_timeout: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "cluster", tuple(self.cluster))

    @classmethod
    def from_dict(cls, data: Any) -> "ProgramConfiguration":
        return parse_program_configuration(data)

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "cluster": self.cluster,
                "user": self.user,
                "jvm_search_restriction": self.jvm_search_restriction,
                "deprecated_message_a": self.deprecated_message_a,
                "param_block": deepcopy(self.param_block),
                "number_of_subjects": self.number_of_subjects,
                "subject_warmup_timeout": self.subject_warmup_timeout,
            }
        )


# ---------------------------------------------------------------------------
# Parse estrito (mapa → registros)
# ---------------------------------------------------------------------------

def _expect(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigSchemaError(msg)


def _at(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _mapping(data: Any, path: str, allowed: Tuple[str, ...]) -> Mapping[str, Any]:
    _expect(isinstance(data, Mapping), f"{path or '<root>'} must be a mapping")
    unknown = sorted(str(k) for k in data if k not in allowed)
    _expect(not unknown, f"{path or '<root>'}: unknown keys {unknown}")
    return data


def _opt_int(
    data: Mapping[str, Any], key: str, path: str, bounds: Tuple[int, int] = INT32_BOUNDS
) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    _expect(isinstance(value, int) and not isinstance(value, bool), f"{_at(path, key)} must be an integer")
    lo, hi = bounds
    _expect(lo <= value <= hi, f"{_at(path, key)} out of range [{lo}, {hi}]: {value}")
    return value


def _opt_str(data: Mapping[str, Any], key: str, path: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    _expect(isinstance(value, str), f"{_at(path, key)} must be a string")
    return value


def _opt_bool(data: Mapping[str, Any], key: str, path: str) -> Optional[bool]:
    value = data.get(key)
    if value is None:
        return None
    _expect(isinstance(value, bool), f"{_at(path, key)} must be a boolean")
    return value


def _list(data: Mapping[str, Any], key: str, path: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    _expect(isinstance(value, list), f"{_at(path, key)} must be a list")
    return value


def _str_tuple(data: Mapping[str, Any], key: str, path: str) -> Tuple[str, ...]:
    items = _list(data, key, path)
    for i, item in enumerate(items):
        _expect(isinstance(item, str), f"{_at(path, key)}[{i}] must be a string")
    return tuple(items)


def _parse_range(data: Any, path: str) -> Int64Range:
    data = _mapping(data, path, ("value", "floor", "ceiling", "step_size"))
    return Int64Range(
        value=_opt_int(data, "value", path, INT64_BOUNDS),
        floor=_opt_int(data, "floor", path, INT64_BOUNDS),
        ceiling=_opt_int(data, "ceiling", path, INT64_BOUNDS),
        step_size=_opt_int(data, "step_size", path, INT64_BOUNDS),
    )


_SEARCH_SPACE_KEYS = ("gc_mode",) + RANGE_FIELDS + BOOL_FIELDS


def parse_search_space(data: Any, path: str = "jvm_search_restriction") -> JvmSearchSpace:
    """Materializa um `JvmSearchSpace` a partir de um mapa."""
    data = _mapping(data, path, _SEARCH_SPACE_KEYS)

    modes: List[GcMode] = []
    for i, raw in enumerate(_list(data, "gc_mode", path)):
        try:
            modes.append(GcMode.parse(raw))
        except ValueError as e:
            raise ConfigSchemaError(f"{_at(path, 'gc_mode')}[{i}]: {e}") from e

    kwargs: Dict[str, Any] = {"gc_mode": tuple(modes)}
    for name in RANGE_FIELDS:
        if data.get(name) is not None:
            kwargs[name] = _parse_range(data[name], _at(path, name))
    for name in BOOL_FIELDS:
        kwargs[name] = _opt_bool(data, name, path)
    return JvmSearchSpace(**kwargs)


def _parse_subject(data: Any, path: str) -> ExtendedSubjectConfig:
    data = _mapping(data, path, ("subject_index", "jvm_parameters"))
    params = data.get("jvm_parameters")
    return ExtendedSubjectConfig(
        subject_index=_opt_int(data, "subject_index", path),
        jvm_parameters=None if params is None else parse_search_space(params, _at(path, "jvm_parameters")),
    )


_GROUP_KEYS = (
    "subject_config",
    "subject_group_name",
    "user",
    "exp_settings_files_dir",
    "number_of_subjects",
    "subject_warmup_timeout",
    "restart_command",
    "number_of_default_subjects",
)


def _parse_group(data: Any, path: str) -> SubjectGroupConfig:
    data = _mapping(data, path, _GROUP_KEYS)
    subjects = tuple(
        _parse_subject(s, f"{_at(path, 'subject_config')}[{i}]")
        for i, s in enumerate(_list(data, "subject_config", path))
    )
    return SubjectGroupConfig(
        subject_config=subjects,
        subject_group_name=_opt_str(data, "subject_group_name", path),
        user=_opt_str(data, "user", path),
        exp_settings_files_dir=_opt_str(data, "exp_settings_files_dir", path),
        number_of_subjects=_opt_int(data, "number_of_subjects", path),
        subject_warmup_timeout=_opt_int(data, "subject_warmup_timeout", path),
        restart_command=_str_tuple(data, "restart_command", path),
        number_of_default_subjects=_opt_int(data, "number_of_default_subjects", path),
    )


_CLUSTER_KEYS = (
    "subject_group",
    "cluster",
    "user",
    "number_of_subjects",
    "subject_warmup_timeout",
    "number_of_default_subjects",
    "restart_command",
)


def _parse_cluster(data: Any, path: str) -> ClusterConfig:
    data = _mapping(data, path, _CLUSTER_KEYS)
    groups = tuple(
        _parse_group(g, f"{_at(path, 'subject_group')}[{i}]")
        for i, g in enumerate(_list(data, "subject_group", path))
    )
    return ClusterConfig(
        subject_group=groups,
        cluster=_opt_str(data, "cluster", path),
        user=_opt_str(data, "user", path),
        number_of_subjects=_opt_int(data, "number_of_subjects", path),
        subject_warmup_timeout=_opt_int(data, "subject_warmup_timeout", path),
        number_of_default_subjects=_opt_int(data, "number_of_default_subjects", path),
        restart_command=_str_tuple(data, "restart_command", path),
    )


_PROGRAM_KEYS = (
    "cluster",
    "user",
    "jvm_search_restriction",
    "deprecated_message_a",
    "param_block",
    "number_of_subjects",
    "subject_warmup_timeout",
)


def parse_program_configuration(data: Any) -> ProgramConfiguration:
    """
    Valida estruturalmente e materializa uma `ProgramConfiguration`.

    Não aplica defaults nem precedência de escopos: apenas tipa a árvore.
    Listas vazias são aceitas aqui; a exigência de não-vazio é verificada
    na resolução (`EmptyConfiguration`).

    Raises:
        ConfigSchemaError: chave desconhecida, tipo incorreto ou GC mode inválido.
    """
    data = _mapping(data, "", _PROGRAM_KEYS)

    clusters = tuple(_parse_cluster(c, f"cluster[{i}]") for i, c in enumerate(_list(data, "cluster", "")))

    restriction = data.get("jvm_search_restriction")

    deprecated = data.get("deprecated_message_a")
    deprecated_msg: Optional[DeprecatedMessageA] = None
    if deprecated is not None:
        deprecated = _mapping(deprecated, "deprecated_message_a", ("deprecated_a", "deprecated_b"))
        deprecated_msg = DeprecatedMessageA(
            deprecated_a=_opt_str(deprecated, "deprecated_a", "deprecated_message_a"),
            deprecated_b=_str_tuple(deprecated, "deprecated_b", "deprecated_message_a"),
        )

    param_block = data.get("param_block")
    _expect(param_block is None or isinstance(param_block, Mapping), "param_block must be a mapping")

    return ProgramConfiguration(
        cluster=clusters,
        user=_opt_str(data, "user", ""),
        jvm_search_restriction=None if restriction is None else parse_search_space(restriction),
        deprecated_message_a=deprecated_msg,
        param_block=None if param_block is None else deepcopy(dict(param_block)),
        number_of_subjects=_opt_int(data, "number_of_subjects", ""),
        subject_warmup_timeout=_opt_int(data, "subject_warmup_timeout", ""),
    )

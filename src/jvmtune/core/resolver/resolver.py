# src/jvmtune/core/resolver/resolver.py
"""
ConfigResolver — resolução da árvore de escopos em configurações por subject.

A árvore Program → Cluster → SubjectGroup → Subject é percorrida uma única
vez; cada campo escalar é resolvido pela regra "escopo mais interno vence"
e cada subject ativo produz um `ResolvedSubjectConfig` independente.

Ordem da resolução:
    1. Não-vazio: `program.cluster` e cada `subject_group` (EmptyConfiguration)
    2. Precedência de escalares por grupo:
         user                        group → cluster → program (obrigatório)
         number_of_subjects          group → cluster → program → 0
         subject_warmup_timeout      group → cluster → program → 300
         number_of_default_subjects  group → cluster → 0
         restart_command             group → cluster → vazio
    3. Enumeração dos subjects ativos (declarada ou contagem externa)
    4. Partição baseline: os primeiros `number_of_default_subjects` por índice
    5. Search space: `jvm_parameters` completo do subject substitui a
       restrição global; baseline não recebe search space
    6. Emissão de um registro por subject ativo

Invariantes:
    - Tudo ou nada: o primeiro erro aborta a resolução inteira
    - Nenhuma entrada é mutada; a saída não referencia a árvore de entrada
    - A mesma entrada produz sempre a mesma sequência (ordem e valores)

Limites explícitos:
    - Não gera argumentos de JVM mutados
    - Não enumera subjects em execução (a contagem externa é fornecida pelo chamador)
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..config.errors import ConfigError
from ..config.hashing import compute_config_hash
from ..config.merge import innermost_wins
from ..config.schema import (
    DEFAULT_SUBJECT_WARMUP_TIMEOUT,
    INT32_BOUNDS,
    ClusterConfig,
    ExtendedSubjectConfig,
    ProgramConfiguration,
    SubjectGroupConfig,
)
from ..errors import exception_to_error
from ..exceptions import (
    DuplicateSubjectIndex,
    EmptyConfiguration,
    InvalidDefaultSubjectCount,
    InvalidFieldValue,
    JvmTuneException,
    MissingRequiredField,
    MissingSubjectCount,
    NegativeSubjectCount,
    SubjectIndexOutOfRange,
)
from ..search_space.ranges import RangeResolver
from ..search_space.space import ResolvedSearchSpace, validate_search_space
from .context import ResolutionContext
from .types import ResolutionOutcome, ResolvedSubjectConfig


SubjectCounts = Mapping[Tuple[str, str], int]


def _non_blank(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _scope_label(scope: Mapping[str, Any]) -> str:
    parts = [str(scope[k]) for k in ("cluster", "subject_group") if scope.get(k) is not None]
    if scope.get("subject_index") is not None:
        parts.append(f"subject[{scope['subject_index']}]")
    return "/".join(parts) or "program"


def fingerprint_subjects(subjects: Tuple[ResolvedSubjectConfig, ...]) -> str:
    """Hash canônico da sequência resolvida (ordem incluída)."""
    return compute_config_hash([s.to_dict() for s in subjects])


class ConfigResolver:
    """
    Resolve uma `ProgramConfiguration` em configurações concretas por subject.

    O resolver não guarda estado mutável entre chamadas: pode ser usado em
    paralelo sobre configurações independentes, desde que cada chamada use
    o seu próprio `ResolutionContext`.
    """

    def __init__(self, *, range_resolver: Optional[RangeResolver] = None) -> None:
        self.range_resolver = range_resolver or RangeResolver()

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------
    def resolve(
        self,
        program: ProgramConfiguration,
        *,
        subject_counts: Optional[SubjectCounts] = None,
        ctx: Optional[ResolutionContext] = None,
    ) -> Tuple[ResolvedSubjectConfig, ...]:
        """
        Resolve todos os subjects ativos da configuração.

        Args:
            program: árvore de configuração tipada.
            subject_counts: contagem externa de subjects por
                `(cluster, subject_group_name)`, consultada apenas quando
                `number_of_subjects` resolve para 0.
            ctx: contexto de log estruturado (criado se omitido).

        Returns:
            Tuple[ResolvedSubjectConfig, ...]: subjects em ordem de cluster,
            grupo e índice.

        Raises:
            ConfigError: qualquer falha estrutural, de campo, de range ou de
                contagem. Nenhum resultado parcial é produzido.
        """
        ctx = ctx if ctx is not None else ResolutionContext()
        ctx.log(
            scope="program",
            level="info",
            message="resolution started",
            config_hash=compute_config_hash(program.to_dict()),
            clusters=len(program.cluster),
        )

        try:
            subjects = tuple(self._resolve_program(program, dict(subject_counts or {}), ctx))
        except ConfigError as exc:
            details = exc.details if isinstance(exc, JvmTuneException) else {}
            ctx.log(
                scope=_scope_label(details),
                level="error",
                message="resolution failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise

        ctx.log(
            scope="program",
            level="info",
            message="resolution finished",
            subjects=len(subjects),
            baseline=sum(1 for s in subjects if s.is_baseline),
            fingerprint=fingerprint_subjects(subjects),
        )
        return subjects

    def try_resolve(
        self,
        program: ProgramConfiguration,
        *,
        subject_counts: Optional[SubjectCounts] = None,
        ctx: Optional[ResolutionContext] = None,
    ) -> ResolutionOutcome:
        """Como `resolve`, mas devolve a falha como `ErrorPayload` em vez de levantar."""
        ctx = ctx if ctx is not None else ResolutionContext()
        try:
            subjects = self.resolve(program, subject_counts=subject_counts, ctx=ctx)
        except ConfigError as exc:
            return ResolutionOutcome(ok=False, error=exception_to_error(exc), context=ctx)
        return ResolutionOutcome(
            ok=True,
            subjects=subjects,
            fingerprint=fingerprint_subjects(subjects),
            context=ctx,
        )

    # ------------------------------------------------------------------
    # Programa / clusters
    # ------------------------------------------------------------------
    def _resolve_program(
        self,
        program: ProgramConfiguration,
        subject_counts: Dict[Tuple[str, str], int],
        ctx: ResolutionContext,
    ) -> Iterator[ResolvedSubjectConfig]:
        self._check_not_empty(program)

        restriction: Optional[ResolvedSearchSpace] = None
        if program.jvm_search_restriction is not None:
            restriction = validate_search_space(
                program.jvm_search_restriction,
                complete=False,
                resolver=self.range_resolver,
            )

        for ci, cluster in enumerate(program.cluster):
            for gi, group in enumerate(cluster.subject_group):
                scope = {
                    "cluster": cluster.cluster if _non_blank(cluster.cluster) else f"cluster[{ci}]",
                    "subject_group": (
                        group.subject_group_name
                        if _non_blank(group.subject_group_name)
                        else f"subject_group[{gi}]"
                    ),
                }
                yield from self._resolve_group(program, cluster, group, restriction, subject_counts, scope, ctx)

    def _check_not_empty(self, program: ProgramConfiguration) -> None:
        if not program.cluster:
            raise EmptyConfiguration(
                message="program.cluster não pode ser vazio",
                details={"field": "cluster"},
                hint="Declare ao menos um ClusterConfig.",
            )
        for ci, cluster in enumerate(program.cluster):
            if not cluster.subject_group:
                raise EmptyConfiguration(
                    message="cluster.subject_group não pode ser vazio",
                    details={
                        "cluster": cluster.cluster if _non_blank(cluster.cluster) else f"cluster[{ci}]",
                        "field": "subject_group",
                    },
                    hint="Declare ao menos um SubjectGroupConfig por cluster.",
                )

    # ------------------------------------------------------------------
    # Grupo
    # ------------------------------------------------------------------
    def _resolve_group(
        self,
        program: ProgramConfiguration,
        cluster: ClusterConfig,
        group: SubjectGroupConfig,
        restriction: Optional[ResolvedSearchSpace],
        subject_counts: Dict[Tuple[str, str], int],
        scope: Dict[str, Any],
        ctx: ResolutionContext,
    ) -> Iterator[ResolvedSubjectConfig]:
        user = innermost_wins(group.user, cluster.user, program.user, is_set=_non_blank)
        if user is None:
            raise MissingRequiredField(
                message="user deve ser definido em algum escopo",
                details={**scope, "field": "user"},
                hint="Defina user no programa, no cluster ou no subject group.",
            )

        if not _non_blank(cluster.cluster):
            raise MissingRequiredField(
                message="nome do cluster é obrigatório",
                details={**scope, "field": "cluster"},
            )
        if not _non_blank(group.subject_group_name):
            raise MissingRequiredField(
                message="subject_group_name é obrigatório",
                details={**scope, "field": "subject_group_name"},
            )

        declared = innermost_wins(
            group.number_of_subjects, cluster.number_of_subjects, program.number_of_subjects, default=0
        )
        warmup = innermost_wins(
            group.subject_warmup_timeout,
            cluster.subject_warmup_timeout,
            program.subject_warmup_timeout,
            default=DEFAULT_SUBJECT_WARMUP_TIMEOUT,
        )
        default_count = innermost_wins(
            group.number_of_default_subjects, cluster.number_of_default_subjects, default=0
        )
        restart_command = tuple(group.restart_command or cluster.restart_command)

        for name, value in (("number_of_subjects", declared), ("number_of_default_subjects", default_count)):
            if value < 0:
                raise NegativeSubjectCount(
                    message=f"{name} não pode ser negativo ({value})",
                    details={**scope, "field": name, "value": value},
                )
        if warmup < 0:
            raise InvalidFieldValue(
                message=f"subject_warmup_timeout não pode ser negativo ({warmup})",
                details={**scope, "field": "subject_warmup_timeout", "value": warmup},
            )
        for name, value in (
            ("number_of_subjects", declared),
            ("number_of_default_subjects", default_count),
            ("subject_warmup_timeout", warmup),
        ):
            if value > INT32_BOUNDS[1]:
                raise InvalidFieldValue(
                    message=f"{name} fora de int32 ({value})",
                    details={**scope, "field": name, "value": value},
                )

        active = self._enumerate_subjects(group, declared, subject_counts, scope, ctx)

        if default_count > len(active):
            raise InvalidDefaultSubjectCount(
                message=(
                    f"number_of_default_subjects ({default_count}) excede "
                    f"os subjects ativos ({len(active)})"
                ),
                details={
                    **scope,
                    "field": "number_of_default_subjects",
                    "value": default_count,
                    "active_subjects": len(active),
                },
                hint="Reduza number_of_default_subjects ou aumente os subjects do grupo.",
            )

        effective_count = declared if declared > 0 else len(active)

        resolved: List[ResolvedSubjectConfig] = []
        for position, (index, entry) in enumerate(active):
            is_baseline = position < default_count
            subject_scope = {**scope, "subject_index": index}
            resolved.append(
                ResolvedSubjectConfig(
                    cluster=cluster.cluster,
                    subject_group_name=group.subject_group_name,
                    subject_index=index,
                    user=user,
                    number_of_subjects=effective_count,
                    subject_warmup_timeout=warmup,
                    is_baseline=is_baseline,
                    search_space=self._resolve_search_space(entry, restriction, is_baseline, subject_scope, ctx),
                    restart_command=restart_command,
                    exp_settings_files_dir=group.exp_settings_files_dir,
                )
            )

        ctx.log(
            scope=_scope_label(scope),
            level="info",
            message="subject group resolved",
            active_subjects=len(resolved),
            baseline_subjects=default_count,
            user=user,
        )
        yield from resolved

    # ------------------------------------------------------------------
    # Subjects
    # ------------------------------------------------------------------
    def _enumerate_subjects(
        self,
        group: SubjectGroupConfig,
        declared: int,
        subject_counts: Dict[Tuple[str, str], int],
        scope: Dict[str, Any],
        ctx: ResolutionContext,
    ) -> List[Tuple[int, Optional[ExtendedSubjectConfig]]]:
        """Retorna os subjects ativos como pares (índice, override), ordenados por índice."""
        entries: List[Tuple[int, ExtendedSubjectConfig]] = []
        by_index: Dict[int, ExtendedSubjectConfig] = {}
        for position, entry in enumerate(group.subject_config):
            index = entry.subject_index if entry.subject_index is not None else position
            if index < 0:
                raise SubjectIndexOutOfRange(
                    message=f"subject_index negativo ({index})",
                    details={**scope, "subject_index": index, "field": "subject_index"},
                )
            if index in by_index:
                raise DuplicateSubjectIndex(
                    message=f"subject_index {index} declarado mais de uma vez",
                    details={**scope, "subject_index": index, "field": "subject_index"},
                )
            by_index[index] = entry
            entries.append((index, entry))

        if declared > 0:
            if not entries:
                return [(i, None) for i in range(declared)]
            kept, dropped = entries[:declared], entries[declared:]
            for index, _ in kept:
                if index >= declared:
                    raise SubjectIndexOutOfRange(
                        message=f"subject_index {index} fora dos {declared} subjects declarados",
                        details={**scope, "subject_index": index, "field": "subject_index", "subjects": declared},
                        hint="Use índices entre 0 e number_of_subjects - 1.",
                    )
            # entradas descartadas também são validadas
            for index, entry in dropped:
                self._validate_own_space(entry, {**scope, "subject_index": index})
            if declared != len(entries):
                ctx.add_warning(
                    scope=_scope_label(scope),
                    message=(
                        f"number_of_subjects={declared} com {len(entries)} subject_config; "
                        f"usando os primeiros {min(declared, len(entries))}"
                    ),
                )
            return sorted(kept, key=lambda pair: pair[0])

        key = (scope["cluster"], scope["subject_group"])
        if key not in subject_counts:
            raise MissingSubjectCount(
                message="number_of_subjects resolvido como 0 (todos) sem contagem externa de subjects",
                details={**scope, "field": "number_of_subjects"},
                hint="Informe subject_counts[(cluster, subject_group_name)] ou defina number_of_subjects.",
            )
        count = subject_counts[key]
        if count < 0:
            raise NegativeSubjectCount(
                message=f"contagem externa de subjects negativa ({count})",
                details={**scope, "field": "number_of_subjects", "value": count},
            )
        for index in by_index:
            if index >= count:
                raise SubjectIndexOutOfRange(
                    message=f"subject_index {index} fora dos {count} subjects do grupo",
                    details={**scope, "subject_index": index, "field": "subject_index", "subjects": count},
                )
        return [(i, by_index.get(i)) for i in range(count)]

    def _resolve_search_space(
        self,
        entry: Optional[ExtendedSubjectConfig],
        restriction: Optional[ResolvedSearchSpace],
        is_baseline: bool,
        scope: Dict[str, Any],
        ctx: ResolutionContext,
    ) -> Optional[ResolvedSearchSpace]:
        own = self._validate_own_space(entry, scope)

        if is_baseline:
            if own is not None:
                ctx.add_warning(
                    scope=_scope_label(scope),
                    message="jvm_parameters ignorado: subject baseline roda com settings padrão",
                )
            return None

        if own is not None:
            return own
        if restriction is None:
            return None
        return replace(restriction, ranges=dict(restriction.ranges), flags=dict(restriction.flags))

    def _validate_own_space(
        self, entry: Optional[ExtendedSubjectConfig], scope: Dict[str, Any]
    ) -> Optional[ResolvedSearchSpace]:
        if entry is None or entry.jvm_parameters is None:
            return None
        return validate_search_space(
            entry.jvm_parameters,
            complete=True,
            scope=scope,
            resolver=self.range_resolver,
        )

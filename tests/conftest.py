# tests/conftest.py
"""
Fixtures compartilhados para testes do jvmtune.

Este módulo define fixtures reutilizáveis que fornecem:
- conteúdos YAML de configuração (base e override local)
- search spaces completos e restrições globais
- uma fábrica de `ProgramConfiguration` mínima e válida

Decisões arquiteturais:
    - Fixtures são simples, explícitas e determinísticas
    - Registros do schema são construídos diretamente (sem parse) quando
      o teste não é sobre o loader

Invariantes:
    - Nenhuma fixture realiza I/O
    - Nenhuma fixture executa resolução
"""

import pytest

from jvmtune.core.config.schema import (
    BOOL_FIELDS,
    RANGE_FIELDS,
    ClusterConfig,
    GcMode,
    Int64Range,
    JvmSearchSpace,
    ProgramConfiguration,
    SubjectGroupConfig,
)


# =====================================================
# Loader fixtures
# =====================================================

@pytest.fixture
def program_config_yaml() -> str:
    """
    YAML de configuração base semelhante ao uso real: um cluster, um grupo,
    restrição global de heap e GC modes.
    """
    return """\
user: svc
subject_warmup_timeout: 120
jvm_search_restriction:
  gc_mode: [USE_PARALLEL, USE_SERIAL]
  heap_size:
    floor: 512
    ceiling: 2048
    step_size: 512
  max_gc_pause_millis:
    value: 200
cluster:
  - cluster: prod
    number_of_subjects: 4
    subject_group:
      - subject_group_name: web
        number_of_default_subjects: 1
        exp_settings_files_dir: /var/jvmtune/web
        restart_command: [restart-web, --graceful]
"""


@pytest.fixture
def program_config_local_yaml() -> str:
    """YAML de override local: troca o usuário e o timeout global."""
    return """\
user: ops
subject_warmup_timeout: 600
"""


# =====================================================
# Search space fixtures
# =====================================================

@pytest.fixture
def complete_jvm_parameters() -> JvmSearchSpace:
    """
    `JvmSearchSpace` completo (todos os campos definidos), como exigido
    para `jvm_parameters` no nível de subject.
    """
    kwargs = {name: Int64Range(value=i + 1) for i, name in enumerate(RANGE_FIELDS)}
    kwargs["heap_size"] = Int64Range(floor=1024, ceiling=4096, step_size=1024)
    kwargs.update({name: True for name in BOOL_FIELDS})
    return JvmSearchSpace(gc_mode=(GcMode.USE_CONC_MARK_SWEEP,), **kwargs)


@pytest.fixture
def program_restriction() -> JvmSearchSpace:
    """Restrição global parcial (apenas heap_size e gc_mode)."""
    return JvmSearchSpace(
        gc_mode=(GcMode.USE_PARALLEL, GcMode.USE_PARALLEL_OLD),
        heap_size=Int64Range(floor=256, ceiling=1024, step_size=256),
    )


# =====================================================
# Program fixtures
# =====================================================

@pytest.fixture
def make_program():
    """
    Fábrica de `ProgramConfiguration` com um cluster e um grupo.

    Argumentos nomeados `program_*`, `cluster_*` e `group_*` são repassados
    ao escopo correspondente (ex.: `group_user="bob"`).
    """

    def _make(**overrides) -> ProgramConfiguration:
        program_kw = {"user": "svc"}
        cluster_kw = {"cluster": "prod"}
        group_kw = {"subject_group_name": "web", "number_of_subjects": 5}
        for key, value in overrides.items():
            scope, _, name = key.partition("_")
            target = {"program": program_kw, "cluster": cluster_kw, "group": group_kw}[scope]
            target[name] = value
        group = SubjectGroupConfig(**group_kw)
        cluster = ClusterConfig(subject_group=(group,), **cluster_kw)
        return ProgramConfiguration(cluster=(cluster,), **program_kw)

    return _make

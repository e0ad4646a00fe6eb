# src/jvmtune/core/config/__init__.py

"""
Camada de configuração do jvmtune.

Este pacote carrega, mescla, tipa e identifica a configuração de
experimentos de tuning de JVM antes da resolução de escopos.

Responsabilidades do pacote:
    - Carregamento de arquivos (base + override local) em YAML ou JSON
    - Deep-merge determinístico e precedência "escopo mais interno vence"
    - Schema tipado dos escopos Program → Cluster → SubjectGroup → Subject
    - Hash canônico para rastreabilidade

Invariantes:
    - Registros do schema são imutáveis
    - A mesma entrada sempre produz a mesma configuração
    - Conflitos estruturais são tratados como erro

Limites explícitos:
    - Não aplica precedência de escopos (ver `jvmtune.core.resolver`)
    - Não valida ranges numéricos (ver `jvmtune.core.search_space`)
"""

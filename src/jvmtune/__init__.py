# src/jvmtune/__init__.py
"""
jvmtune — resolução de configuração para experimentos de tuning de JVM.

A configuração é declarada em quatro escopos aninhados (programa, cluster,
subject group e subject); valores em escopos internos sobrescrevem os
herdados. Este pacote transforma essa árvore esparsa em uma configuração
concreta por subject e valida o search space numérico consumido pelo
gerador de hipóteses.

Limites explícitos:
    - Não gera linhas de comando de JVM
    - Não agenda nem executa experimentos
    - Não pontua resultados
"""
from .core.config.schema import ProgramConfiguration
from .core.resolver import ConfigResolver, ResolvedSubjectConfig
from .core.search_space import RangeResolver

__all__ = ["ConfigResolver", "ProgramConfiguration", "RangeResolver", "ResolvedSubjectConfig"]

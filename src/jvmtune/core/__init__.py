# src/jvmtune/core/__init__.py
"""
Core do jvmtune.

Reúne a resolução de configuração e a validação do search space numérico
usados pela plataforma de experimentos de tuning de JVM.

O core é projetado para ser:
    - determinístico
    - puro (sem I/O fora do loader de arquivos)
    - testável de forma isolada

Subpacotes:
    - core.config       → carregamento, merge, schema e hashing
    - core.search_space → RangeResolver e validação de JvmSearchSpace
    - core.resolver     → ConfigResolver e tipos de saída
"""

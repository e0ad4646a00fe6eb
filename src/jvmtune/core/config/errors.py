# src/jvmtune/core/config/errors.py
"""
Exceções canônicas da camada de configuração do jvmtune.

Este módulo define a raiz da hierarquia de exceções usada durante o
carregamento, o parse e a resolução da configuração de experimentos
de tuning de JVM.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros estruturais são falhas fatais para a resolução (nunca do processo)
    - Nenhuma correção silenciosa é aplicada

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Exceções de resolução (ver `jvmtune.core.exceptions`) também herdam
      de `ConfigError`, permitindo captura única pelo chamador

Limites explícitos:
    - Não executa resolução
    - Não realiza fallback ou recovery
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do jvmtune.

    Toda falha levantada durante carregamento de arquivos, parse do schema,
    validação de ranges ou resolução de escopos herda desta classe.
    """


class ConfigFileNotFoundError(ConfigError):
    """
    Exceção levantada quando o arquivo de configuração base não existe.

    Decisões arquiteturais:
        - O arquivo base é obrigatório
        - O arquivo local de override é opcional e nunca gera este erro
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando a extensão do arquivo não é suportada.

    Formatos suportados:
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz do arquivo de configuração não é um mapa (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando o deep-merge encontra tipos incompatíveis
    para a mesma chave entre a configuração base e o override.

    Exemplo de conflito:
        - base:     {"user": "svc"}
        - override: {"user": {"name": "svc"}}
    """


class ConfigSchemaError(ConfigError):
    """
    Exceção levantada quando o mapa de entrada não respeita o schema
    dos escopos (chave desconhecida, tipo incorreto, GC mode inválido).

    A mensagem sempre inclui o caminho pontuado da chave ofensora
    (ex.: `cluster[0].subject_group[1].number_of_subjects`).
    """


class ConfigSyntaxError(ConfigError):
    """Arquivo de configuração ilegível: YAML/JSON malformado ou não UTF-8."""

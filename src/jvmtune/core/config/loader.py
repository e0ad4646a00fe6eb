# src/jvmtune/core/config/loader.py
"""
Loader canônico da configuração de experimentos do jvmtune.

A configuração de programa é carregada a partir de:
    - um arquivo base (obrigatório)
    - um arquivo local de overrides (opcional)

Responsabilidades do módulo:
    - Carregar arquivos YAML ou JSON
    - Validar o tipo raiz (mapa)
    - Aplicar o override local via `deep_merge`
    - Materializar a `ProgramConfiguration` tipada (`load_program_configuration`)

Invariantes:
    - O arquivo base é obrigatório
    - O override local nunca muta a configuração base
    - A mesma entrada sempre produz a mesma configuração

Limites explícitos:
    - Não resolve precedência de escopos (responsabilidade do ConfigResolver)
    - Não valida ranges numéricos
"""

from pathlib import Path
from typing import Any, Dict, Optional
import json

import yaml  # PyYAML

from .merge import deep_merge
from .schema import ProgramConfiguration, parse_program_configuration
from .errors import (
    ConfigFileNotFoundError,
    InvalidConfigRootTypeError,
    ConfigSyntaxError,
    UnsupportedConfigFormatError,
)


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de configuração e valida sua estrutura básica.

    Arquivos vazios são interpretados como mapas vazios.

    Raises:
        ConfigFileNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        ConfigSyntaxError: Se o conteúdo não for YAML/JSON válido em UTF-8.
        InvalidConfigRootTypeError: Se a raiz não for um dicionário.
    """
    if not path.exists():
        raise ConfigFileNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix not in {".yaml", ".yml", ".json"}:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    try:
        with path.open("r", encoding="utf-8") as f:
            if suffix == ".json":
                text = f.read()
                data = json.loads(text) if text.strip() else None
            else:
                data = yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigSyntaxError(f"Arquivo de configuração inválido: {path}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_config(
    *,
    config_path: str,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega o mapa de configuração efetivo (base + override local).

    Política de resolução:
        - O arquivo base é obrigatório
        - O arquivo local é opcional; se o caminho não existir, é ignorado
        - Quando presente, o local tem prioridade (deep-merge; listas
          como `cluster` são substituídas integralmente)

    Args:
        config_path (str): Caminho para o arquivo base.
        local_path (Optional[str]): Caminho opcional para overrides locais.

    Returns:
        Dict[str, Any]: Mapa de configuração resolvido.
    """
    effective = _load_file(Path(config_path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective


def load_program_configuration(
    *,
    config_path: str,
    local_path: Optional[str] = None,
) -> ProgramConfiguration:
    """
    Carrega e tipa a configuração de programa.

    Raises:
        ConfigFileNotFoundError, UnsupportedConfigFormatError,
        InvalidConfigRootTypeError, ConfigTypeConflictError,
        ConfigSchemaError.
    """
    return parse_program_configuration(load_config(config_path=config_path, local_path=local_path))

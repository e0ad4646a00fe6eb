# src/jvmtune/core/config/hashing.py
"""
Hashing canônico de configuração do jvmtune.

O hash identifica estruturalmente a configuração de entrada e o conjunto de
subjects resolvidos, permitindo verificar que a mesma entrada produz sempre
a mesma saída (idempotência da resolução) e associar eventos do log de
resolução a uma configuração concreta.

Política de hashing:
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Codificação UTF-8
    - SHA-256, retornado em hexadecimal (64 caracteres)
"""

import hashlib
import json
from typing import Any, Dict, List, Union


def compute_config_hash(config: Union[Dict[str, Any], List[Any]]) -> str:
    """
    Gera um hash determinístico de uma estrutura de configuração.

    Aceita um mapa (ex.: `ProgramConfiguration.to_dict()`) ou uma lista de
    mapas (ex.: subjects resolvidos, na ordem de emissão).

    Valores não serializáveis em JSON (ex.: datas vindas de YAML em
    `param_block`) entram no hash pela sua representação textual.

    Raises:
        TypeError: Se o objeto não for dict nem list.
    """
    if not isinstance(config, (dict, list)):
        raise TypeError(
            f"Config para hashing deve ser dict ou list, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()

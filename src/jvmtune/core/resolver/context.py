# src/jvmtune/core/resolver/context.py
"""
Contexto de uma resolução de configuração.

Este módulo define o `ResolutionContext`, o registro estruturado de eventos
e warnings produzido durante uma chamada de `ConfigResolver.resolve`.

O contexto é o único meio de observabilidade da resolução:
    - eventos de log estruturados (nunca strings livres)
    - warnings não fatais agrupados por caminho de escopo

Invariantes:
    - Cada resolução possui seu próprio contexto (sem estado global)
    - Todo evento inclui `resolution_id`, `scope`, `level` e `timestamp`
    - Warnings nunca interrompem a resolução

Limites explícitos:
    - Não resolve configuração
    - Não persiste eventos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import uuid4


@dataclass
class ResolutionContext:
    """
    Log estruturado de uma resolução.

    Campos:
    - resolution_id: identificador da resolução (gerado se omitido)
    - created_at: timestamp UTC de criação
    - events: eventos estruturados, em ordem de emissão
    - warnings: mensagens não fatais por escopo (ex.: `prod/web/subject[0]`)
    """
    resolution_id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, scope: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "resolution_id": self.resolution_id,
            "scope": scope,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, scope: str, message: str) -> None:
        if scope not in self.warnings:
            self.warnings[scope] = []
        self.warnings[scope].append(message)

    def events_at(self, level: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["level"] == level]

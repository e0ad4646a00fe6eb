"""
Search space numérico do jvmtune.

- `ranges` → RangeResolver: validação e expansão de `Int64Range`
- `space`  → validação de `JvmSearchSpace` (restrição global ou registro completo)
"""

from .ranges import RangeMode, RangeResolver, ValidatedRange
from .space import ResolvedSearchSpace, SearchSpaceOrigin, validate_search_space

__all__ = [
    "RangeMode",
    "RangeResolver",
    "ValidatedRange",
    "ResolvedSearchSpace",
    "SearchSpaceOrigin",
    "validate_search_space",
]

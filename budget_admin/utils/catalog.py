"""Ordered catalog of phase kinds.

The catalog is passed explicitly to every routine that needs it (and
provided to routers through ``get_phase_catalog``) so that a deployment,
or a test, can retire or add kinds without touching shared state.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends

from budget_admin.config import Settings, get_settings


@dataclass(frozen=True)
class PhaseCatalog:
    """Immutable, ordered, duplicate-free sequence of phase kinds."""

    kinds: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(set(self.kinds)) != len(self.kinds):
            raise ValueError(f"Duplicate phase kinds in catalog: {self.kinds}")

    @classmethod
    def of(cls, kinds: Iterable[str]) -> PhaseCatalog:
        return cls(tuple(kinds))

    def __contains__(self, kind: object) -> bool:
        return kind in self.kinds

    def __iter__(self) -> Iterator[str]:
        return iter(self.kinds)

    def __len__(self) -> int:
        return len(self.kinds)

    def position(self, kind: str) -> int | None:
        """0-based catalog position of ``kind`` or None when retired/unknown."""
        try:
            return self.kinds.index(kind)
        except ValueError:
            return None

    def without(self, *kinds: str) -> PhaseCatalog:
        return PhaseCatalog(tuple(k for k in self.kinds if k not in kinds))


def get_phase_catalog(
    settings: Annotated[Settings, Depends(get_settings)],
) -> PhaseCatalog:
    """FastAPI dependency returning the configured catalog."""
    return PhaseCatalog.of(settings.PHASE_KINDS)

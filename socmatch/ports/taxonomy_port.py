"""
ports/taxonomy_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the taxonomy source.

Called exactly once at startup by services/container.py; the result feeds
TaxonomyIndex.build().

Current implementation: JSONTaxonomyAdapter (a pre-dumped soc_codes.json)
To swap: write a new adapter (e.g. CSV, database) implementing this Protocol
and change ONE line in services/container.py.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from socmatch.domain.models import OccupationEntry


@runtime_checkable
class TaxonomySourcePort(Protocol):
    """Contract for loading the occupation taxonomy."""

    def load(self) -> list[OccupationEntry]:
        """Load every occupation entry.

        Returns:
            Entries in source order.

        Raises:
            TaxonomyError: If the source is missing or any entry is malformed.
        """
        ...

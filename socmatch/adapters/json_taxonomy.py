"""
adapters/json_taxonomy.py
──────────────────────────────────────────────────────────────────────────────
Implements TaxonomySourcePort from a pre-dumped SOC JSON file.

Accepted layouts:
  [ {"code": "15-1252", "title": "...", "majorGroup": "...", ...}, ... ]
  { "data": [ ... ] }          (the shape served by the /soc/all endpoint)

Any problem (missing file, bad JSON, malformed entry) raises TaxonomyError.
There is deliberately no "start empty" mode: a matcher with no taxonomy
would silently return nothing.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from socmatch.config.settings import Settings
from socmatch.domain.exceptions import TaxonomyError
from socmatch.domain.models import OccupationEntry

logger = logging.getLogger(__name__)


class JSONTaxonomyAdapter:
    """Load the SOC taxonomy from ``settings.taxonomy_path``."""

    def __init__(self, settings: Settings) -> None:
        self._path = Path(settings.taxonomy_path)
        logger.debug("JSONTaxonomyAdapter ready | path=%s", self._path)

    # ── TaxonomySourcePort implementation ──────────────────────────────────

    def load(self) -> list[OccupationEntry]:
        if not self._path.exists():
            raise TaxonomyError(f"Taxonomy file not found: {self._path}")

        try:
            with self._path.open(encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise TaxonomyError(f"Cannot read taxonomy {self._path}: {exc}") from exc

        records = payload.get("data") if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise TaxonomyError(
                f"Taxonomy {self._path} must be a JSON array or an object with a 'data' array"
            )

        entries: list[OccupationEntry] = []
        for position, record in enumerate(records):
            try:
                entries.append(OccupationEntry.model_validate(record))
            except ValidationError as exc:
                raise TaxonomyError(
                    f"Malformed taxonomy entry at position {position} in {self._path}: {exc}"
                ) from exc

        logger.info("Loaded %d SOC codes from %s", len(entries), self._path)
        return entries

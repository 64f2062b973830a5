"""
Loading of the static candidate location catalog.
"""

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from .exceptions import CatalogError
from .models import CandidateLocation, GeoPoint

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "purdue_campus.yaml"


class CatalogEntry(BaseModel):
    """One building as written in the catalog file."""
    id: str
    name: str
    abbr: str
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        """Accept numeric ids in YAML."""
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    def to_candidate(self) -> CandidateLocation:
        return CandidateLocation(
            identifier=self.id,
            display_name=self.name,
            abbreviation=self.abbr,
            coordinates=GeoPoint(latitude=self.lat, longitude=self.lng),
        )


def parse_catalog(data) -> List[CandidateLocation]:
    """
    Validate raw catalog data (a list of mappings) into candidates.

    Raises:
        CatalogError: If the data is not a list, an entry is invalid, or an
            identifier is used twice
    """
    if not isinstance(data, list):
        raise CatalogError("Catalog must contain a list of locations at the root level.")

    candidates: List[CandidateLocation] = []
    seen_ids: set[str] = set()

    for position, raw in enumerate(data, 1):
        try:
            entry = CatalogEntry.model_validate(raw)
        except PydanticValidationError as exc:
            raise CatalogError(f"Invalid catalog entry #{position}: {exc}") from exc

        if entry.id in seen_ids:
            raise CatalogError(f"Duplicate catalog id detected: {entry.id}")
        seen_ids.add(entry.id)
        candidates.append(entry.to_candidate())

    return candidates


def load_catalog(path: Optional[Path] = None) -> List[CandidateLocation]:
    """
    Load the candidate catalog from a YAML file.

    Args:
        path: Catalog file; defaults to the bundled campus catalog

    Returns:
        List of CandidateLocation in file order

    Raises:
        CatalogError: If the file is missing or malformed
    """
    catalog_path = path or DEFAULT_CATALOG_PATH

    if not catalog_path.exists():
        raise CatalogError(f"Catalog file not found: {catalog_path}")

    try:
        with open(catalog_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise CatalogError(f"Invalid YAML in {catalog_path}: {exc}") from exc

    candidates = parse_catalog(data or [])
    logger.debug("Loaded %d candidate locations from %s", len(candidates), catalog_path)
    return candidates

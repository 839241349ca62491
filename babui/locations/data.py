"""
Loading of the bundled bd-geocode reference files.

Two file shapes are accepted:
- phpMyAdmin JSON export: a list of header/database/table objects where the
  rows live under the element with ``"type": "table"``
- a plain list of row objects

Rows that lack an id or a name are dropped here, so nothing downstream ever
sees them.
"""

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import structlog

from babui.models.location import AreaGroup, District, Division, Upazila

logger = structlog.get_logger()

DATA_DIR = Path(__file__).parent / "data"


@dataclass(frozen=True)
class LocationTables:
    """Immutable reference tables for the four administrative levels."""

    divisions: tuple[Division, ...] = field(default_factory=tuple)
    districts: tuple[District, ...] = field(default_factory=tuple)
    upazilas: tuple[Upazila, ...] = field(default_factory=tuple)
    areas: tuple[AreaGroup, ...] = field(default_factory=tuple)


def extract_table(raw: Any) -> list[dict]:
    """Return the row list of a reference file, whatever its shape."""
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        return []

    for item in raw:
        if isinstance(item, dict) and item.get("type") == "table":
            data = item.get("data")
            return data if isinstance(data, list) else []

    return [item for item in raw if isinstance(item, dict) and "type" not in item]


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _parse_divisions(rows: list[dict]) -> list[Division]:
    divisions = []
    for row in rows:
        division_id, name = _text(row.get("id")), _text(row.get("name"))
        if not division_id or not name:
            continue
        divisions.append(Division(id=division_id, name=name, bn_name=_text(row.get("bn_name"))))
    return divisions


def _parse_districts(rows: list[dict]) -> list[District]:
    districts = []
    for row in rows:
        district_id, name = _text(row.get("id")), _text(row.get("name"))
        division_id = _text(row.get("division_id"))
        if not district_id or not name or not division_id:
            continue
        districts.append(
            District(
                id=district_id,
                name=name,
                division_id=division_id,
                bn_name=_text(row.get("bn_name")),
            )
        )
    return districts


def _parse_upazilas(rows: list[dict]) -> list[Upazila]:
    upazilas = []
    for row in rows:
        upazila_id = _text(row.get("upazila_id", row.get("id")))
        name = _text(row.get("name"))
        district_id = _text(row.get("district_id"))
        if not upazila_id or not name or not district_id:
            continue
        upazilas.append(
            Upazila(
                upazila_id=upazila_id,
                name=name,
                district_id=district_id,
                bn_name=_text(row.get("bn_name")),
            )
        )
    return upazilas


def _parse_areas(rows: list[dict]) -> list[AreaGroup]:
    groups = []
    for row in rows:
        upazila_id = _text(row.get("upazila_id"))
        names = row.get("areas")
        if not upazila_id or not isinstance(names, list):
            continue
        clean = tuple(n.strip() for n in names if isinstance(n, str) and n.strip())
        groups.append(AreaGroup(upazila_id=upazila_id, areas=clean))
    return groups


def load_tables(
    divisions: Any,
    districts: Any,
    upazilas: Any,
    areas: Any,
) -> LocationTables:
    """Build reference tables from already-decoded JSON documents."""
    division_rows = extract_table(divisions)
    district_rows = extract_table(districts)
    upazila_rows = extract_table(upazilas)
    area_rows = extract_table(areas)

    tables = LocationTables(
        divisions=tuple(_parse_divisions(division_rows)),
        districts=tuple(_parse_districts(district_rows)),
        upazilas=tuple(_parse_upazilas(upazila_rows)),
        areas=tuple(_parse_areas(area_rows)),
    )

    dropped = (
        len(division_rows) - len(tables.divisions)
        + len(district_rows) - len(tables.districts)
        + len(upazila_rows) - len(tables.upazilas)
        + len(area_rows) - len(tables.areas)
    )
    if dropped:
        logger.warning("Dropped malformed reference entries", count=dropped)

    return tables


def _read_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


@lru_cache(maxsize=1)
def load_bundled_tables(data_dir: Path = DATA_DIR) -> LocationTables:
    """Load the reference files shipped with the package (cached)."""
    tables = load_tables(
        _read_json(data_dir / "divisions.json"),
        _read_json(data_dir / "districts.json"),
        _read_json(data_dir / "upazilas.json"),
        _read_json(data_dir / "area.json"),
    )
    logger.info(
        "Loaded location reference data",
        divisions=len(tables.divisions),
        districts=len(tables.districts),
        upazilas=len(tables.upazilas),
        area_groups=len(tables.areas),
    )
    return tables

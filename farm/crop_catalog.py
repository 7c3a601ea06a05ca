from __future__ import annotations

import json
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator

from farm.crops import ANY_SEASON, Crop
from farm.plots import SEASONS, Season
from farm.validation import validate_crop_catalog


class DataError(RuntimeError):
    pass


DATA_DIR = Path(os.getenv("FARM_DATA_DIR", Path(__file__).resolve().parent / "data"))


def _load_json(path: Path) -> Any:
    if not path.exists():
        raise DataError(f"Missing data file: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


@dataclass(frozen=True)
class CropCatalog:
    by_id: dict[str, Crop]

    def __iter__(self) -> Iterator[Crop]:
        return iter(self.by_id.values())

    def __len__(self) -> int:
        return len(self.by_id)

    def find_crop(self, crop_id: str | None) -> Crop | None:
        """Return the crop for `crop_id`, or None if the id is unknown."""
        if crop_id is None:
            return None
        return self.by_id.get(crop_id)

    @property
    def starter(self) -> Crop:
        for crop in self.by_id.values():
            if crop.starts_unlocked:
                return crop
        raise DataError("catalog has no starter crop")


def unlock_cost(crop: Crop, multiplier: int = 10) -> int:
    return crop.unit_price * multiplier


def is_plantable_in_season(crop: Crop, season: Season) -> bool:
    return crop.grows_in(season)


def crops_for_season(catalog: CropCatalog, season: Season | None) -> list[Crop]:
    """List crops that can be sown in `season`; None lists the whole catalog."""
    if season is None:
        return list(catalog)
    return [crop for crop in catalog if crop.grows_in(season)]


def _parse_crop_row(row: dict[str, Any]) -> Crop:
    crop_id = str(row.get("id") or "").strip()
    if not crop_id:
        raise DataError(f"crop row missing id: {row}")
    season = str(row.get("season", ANY_SEASON)).strip().lower()
    if season in ("all", ""):
        season = ANY_SEASON
    if season != ANY_SEASON and season not in SEASONS:
        raise DataError(f"crop '{crop_id}' has unknown season '{row.get('season')}'")
    try:
        return Crop(
            crop_id=crop_id,
            name=str(row.get("name") or crop_id),
            growth_seconds=int(row["growth_seconds"]),
            unit_price=int(row["unit_price"]),
            harvest_yield=int(row["harvest_yield"]),
            season=season,
            starts_unlocked=bool(row.get("starts_unlocked", False)),
            icon=str(row.get("icon", "")),
            description=str(row.get("description", "")),
        )
    except KeyError as exc:
        raise DataError(f"crop '{crop_id}' missing field {exc}") from exc


def load_crop_catalog(data_dir: Path = DATA_DIR, filename: str = "crops.json") -> CropCatalog:
    override = os.getenv("FARM_CROPS_PATH")
    path = Path(override) if override else (data_dir / filename)
    raw = _load_json(path)
    if not isinstance(raw, list):
        raise DataError(f"{path} must contain a list of crops")

    by_id: dict[str, Crop] = {}
    for row in raw:
        if not isinstance(row, dict):
            continue
        crop = _parse_crop_row(row)
        if crop.crop_id in by_id:
            raise DataError(f"duplicate crop id '{crop.crop_id}' in {path}")
        by_id[crop.crop_id] = crop

    catalog = CropCatalog(by_id=by_id)
    validate_crop_catalog(catalog)
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> CropCatalog:
    """Return the bundled crop catalog, loaded once per process."""
    return load_crop_catalog()

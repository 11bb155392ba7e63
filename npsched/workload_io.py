from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .models import ProcessDescriptor

# The "Load Sample" workload of the original web form.
SAMPLE_WORKLOAD: List[ProcessDescriptor] = [
    {"pid": "P1", "arrival": 0, "burst": 3},
    {"pid": "P2", "arrival": 2, "burst": 6},
    {"pid": "P3", "arrival": 4, "burst": 4},
    {"pid": "P4", "arrival": 6, "burst": 5},
]

_KEY_ALIASES = {
    "arrival_time": "arrival",
    "burst_time": "burst",
}


def load_workload(path: str | Path) -> List[ProcessDescriptor]:
    """
    Load a workload from a JSON or CSV file into raw process descriptors.

    Field values are passed through untouched; filtering bad rows is the
    normalizer's job, so a file with a blank pid or a non-numeric burst still
    loads.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[ProcessDescriptor]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_descriptor_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[ProcessDescriptor]:
    # utf-8-sig drops the byte-order mark spreadsheet exports put before the header.
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        return [_descriptor_from_mapping(row) for row in reader]


def _descriptor_from_mapping(mapping: Any) -> Dict[str, Any]:
    if not isinstance(mapping, Mapping):
        # Keeps the row (and its position) so it is dropped, not lost.
        return {"pid": None, "arrival": None, "burst": None}

    descriptor: Dict[str, Any] = {"pid": None, "arrival": None, "burst": None}
    for key, value in mapping.items():
        if isinstance(key, str):
            key = key.strip()
        key = _KEY_ALIASES.get(key, key)
        if key in descriptor:
            descriptor[key] = value
    return descriptor

#!/usr/bin/env python3
"""
Motion table JSON loading utilities.

Custom tables live in motion_tables/*.json next to the package. Each file
becomes an immutable MotionTable.

Schema
======
{
  "name": "Human-friendly table name",
  "extends_builtin": true,           # optional; start from the built-in solar system table
  "bodies": {
    "Earth": {
      "orbit_rate": 1.14,            # deg/s
      "orbit_axis": [0.0, 1.0, 0.0], # need not be normalized
      "spin_rate": 4.17,             # deg/s
      "spin_axis": [0.0, 1.0, 0.0],
      "orbit_radius": 3.5,           # >= 0
      "display_scale": 0.045         # > 0
    }
  }
}

Entries that do not fit the schema are skipped with a warning; the rest of the
file still loads. Users can add their own JSON files into the folder and they'll
be picked up by the loader.
"""
import json
import logging
import os
from typing import Dict, List, Optional, Tuple

from .data_models import MotionParameters
from .motion_table import SOLAR_SYSTEM, MotionTable

logger = logging.getLogger(__name__)

TABLES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "motion_tables")


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      data = json.load(f)
  except (OSError, ValueError) as exc:
    logger.warning("Could not read %s: %s", path, exc)
    return None
  if not isinstance(data, dict):
    logger.warning("Could not read %s: top level is %s, expected an object", path, type(data).__name__)
    return None
  return data


def _coerce_vec3(v) -> Tuple[float, float, float]:
  return (float(v[0]), float(v[1]), float(v[2]))


def parse_motion_parameters(entry: dict) -> MotionParameters:
  """Build MotionParameters from one JSON entry; raises on bad input."""
  return MotionParameters(
    orbit_rate=float(entry.get("orbit_rate", 0.0)),
    orbit_axis=_coerce_vec3(entry.get("orbit_axis", [0.0, 1.0, 0.0])),
    spin_rate=float(entry.get("spin_rate", 0.0)),
    spin_axis=_coerce_vec3(entry.get("spin_axis", [0.0, 1.0, 0.0])),
    orbit_radius=float(entry.get("orbit_radius", 0.0)),
    display_scale=float(entry["display_scale"]),
  )


def table_from_dict(data: dict, source: str = "<dict>") -> MotionTable:
  entries: Dict[str, MotionParameters] = {}
  bodies = data.get("bodies") or {}
  if not isinstance(bodies, dict):
    logger.warning("%s: 'bodies' is %s, expected an object; no bodies loaded", source, type(bodies).__name__)
    bodies = {}
  for body_id, entry in bodies.items():
    if not isinstance(entry, dict):
      logger.warning("%s: skipping body '%s': entry is %s, expected an object", source, body_id, type(entry).__name__)
      continue
    try:
      entries[str(body_id)] = parse_motion_parameters(entry)
    except (KeyError, IndexError, TypeError, ValueError) as exc:
      logger.warning("%s: skipping body '%s': %s", source, body_id, exc)
  if data.get("extends_builtin"):
    return SOLAR_SYSTEM.extended(entries)
  return MotionTable(entries)


def list_motion_tables() -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available tables."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(TABLES_DIR):
    return items
  for fn in sorted(os.listdir(TABLES_DIR)):
    if not fn.lower().endswith(".json"):
      continue
    data = _read_json(os.path.join(TABLES_DIR, fn)) or {}
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def load_motion_table(path: str) -> Optional[MotionTable]:
  """
  Load a table from a JSON file. A bare file name is looked up in TABLES_DIR.
  Returns None if the file cannot be read.
  """
  if not os.path.dirname(path):
    path = os.path.join(TABLES_DIR, path)
  data = _read_json(path)
  if data is None:
    return None
  table = table_from_dict(data, source=os.path.basename(path))
  logger.info("Loaded motion table %s (%d bodies)", os.path.basename(path), len(table))
  return table

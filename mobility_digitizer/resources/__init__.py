# mobility_digitizer/resources/__init__.py
from pathlib import Path
from typing import Dict, List, Optional
import yaml

from mobility_digitizer.schema.types import Geography

def _catalog_path(root: Optional[str] = None) -> Path:
    """
    Look for geographies.yml in common locations:
    - <root>/resources/geographies.yml  (local override)
    - alongside this module
    """
    candidates = []
    if root:
        candidates.append(Path(root) / "resources" / "geographies.yml")
    candidates.append(Path(__file__).resolve().parent / "geographies.yml")
    for p in candidates:
        if p.exists():
            return p
    raise FileNotFoundError(
        "geographies.yml not found. Looked in:\n  - " +
        "\n  - ".join(str(c) for c in candidates)
    )

def load_catalog(root: Optional[str] = None) -> Dict[str, Dict[str, str]]:
    return yaml.safe_load(_catalog_path(root).read_text(encoding="utf-8"))

def state_fetch_code(state_name: str, parent: str = "US") -> str:
    """'New York' -> 'US_New_York'"""
    return f"{parent}_{state_name.replace(' ', '_')}"

def country_geographies(root: Optional[str] = None) -> List[Geography]:
    countries = load_catalog(root)["countries"]
    return [Geography(code=code, category="country", key=code, name=name)
            for code, name in countries.items()]

def us_state_geographies(root: Optional[str] = None) -> List[Geography]:
    states = load_catalog(root)["us_states"]
    return [Geography(code=state_fetch_code(name), category="state", key=abbr, name=name, parent="US")
            for abbr, name in states.items()]

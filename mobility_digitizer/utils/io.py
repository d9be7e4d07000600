# read/write json; directory helpers
from pathlib import Path
import json, os, shutil

def ensure_dir(p):
    Path(p).mkdir(parents=True, exist_ok=True)

def write_json(obj, path):
    p = Path(path); ensure_dir(p.parent)
    tmp = p.with_suffix(p.suffix + ".tmp")
    tmp.write_text(json.dumps(obj, indent=2), encoding="utf-8")
    os.replace(tmp, p)

def read_json(path):
    return json.loads(Path(path).read_text(encoding="utf-8"))

def clean_dir(p):
    """Remove a directory tree if present (rm -rf)."""
    shutil.rmtree(p, ignore_errors=True)

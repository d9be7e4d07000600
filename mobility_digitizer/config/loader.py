# mobility_digitizer/config/loader.py
from pydantic_settings import BaseSettings
from omegaconf import OmegaConf, DictConfig, ListConfig
from dotenv import load_dotenv
from pathlib import Path
from typing import Optional
import os, warnings

class Settings(BaseSettings):
    LOG_LEVEL: Optional[str] = None
    DATA_ROOT: Optional[str] = None
    OUTPUT_ROOT: Optional[str] = None
    MOBILITY_VINTAGE: Optional[str] = None

def _abs(root: Path, p: str) -> str:
    pth = Path(p)
    return str((pth if pth.is_absolute() else (root / pth)).resolve())

def _to_container(cfg):
    # resolve interpolations before merging as plain python
    return OmegaConf.to_container(cfg, resolve=True)

def _deep_soft_merge(a, b, path=""):
    """
    Dict-vs-dict → recursive merge.
    Any other type conflict → b replaces a.
    """
    if isinstance(a, dict) and isinstance(b, dict):
        out = dict(a)
        for k, v in b.items():
            if k in out:
                out[k] = _deep_soft_merge(out[k], v, f"{path}.{k}" if path else k)
            else:
                out[k] = v
        return out
    return b

def _merge_yaml(cfg, path_obj):
    """
    Load YAML and merge into cfg.
    1) A top-level list is not a valid overlay; it is wrapped under {"overlay": [...]}
    2) Try OmegaConf.merge
    3) If it fails on type conflicts, soft-merge in python
    """
    p = Path(path_obj)
    if not p.exists():
        return cfg
    y = OmegaConf.load(p)
    if isinstance(y, ListConfig):
        warnings.warn(f"[loader] '{p}' has a top-level list; wrapping under key 'overlay'.")
        y = OmegaConf.create({"overlay": y})

    try:
        return OmegaConf.merge(cfg, y)
    except Exception as e:
        warnings.warn(f"[loader] Hard merge failed for '{p}' ({e.__class__.__name__}); "
                      f"falling back to soft replace-on-mismatch.")
        merged = _deep_soft_merge(_to_container(cfg), _to_container(y))
        return OmegaConf.create(merged)

def load_cfg(root: Optional[Path] = None) -> DictConfig:
    load_dotenv()

    def _env_resolver(var, default=None):
        return os.environ.get(var, default)
    OmegaConf.register_new_resolver("env", _env_resolver, replace=True)

    root = Path(root) if root is not None else Path(__file__).resolve().parents[2]

    conf = OmegaConf.merge(
        OmegaConf.load(root / "configs" / "paths.yaml"),
        OmegaConf.load(root / "configs" / "base.yaml"),
        OmegaConf.load(root / "configs" / "pipeline.yaml"),
    )

    # ---- optional profile overlay ----
    profile = os.environ.get("CFG_PROFILE")
    if profile:
        conf = _merge_yaml(conf, root / "configs" / "profiles" / f"{profile}.yaml")

    # ---- env passthrough ----
    s = Settings()
    if s.DATA_ROOT:
        conf.paths.data_root = s.DATA_ROOT
    if s.OUTPUT_ROOT:
        conf.paths.output = s.OUTPUT_ROOT
    if s.LOG_LEVEL:
        conf.logging.level = s.LOG_LEVEL
    if s.MOBILITY_VINTAGE:
        conf.source.vintage = s.MOBILITY_VINTAGE

    # ---- normalize paths.* ----
    paths_dict = OmegaConf.to_container(conf.paths, resolve=True)
    for k, v in list(paths_dict.items()):
        if isinstance(v, str):
            paths_dict[k] = _abs(root, v)
    conf.paths = OmegaConf.create(paths_dict)

    # ---- RUN_ID workspace redirect (so you don't touch old data) ----
    run_id = os.environ.get("RUN_ID")
    if run_id:
        ws_root = Path(conf.paths.data_root) / "_runs" / run_id
        conf.paths.pdfs   = str(ws_root / "pdfs")
        conf.paths.output = str(ws_root / "output")
        conf.paths.runs   = str(ws_root / "summary")

    conf.root = str(root)
    return conf

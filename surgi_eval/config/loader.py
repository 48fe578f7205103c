"""SurgiEval — Завантаження конфігурації"""
import yaml
from pathlib import Path
from dataclasses import asdict, fields, is_dataclass
from typing import Any, Dict
from .settings import SurgiEvalConfig


def save_yaml(config: SurgiEvalConfig, path: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(asdict(config), f, default_flow_style=False, allow_unicode=True)


def load_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _from_dict(cls, data: Dict[str, Any]):
    """Побудувати (вкладений) dataclass зі словника, ігноруючи зайві ключі"""
    kwargs = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        nested = f.default_factory
        if isinstance(value, dict) and is_dataclass(nested):
            value = _from_dict(nested, value)
        kwargs[f.name] = value
    return cls(**kwargs)


def config_from_dict(data: Dict[str, Any]) -> SurgiEvalConfig:
    return _from_dict(SurgiEvalConfig, data or {})


def save_config(config: SurgiEvalConfig, path: str) -> None:
    save_yaml(config, path)


def load_config(path: str) -> SurgiEvalConfig:
    return config_from_dict(load_yaml(path))

"""SurgiEval — Модуль конфігурації"""
from .settings import (
    SurgiEvalConfig,
    get_default_config,
    TimerConfig,
    GenerationConfig,
    ScoringConfig,
    ReportConfig,
)
from .loader import save_config, load_config, save_yaml, load_yaml, config_from_dict
from .log import setup_logging

__all__ = [
    "SurgiEvalConfig",
    "get_default_config",
    "TimerConfig",
    "GenerationConfig",
    "ScoringConfig",
    "ReportConfig",
    "save_config",
    "load_config",
    "save_yaml",
    "load_yaml",
    "config_from_dict",
    "setup_logging",
]

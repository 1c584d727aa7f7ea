"""Centralized logging configuration for the wizard host."""

import logging
import logging.handlers
from pathlib import Path

from .config.models import LoggingConfig


def _file_handler(cfg: LoggingConfig, level: int) -> logging.Handler:
    log_path = Path(cfg.file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    h = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=cfg.max_bytes, backupCount=cfg.backup_count, encoding="utf-8"
    )
    h.setLevel(level)
    return h


def _console_handler(level: int) -> logging.Handler:
    h = logging.StreamHandler()
    h.setLevel(level)
    return h


def setup_logging(cfg: LoggingConfig) -> None:
    """Configure the root logger: optional file handler and optional console output.

    With neither a log file nor console output configured, records are
    dropped by a NullHandler so terminal prompts stay clean.
    """
    level = getattr(logging, cfg.level, logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    root = logging.getLogger()
    root.setLevel(level)
    for h in root.handlers[:]:
        root.removeHandler(h)
    if cfg.file:
        file_handler = _file_handler(cfg, level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    if cfg.log_to_console:
        console_handler = _console_handler(level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
    if not root.handlers:
        root.addHandler(logging.NullHandler())

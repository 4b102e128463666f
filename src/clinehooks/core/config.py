"""Configuration: env, settings.json, paths, hook timeouts."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from clinehooks import __version__


@dataclass
class Config:
    global_dir: Path = field(default_factory=lambda: Path.home() / ".clinehooks")
    global_root: Path | None = field(default_factory=Path.home)  # holds .clinerules/hooks
    hook_timeout: float = 30.0
    max_workers: int = 4
    cline_version: str = __version__
    verbose: bool = False

    @property
    def state_file(self) -> Path:
        return self.global_dir / "state.json"

    @property
    def settings_file(self) -> Path:
        return self.global_dir / "settings.json"


def _positive_float(value) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _positive_int(value) -> int | None:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _apply_settings(config: Config, path: Path) -> None:
    """Apply a single settings.json file to config."""
    if not path.exists():
        return
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return
    if not isinstance(data, dict):
        return
    if isinstance(data.get("globalRoot"), str) and data["globalRoot"]:
        config.global_root = Path(data["globalRoot"]).expanduser()
    if (timeout := _positive_float(data.get("hookTimeout"))) is not None:
        config.hook_timeout = timeout
    if (workers := _positive_int(data.get("maxWorkers"))) is not None:
        config.max_workers = workers
    if isinstance(data.get("clineVersion"), str) and data["clineVersion"]:
        config.cline_version = data["clineVersion"]


def load_config(
    timeout: float | None = None,
    verbose: bool = False,
    global_dir: Path | None = None,
) -> Config:
    """Load config with priority: CLI args > env > .env > settings.json > defaults."""
    load_dotenv()

    config = Config()
    if global_dir is not None:
        config.global_dir = global_dir
    config.verbose = verbose

    _apply_settings(config, config.settings_file)

    if root := os.getenv("CLINEHOOKS_GLOBAL_ROOT"):
        config.global_root = Path(root).expanduser()
    if (env_timeout := _positive_float(os.getenv("CLINEHOOKS_TIMEOUT"))) is not None:
        config.hook_timeout = env_timeout
    if (env_workers := _positive_int(os.getenv("CLINEHOOKS_MAX_WORKERS"))) is not None:
        config.max_workers = env_workers
    if version := os.getenv("CLINE_VERSION"):
        config.cline_version = version

    if timeout:
        config.hook_timeout = timeout

    return config

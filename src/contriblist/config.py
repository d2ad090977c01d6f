from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

APP = "contriblist"

DEFAULT_CATALOG_URL = "http://dl.dropbox.com/u/700641/generated/contributions.xml"


def config_dir() -> Path:
    """
    Cross-platform config directory:
      - Windows: %APPDATA%\\contriblist
      - macOS/Linux: $XDG_CONFIG_HOME/contriblist or ~/.config/contriblist
    """
    if os.name == "nt":
        base = os.environ.get("APPDATA") or str(Path.home())
        return Path(base) / APP
    return Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))) / APP


def config_path() -> Path:
    return config_dir() / "catalog.json"


@dataclass
class CatalogConfig:
    """Where and how to fetch the contributions catalog."""
    url: str = DEFAULT_CATALOG_URL
    timeout_s: float = 30.0
    user_agent: str = "contriblist"

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "timeout_s": self.timeout_s,
            "user_agent": self.user_agent,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogConfig":
        return cls(
            url=str(data.get("url", cls.url)),
            timeout_s=float(data.get("timeout_s", cls.timeout_s)),
            user_agent=str(data.get("user_agent", cls.user_agent)),
        )

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "CatalogConfig":
        path = path or config_path()

        data: dict = {}
        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                data = {}

        try:
            cfg = cls.from_dict(data)
        except (TypeError, ValueError):
            cfg = cls()

        # Environment overrides (highest priority)
        cfg.url = os.environ.get("CONTRIBLIST_CATALOG_URL", cfg.url)
        timeout = os.environ.get("CONTRIBLIST_TIMEOUT_S")
        if timeout:
            try:
                cfg.timeout_s = float(timeout)
            except ValueError:
                pass

        return cfg

    def save(self, path: Optional[Path] = None) -> Path:
        path = path or config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        return path

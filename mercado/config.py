"""TOML configuration loader."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

_DEFAULT_DB_PATH = "~/.config/mercado/shopping.db"
_DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
_DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-5-20250929"


@dataclass
class DatabaseConfig:
    path: str = _DEFAULT_DB_PATH


@dataclass
class CameraConfig:
    index: int = 0
    save_dir: str = "/tmp/mercado"


@dataclass
class GeminiConfig:
    api_key: str = ""
    model: str = _DEFAULT_GEMINI_MODEL


@dataclass
class ClaudeConfig:
    api_key: str = ""
    model: str = _DEFAULT_CLAUDE_MODEL


@dataclass
class VisionConfig:
    backend: str = "gemini"


@dataclass
class AssistantConfig:
    backend: str = "gemini"


@dataclass
class AppConfig:
    currency: str = "R$"


@dataclass
class MercadoConfig:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    vision: VisionConfig = field(default_factory=VisionConfig)
    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    app: AppConfig = field(default_factory=AppConfig)


def load_config(path: str | Path | None = None) -> MercadoConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys and the database path can be overridden via environment
    variables when the file leaves them empty.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    dbs = raw.get("database", {})
    cam = raw.get("camera", {})
    vis = raw.get("vision", {})
    ast = raw.get("assistant", {})
    gem = raw.get("gemini", {})
    cld = raw.get("claude", {})
    app = raw.get("app", {})

    # Resolve API keys: config file → environment variable
    gemini_api_key = gem.get("api_key", "") or os.environ.get("GEMINI_API_KEY", "")
    claude_api_key = cld.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )
    db_path = dbs.get("path", "") or os.environ.get(
        "MERCADO_DB_PATH", _DEFAULT_DB_PATH
    )

    return MercadoConfig(
        database=DatabaseConfig(path=db_path),
        camera=CameraConfig(
            index=cam.get("index", 0),
            save_dir=cam.get("save_dir", "/tmp/mercado"),
        ),
        vision=VisionConfig(backend=vis.get("backend", "gemini")),
        assistant=AssistantConfig(backend=ast.get("backend", "gemini")),
        gemini=GeminiConfig(
            api_key=gemini_api_key,
            model=gem.get("model", _DEFAULT_GEMINI_MODEL),
        ),
        claude=ClaudeConfig(
            api_key=claude_api_key,
            model=cld.get("model", _DEFAULT_CLAUDE_MODEL),
        ),
        app=AppConfig(currency=app.get("currency", "R$")),
    )

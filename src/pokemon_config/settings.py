from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_API_BASE_URL = "https://pokeapi.co/api/v2"
DEFAULT_CRIES_BASE_URL = "https://raw.githubusercontent.com/PokeAPI/cries/main/cries/pokemon/latest"


def _find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward until we find pyproject.toml or .git.
    """
    start = start.resolve()
    for p in (start, *start.parents):
        if (p / "pyproject.toml").exists() or (p / ".git").exists():
            return p
    return None


@lru_cache(maxsize=1)
def repo_root() -> Path:
    """Best-effort repository root discovery.

    Order of precedence:
      1) POKEMON_MCP_REPO_ROOT (explicit override)
      2) walk upward from current working directory
      3) walk upward from this module file's directory
    """
    explicit = os.getenv("POKEMON_MCP_REPO_ROOT")
    if explicit:
        p = Path(explicit).expanduser().resolve()
        if not p.is_dir():
            raise RuntimeError(f"POKEMON_MCP_REPO_ROOT does not exist or is not a directory: {p}")
        return p

    cwd = Path.cwd().resolve()
    root = _find_repo_root(cwd)
    if root:
        return root

    here_dir = Path(__file__).resolve().parent
    root = _find_repo_root(here_dir)
    if root:
        return root

    return cwd


@lru_cache(maxsize=1)
def load_env_once() -> Optional[Path]:
    """
    Load dotenv exactly once. Precedence:
      1) POKEMON_MCP_ENV_FILE (explicit path)
      2) repo-root/.env
    """
    explicit = os.getenv("POKEMON_MCP_ENV_FILE")
    candidates = []

    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(repo_root() / ".env")

    for p in candidates:
        p = p.resolve()
        if p.exists() and p.is_file():
            # Do NOT override already-set environment variables
            load_dotenv(dotenv_path=str(p), override=False)
            return p

    return None


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    cries_base_url: str = DEFAULT_CRIES_BASE_URL
    temp_dir: Path = Path("temp")
    # seconds; None waits for the player indefinitely
    player_timeout: float | None = 30.0
    telemetry_dir: Path | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        timeout = _env_float("POKEMON_MCP_PLAYER_TIMEOUT", 30.0)
        telemetry = os.getenv("POKEMON_MCP_TELEMETRY_DIR")
        return cls(
            api_base_url=os.getenv("POKEMON_MCP_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            cries_base_url=os.getenv("POKEMON_MCP_CRIES_BASE_URL", DEFAULT_CRIES_BASE_URL).rstrip("/"),
            temp_dir=Path(os.getenv("POKEMON_MCP_TEMP_DIR", "temp")).expanduser(),
            player_timeout=timeout if timeout > 0 else None,
            telemetry_dir=Path(telemetry).expanduser().resolve() if telemetry else None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Settings snapshot, read from the environment on first use.
    Call get_settings.cache_clear() after changing env vars (tests).
    """
    return Settings.from_env()


def http_timeout() -> tuple[float, float]:
    return (
        _env_float("POKEMON_MCP_HTTP_CONNECT_TIMEOUT", 3.05),
        _env_float("POKEMON_MCP_HTTP_READ_TIMEOUT", 20.0),
    )


def http_retries() -> int:
    return max(_env_int("POKEMON_MCP_HTTP_RETRIES", 0), 0)


def configure_logging() -> None:
    """
    Configure logging explicitly. No import-time side effects.
    Idempotent: if logging is already configured, do nothing.

    Handlers write to stderr; stdout is reserved for the MCP stdio transport.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = os.getenv("POKEMON_MCP_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = os.getenv(
        "POKEMON_MCP_LOG_FORMAT",
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logging.basicConfig(level=level, format=fmt)


def init_runtime(*, configure_logs: bool = True, load_env: bool = True) -> None:
    """
    Call this from entrypoints only (servers, scripts).
    """
    if load_env:
        load_env_once()
    if configure_logs:
        configure_logging()

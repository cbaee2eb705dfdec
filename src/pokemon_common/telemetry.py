from __future__ import annotations

import datetime as _dt
import json
import logging
from pathlib import Path
from typing import Any

from pokemon_common.context import current_corr_id
from pokemon_common.errors import REDACT_TOKEN
from pokemon_config.settings import get_settings

logger = logging.getLogger(__name__)

TELEMETRY_FILE = "mcp-telemetry.jsonl"

_SECRET_KEYS = {"authorization", "auth_bearer", "access_token", "token", "api_key", "apikey"}


def redact_secrets(obj: Any) -> Any:
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if isinstance(k, str) and k.strip().lower() in _SECRET_KEYS:
                out[k] = REDACT_TOKEN
            else:
                out[k] = redact_secrets(v)
        return out
    if isinstance(obj, list):
        return [redact_secrets(x) for x in obj]
    return obj


def telemetry_path(telemetry_file: str = TELEMETRY_FILE) -> Path | None:
    """Target JSONL file, or None when POKEMON_MCP_TELEMETRY_DIR is unset."""
    d = get_settings().telemetry_dir
    if d is None:
        return None
    return d / telemetry_file


def log_event(
    kind: str,
    name: str,
    args: dict | None = None,
    ok: bool = True,
    ms: int = 0,
    *,
    corr_id: str | None = None,
    telemetry_file: str = TELEMETRY_FILE,
) -> None:
    """
    Append one JSONL telemetry record for a tool call.
    """
    p = telemetry_path(telemetry_file)
    if p is None:
        return

    rec = {
        "ts": _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z"),
        "kind": kind,
        "name": name,
        "corr_id": corr_id or current_corr_id(),
        "args": {} if args is None else dict(args),
        "ok": bool(ok),
        "ms": int(ms),
    }

    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("a", encoding="utf-8") as f:
            f.write(json.dumps(redact_secrets(rec), ensure_ascii=False) + "\n")
    except OSError as e:
        # Telemetry must never break a tool call.
        logger.warning("Could not write telemetry to %s: %s", p, e)


"""
Smoke script for the Pokémon MCP server against the live PokéAPI.

It performs:
 1) spawns `python -m pokemon_mcp.server` over stdio
 2) lists tools
 3) calls get_pokemon_stats, get_pokemon_info and get_pokemon_cry for one Pokémon
 4) calls get_pokemon_stats for an unknown name and expects an error envelope

play_pokemon_cry is skipped unless POKEMON_SMOKE_PLAY=1 (it makes noise).
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any

_REPO_ROOT = Path(__file__).resolve().parents[1]


def _pretty(x: Any) -> str:
    if isinstance(x, str):
        s = x.strip()
        if s.startswith("{") or s.startswith("["):
            try:
                return json.dumps(json.loads(s), indent=2, ensure_ascii=False)
            except json.JSONDecodeError:
                return x
        return x
    return json.dumps(x, indent=2, ensure_ascii=False)


def _text(res: Any) -> str:
    content = getattr(res, "content", None) or []
    return getattr(content[0], "text", "") if content else ""


async def smoke() -> bool:
    # Lazy import so the script fails with a clear message outside the dev env
    from mcp import ClientSession
    from mcp.client.stdio import StdioServerParameters, stdio_client

    python_cmd = os.getenv("MCP_PYTHON") or sys.executable
    pokemon = os.getenv("POKEMON_SMOKE_NAME", "pikachu")
    play = os.getenv("POKEMON_SMOKE_PLAY", "0").strip().lower() in {"1", "true", "yes"}

    print(f"[smoke] Repo root: {_REPO_ROOT}")
    print(f"[smoke] Python: {python_cmd}")
    print(f"[smoke] pokemon={pokemon}, play={play}")

    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(_REPO_ROOT / "src"), env.get("PYTHONPATH", "")) if p)
    server = StdioServerParameters(command=python_cmd, args=["-m", "pokemon_mcp.server"], env=env)

    ok = True
    async with stdio_client(server) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()

            tools = await session.list_tools()
            print("\n[smoke] TOOLS:")
            for t in tools.tools:
                print(f" - {t.name}: {t.description}")

            calls = ["get_pokemon_stats", "get_pokemon_info", "get_pokemon_cry"]
            if play:
                calls.append("play_pokemon_cry")

            for name in calls:
                res = await session.call_tool(name, {"pokemon": pokemon})
                print(f"\n[smoke] CALL {name}({pokemon}) isError={res.isError}:")
                print(_pretty(_text(res)))
                if res.isError:
                    ok = False

            res = await session.call_tool("get_pokemon_stats", {"pokemon": "not-a-pokemon"})
            print(f"\n[smoke] CALL get_pokemon_stats(not-a-pokemon) isError={res.isError}:")
            print(_text(res))
            if not res.isError:
                print("[smoke] WARN: unknown Pokémon did not produce an error envelope")
                ok = False

    return ok


async def main() -> int:
    ok = await smoke()
    print("\n[smoke] OK" if ok else "\n[smoke] Completed with warnings")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))

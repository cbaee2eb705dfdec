"""
Cry download and local playback.

This is the only part of the server that writes files or spawns processes.
The cry is streamed into `<temp_dir>/<name>_cry.ogg`, handed to a
platform-selected player, and removed once playback succeeded. When playback
fails the file is kept so the user can play it by hand.

Known limitation: two concurrent calls for the same Pokémon share one file
path and may race on it. Nothing guards against this.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import Any

import requests

from pokemon_common.errors import FetchError, PlaybackError
from pokemon_config.settings import get_settings
from pokemon_mcp.connectors.pokeapi import CRY_FORMAT, cry_url
from pokemon_mcp.core_infrastructure.http_client import HttpClient, default_http_client
from pokemon_mcp.models import PokemonRecord


logger = logging.getLogger(__name__)

STATUS_PLAYED = "playback complete"
STATUS_PLAYBACK_FAILED = "downloaded, playback failed"

_CHUNK_SIZE = 8192


def current_platform() -> str:
    """'win32', 'darwin' or 'linux'; other POSIX platforms are reported as-is."""
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


def ensure_temp_dir(path: Path | str) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p.resolve()


def cry_file_path(temp_dir: Path, name: str, ext: str = CRY_FORMAT) -> Path:
    return temp_dir / f"{name}_cry.{ext}"


def download_cry(url: str, dest: Path, *, client: HttpClient | None = None) -> Path:
    """Stream the asset at `url` into `dest`; a partial file is removed on failure."""
    http = client or default_http_client()
    try:
        # raise inside the with-block so an error response is still closed
        with http.get(url, stream=True, raise_for_status=False) as resp:
            resp.raise_for_status()
            with dest.open("wb") as f:
                for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except (requests.RequestException, OSError) as e:
        dest.unlink(missing_ok=True)
        raise FetchError(e) from e

    logger.debug("Downloaded %s to %s", url, dest)
    return dest


def player_commands(path: Path, platform: str) -> list[list[str]]:
    """Candidate player invocations for `platform`, tried in order."""
    p = str(path)
    if platform == "win32":
        return [["cmd", "/c", "start", "/wait", "", p]]
    if platform == "darwin":
        return [["afplay", p]]
    return [
        ["paplay", p],
        ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet", p],
    ]


def manual_instructions(path: Path, platform: str) -> str:
    if platform == "win32":
        return f'Open "{path}" with Windows Media Player or VLC (any player that supports OGG Vorbis).'
    if platform == "darwin":
        return f'Run `afplay "{path}"` in Terminal, or open the file with VLC or IINA.'
    return (
        f'Install pulseaudio-utils (paplay) or ffmpeg (ffplay), then run `paplay "{path}"`, '
        "or open the file with any audio player that supports OGG Vorbis."
    )


def play_file(path: Path, *, platform: str | None = None, timeout: float | None = None) -> str:
    """Run the first player that succeeds and return its name.

    The player's stdio is detached from ours: stdout carries the MCP transport.

    Raises:
        PlaybackError: no candidate succeeded, or one ran past `timeout`.
    """
    plat = platform or current_platform()
    last_error = "no audio player available"

    for argv in player_commands(path, plat):
        try:
            subprocess.run(
                argv,
                check=True,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=timeout,
            )
            return argv[0]
        except subprocess.TimeoutExpired as e:
            raise PlaybackError(f"{argv[0]} timed out after {timeout:g}s") from e
        except FileNotFoundError:
            last_error = f"{argv[0]} not found"
        except subprocess.CalledProcessError as e:
            last_error = f"{argv[0]} exited with status {e.returncode}"
        except OSError as e:
            last_error = f"{argv[0]} could not be started: {e}"
        logger.info("Audio player failed: %s", last_error)

    raise PlaybackError(last_error)


def play_cry(
    record: PokemonRecord,
    *,
    client: HttpClient | None = None,
    temp_dir: Path | str | None = None,
    platform: str | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Download and play the cry of `record`.

    Download failures raise FetchError. Playback failures do not raise: the
    returned payload reports them and the downloaded file stays on disk.
    """
    settings = get_settings()
    plat = platform or current_platform()
    wait = timeout if timeout is not None else settings.player_timeout

    url = cry_url(record.id)
    directory = ensure_temp_dir(temp_dir or settings.temp_dir)
    dest = cry_file_path(directory, record.name)
    download_cry(url, dest, client=client)

    payload: dict[str, Any] = {
        "name": record.name,
        "id": record.id,
        "platform": plat,
        "file_path": str(dest),
        "cry_url": url,
    }

    try:
        player = play_file(dest, platform=plat, timeout=wait)
    except PlaybackError as e:
        logger.warning("Playback of %s failed, keeping %s: %s", record.name, dest, e)
        payload.update(
            status=STATUS_PLAYBACK_FAILED,
            error=str(e),
            manual_play_instructions=manual_instructions(dest, plat),
        )
        return payload

    dest.unlink(missing_ok=True)
    payload.update(status=STATUS_PLAYED, player=player)
    return payload

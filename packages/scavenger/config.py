"""
Runtime settings for the CLI and web server.

Values come from the environment, after loading a .env file if present.
The engine itself takes everything through constructor arguments and never
reads settings.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv


DEFAULT_STATS_PATH = Path.home() / ".scavenger" / "stats.json"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


@dataclass
class ScavengerSettings:
    stats_path: Path = DEFAULT_STATS_PATH
    log_level: str = "INFO"
    starting_energy: int = 100
    seed: Optional[str] = None
    host: str = "127.0.0.1"
    port: int = 8080
    max_sessions: int = 256


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-integer %s=%r", name, raw)
        return default


def load_settings(env_file: Optional[Union[str, Path]] = None) -> ScavengerSettings:
    """Load settings from the environment (and .env / env_file)."""
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    stats_path = os.environ.get("SCAVENGER_STATS_PATH")
    return ScavengerSettings(
        stats_path=Path(stats_path).expanduser() if stats_path else DEFAULT_STATS_PATH,
        log_level=os.environ.get("SCAVENGER_LOG_LEVEL", "INFO").upper(),
        starting_energy=_int_env("SCAVENGER_STARTING_ENERGY", 100),
        seed=os.environ.get("SCAVENGER_SEED") or None,
        host=os.environ.get("SCAVENGER_HOST", "127.0.0.1"),
        port=_int_env("SCAVENGER_PORT", 8080),
        max_sessions=_int_env("SCAVENGER_MAX_SESSIONS", 256),
    )


def configure_logging(level: Union[str, int] = "INFO") -> None:
    """basicConfig with the project log format."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

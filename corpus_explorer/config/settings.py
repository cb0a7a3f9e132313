"""Central configuration for Corpus Explorer."""

import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def get_app_name() -> str:
    """Get application name."""
    return "Corpus Explorer"


def get_app_version() -> str:
    """Get application version from pyproject.toml."""
    try:
        import tomli
        pyproject_path = PROJECT_ROOT / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            pyproject = tomli.load(f)
            return pyproject.get("project", {}).get("version", "0.1.0")
    except Exception:
        # Fallback version if pyproject.toml cannot be read
        return "0.1.0"


def get_default_output_dir() -> Path:
    """Get default output directory.

    Uses CORPUS_EXPLORER_OUTPUT_DIR when set, otherwise project root / "out".

    Returns:
        Path object to default output directory (created if needed)
    """
    env_dir = os.getenv("CORPUS_EXPLORER_OUTPUT_DIR")
    output_dir = Path(env_dir) if env_dir else PROJECT_ROOT / "out"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def _get_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}: {raw!r}, using {default}")
        return default
    if value < minimum:
        logger.warning(f"{name} must be >= {minimum}, got {value}; using {default}")
        return default
    return value


def get_fetch_delay() -> float:
    """Minimum seconds between two remote requests (default 5)."""
    return _get_float("FETCH_DELAY_SECONDS", 5.0)


def get_fetch_timeout() -> float:
    """Per-request timeout in seconds (default 30)."""
    return _get_float("FETCH_TIMEOUT_SECONDS", 30.0, minimum=1.0)


def get_fetch_retries() -> int:
    """Retries after a failed request (default 1)."""
    return int(_get_float("FETCH_RETRIES", 1))


def get_user_agent() -> str:
    """User-Agent header sent with every request."""
    return os.getenv(
        "CORPUS_EXPLORER_USER_AGENT",
        f"corpus-explorer/{get_app_version()} (educational text analysis)",
    )


def get_log_level() -> int:
    """Log level from CORPUS_EXPLORER_LOG_LEVEL (default WARNING)."""
    name = os.getenv("CORPUS_EXPLORER_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        logger.warning(f"Invalid log level: {name}, using WARNING")
        return logging.WARNING
    return level


def get_data_dir() -> Path:
    """Directory that relative local document paths resolve against.

    Uses CORPUS_EXPLORER_DATA_DIR when set, otherwise the project root, so
    profile paths like data/legal/x.pdf do not depend on the working directory.
    """
    env_dir = os.getenv("CORPUS_EXPLORER_DATA_DIR")
    return Path(env_dir) if env_dir else PROJECT_ROOT


def get_profiles_dir() -> Path:
    """Directory containing profile YAML files (CORPUS_EXPLORER_PROFILES_DIR overrides)."""
    env_dir: Optional[str] = os.getenv("CORPUS_EXPLORER_PROFILES_DIR")
    if env_dir:
        return Path(env_dir)
    return PROJECT_ROOT / "configs" / "profiles"

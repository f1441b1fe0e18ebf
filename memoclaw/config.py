"""Configuration loading for the MemoClaw CLI.

Settings are layered, highest priority first:

1. Environment variables (``MEMOCLAW_URL``, ``MEMOCLAW_PRIVATE_KEY``,
   ``MEMOCLAW_NAMESPACE``, ``MEMOCLAW_TIMEOUT``)
2. ``~/.memoclaw/config.json`` written by ``memoclaw init``
3. ``~/.memoclaw/config`` (YAML) written by ``memoclaw config init``

``MEMOCLAW_HOME`` relocates the whole directory.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from memoclaw.errors import ConfigError
from memoclaw.validation import validate_backend_url

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.memoclaw.com"
DEFAULT_TIMEOUT = 30


def get_memoclaw_home() -> Path:
    """Directory holding config and credentials."""
    override = os.environ.get("MEMOCLAW_HOME")
    if override:
        return Path(override)
    return Path.home() / ".memoclaw"


def get_persisted_config_path() -> Path:
    return get_memoclaw_home() / "config.json"


def get_config_file_path() -> Path:
    return get_memoclaw_home() / "config"


def ensure_config_dir() -> Path:
    home = get_memoclaw_home()
    home.mkdir(parents=True, exist_ok=True)
    return home


def load_persisted_config() -> Dict[str, Any]:
    """Load ``config.json`` (wallet key, address, url)."""
    path = get_persisted_config_path()
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.debug(f"Failed to load persisted config: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def load_config_file() -> Dict[str, Any]:
    """Load the YAML config file (url, namespace, timeout)."""
    path = get_config_file_path()
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        logger.debug(f"Failed to load config file {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def get_api_url() -> str:
    """Resolve the API base URL without a trailing slash."""
    url = (
        os.environ.get("MEMOCLAW_URL")
        or load_persisted_config().get("url")
        or load_config_file().get("url")
        or DEFAULT_API_URL
    )
    if not validate_backend_url(url):
        raise ConfigError(
            f"Refusing to use API url {url}. Use https:// or http://localhost for development."
        )
    return url.rstrip("/")


def get_private_key() -> Optional[str]:
    return os.environ.get("MEMOCLAW_PRIVATE_KEY") or load_persisted_config().get("privateKey")


def apply_config_defaults(args) -> None:
    """Fill ``namespace`` and ``timeout`` from env/config file when not given.

    Must run before the output configuration is built.
    """
    file_config = load_config_file()

    namespace = os.environ.get("MEMOCLAW_NAMESPACE") or file_config.get("namespace")
    if namespace:
        args.set_default("namespace", str(namespace))

    timeout = os.environ.get("MEMOCLAW_TIMEOUT") or file_config.get("timeout")
    if timeout:
        args.set_default("timeout", str(timeout))


def mask_secret(value: Optional[str]) -> str:
    if not value:
        return "(not set)"
    return f"{value[:6]}…{value[-4:]}"

from __future__ import annotations

import json
import logging
from typing import Any

from result import Err, Ok, Result

from testignore.config.defaults import default_config
from testignore.config.schema import CONFIG_KEYS, AppConfig, ConfigValueError, from_dict
from testignore.services.fs import DEFAULT_FS, FileSystem

logger = logging.getLogger(__name__)

CONFIG_PATH = "~/.config/testignore/config.json"


def _read_payload(resolved: str, fs: FileSystem) -> Result[dict[str, Any], str]:
    try:
        text = fs.read_text(resolved)
    except (OSError, UnicodeDecodeError) as exc:
        return Err(f"Cannot read config {resolved}: {exc}.")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        return Err(f"Config {resolved} is not valid JSON (line {exc.lineno}, column {exc.colno}): {exc.msg}.")
    if not isinstance(payload, dict):
        return Err(f"Config {resolved} must be a JSON object, not {type(payload).__name__}.")
    return Ok(payload)


def load_config(path: str | None = None, fs: FileSystem = DEFAULT_FS) -> Result[AppConfig, str]:
    """Load the JSON config, or defaults when no config file exists.

    Aliases and ``knownTags`` are checked against the manifest tag grammar so
    that a config cannot introduce tags no manifest line could ever spell.
    """
    resolved = path or fs.expanduser(CONFIG_PATH)
    if not fs.exists(resolved):
        logger.debug("No config at %s, using defaults", resolved)
        return Ok(default_config())

    payload = _read_payload(resolved, fs)
    if isinstance(payload, Err):
        return payload
    data = payload.unwrap()

    unknown = sorted(set(data) - CONFIG_KEYS)
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", resolved, ", ".join(unknown))

    try:
        return Ok(from_dict(data, default_config()))
    except ConfigValueError as exc:
        return Err(f"Invalid config {resolved}: {exc}.")

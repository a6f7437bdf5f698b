#!/usr/bin/env python3
"""
Asana CLI Configuration

Builds the explicit Config value handed to AsanaClient. Values come from the
process environment first, then from a single .env file: either the one given
with --config, or the first one found in the default locations.

Environment Variables:
    ASANA_TOKEN: Personal Access Token (required)
    ASANA_WORKSPACE: Workspace GID (required by most commands)
    ASANA_TIMEOUT: Request timeout in seconds (optional, default: no timeout)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from dotenv import dotenv_values

from .errors import AsanaConfigError

# Configure logging
logger = logging.getLogger(__name__)

TOKEN_URL = "https://app.asana.com/0/my-apps"


@dataclass(frozen=True)
class Config:
    """Credentials and settings for one CLI invocation."""

    token: str
    workspace: str = ""
    timeout: Optional[float] = None

    def __repr__(self) -> str:
        return f"Config(token='***', workspace={self.workspace!r}, timeout={self.timeout!r})"


def config_locations() -> List[Path]:
    """
    Return the .env locations checked when no --config file is given.

    Checked in order of priority, first found wins:
        1. .env in the current directory
        2. ~/.config/asana-cli/.env
    """
    locations = [Path(".env")]
    try:
        locations.append(Path.home() / ".config" / "asana-cli" / ".env")
    except RuntimeError:
        # No resolvable home directory
        pass
    return locations


def config_help() -> str:
    """Human-readable description of where configuration comes from."""
    lines = [
        "Configuration can be provided via:",
        "  1. Environment variables (ASANA_TOKEN, ASANA_WORKSPACE)",
        "  2. A .env file in one of these locations:",
    ]
    lines.extend(f"     - {loc}" for loc in config_locations())
    lines.extend([
        "  3. A custom config file via --config flag",
        "",
        "Example .env file:",
        "  ASANA_TOKEN=your_personal_access_token",
        "  ASANA_WORKSPACE=your_workspace_gid",
        "",
        f"Get your token at: {TOKEN_URL}",
    ])
    return "\n".join(lines)


def _read_config_file(config_file: Optional[str]) -> Dict[str, Optional[str]]:
    if config_file:
        path = Path(config_file)
        if not path.is_file():
            raise AsanaConfigError(f"failed to load config file {config_file}: file not found")
        try:
            values = dotenv_values(path)
        except OSError as e:
            raise AsanaConfigError(f"failed to load config file {config_file}: {e}") from e
        logger.debug(f"Loaded config file {path}")
        return dict(values)

    for location in config_locations():
        if location.is_file():
            try:
                values = dotenv_values(location)
            except OSError as e:
                # Unreadable default files are skipped; the environment still applies
                logger.debug(f"Skipping config file {location}: {e}")
                return {}
            logger.debug(f"Loaded config file {location}")
            return dict(values)

    return {}


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise AsanaConfigError(f"ASANA_TIMEOUT must be a number of seconds, got: {raw!r}")
    if timeout <= 0:
        raise AsanaConfigError(f"ASANA_TIMEOUT must be positive, got: {raw!r}")
    return timeout


def load_config(
    config_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    require_workspace: bool = True,
) -> Config:
    """
    Load configuration from the environment and an optional .env file.

    Environment variables always take precedence over file values. The
    process environment is read but never modified.

    Args:
        config_file: Explicit .env file to load instead of the default locations
        environ: Environment mapping (defaults to os.environ)
        require_workspace: Whether a missing ASANA_WORKSPACE is an error

    Returns:
        Config instance

    Raises:
        AsanaConfigError: If a required value is missing or a file cannot be read
    """
    if environ is None:
        environ = os.environ

    file_values = _read_config_file(config_file)

    def lookup(name: str) -> str:
        return (environ.get(name) or file_values.get(name) or "").strip()

    token = lookup("ASANA_TOKEN")
    if not token:
        raise AsanaConfigError(f"ASANA_TOKEN not set.\n\n{config_help()}")

    workspace = lookup("ASANA_WORKSPACE")
    if require_workspace and not workspace:
        raise AsanaConfigError(f"ASANA_WORKSPACE not set.\n\n{config_help()}")

    return Config(
        token=token,
        workspace=workspace,
        timeout=_parse_timeout(lookup("ASANA_TIMEOUT")),
    )

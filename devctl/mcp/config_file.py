"""
MCP client config file — read, back up, atomically rewrite.

Every write first copies the current file to
``<file>.backup.<YYYYmmdd_HHMMSS>`` and then replaces it through a
temp file in the same directory.
"""

from __future__ import annotations

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from devctl.core.persistence.config_file import atomic_write_text
from devctl.mcp.errors import McpConfigError
from devctl.mcp.models import McpConfig

logger = logging.getLogger(__name__)


def read_mcp_config(path: Path) -> McpConfig:
    """Parse a client config file; a missing file is an empty config.

    Raises:
        McpConfigError: unreadable or malformed file.
    """
    if not path.is_file():
        return McpConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise McpConfigError(f"failed to read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise McpConfigError(f"failed to parse config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise McpConfigError(f"expected a JSON object in {path}")
    if data.get("mcpServers") is None:
        data.pop("mcpServers", None)

    try:
        return McpConfig.model_validate(data)
    except ValidationError as e:
        raise McpConfigError(f"invalid MCP config in {path}: {e}") from e


def write_mcp_config(path: Path, config: McpConfig) -> Path | None:
    """Back up the existing file, then atomically write ``config``.

    Returns:
        The backup path, or None when there was nothing to back up.

    Raises:
        McpConfigError: the backup or the write failed.
    """
    content = json.dumps(config.to_json(), indent=2, ensure_ascii=False) + "\n"

    try:
        backup = backup_file(path)
        atomic_write_text(path, content)
    except OSError as e:
        raise McpConfigError(f"failed to write config file {path}: {e}") from e

    logger.debug("MCP config written to %s", path)
    return backup


def backup_file(path: Path) -> Path | None:
    if not path.is_file():
        return None
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup = path.with_name(f"{path.name}.backup.{stamp}")
    shutil.copy2(path, backup)
    logger.info("Backed up %s to %s", path, backup)
    return backup

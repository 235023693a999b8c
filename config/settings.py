"""Project configuration settings.

Constants shared by the copier, the config store and the CLI.
"""

from pathlib import Path
import logging
import os

# Targets
DEFAULT_TARGET_DIR = Path("/media/pi/piBackup")
CONFIG_RELATIVE_PATH = Path(".config") / "backup_tool.conf"

# Backup layout
BACKUP_DIR_FORMAT = "Backup %Y-%m-%d %H-%M-%S"
DIR_MODE = 0o755
COPY_BUFFER_SIZE = 4096
FALLBACK_PATH_MAX = 4096  # used when pathconf() gives nothing

# Cosmetic pacing of log output (seconds)
PACE_RANGE = (0.05, 0.5)

# Logging
def resolve_log_level(value) -> str:
	"""Return `value` as a known logging level name, or "INFO"."""
	name = (value or "").strip().upper()
	return name if isinstance(logging.getLevelName(name), int) else "INFO"

LOG_LEVEL = resolve_log_level(os.environ.get("BACKUP_TOOL_LOG_LEVEL"))

__all__ = [
	'DEFAULT_TARGET_DIR','CONFIG_RELATIVE_PATH','BACKUP_DIR_FORMAT','DIR_MODE',
	'COPY_BUFFER_SIZE','FALLBACK_PATH_MAX','PACE_RANGE','LOG_LEVEL','resolve_log_level'
]

"""Configuration settings and constants for backup-tool.

Exposes the constants from `config.settings` at package level so that
`from config import DEFAULT_TARGET_DIR` works as well. Keep the values
themselves in `settings.py`.
"""

from .settings import (
	DEFAULT_TARGET_DIR, CONFIG_RELATIVE_PATH, BACKUP_DIR_FORMAT, DIR_MODE,
	COPY_BUFFER_SIZE, FALLBACK_PATH_MAX, PACE_RANGE, LOG_LEVEL
)

__all__ = [
	'DEFAULT_TARGET_DIR', 'CONFIG_RELATIVE_PATH', 'BACKUP_DIR_FORMAT', 'DIR_MODE',
	'COPY_BUFFER_SIZE', 'FALLBACK_PATH_MAX', 'PACE_RANGE', 'LOG_LEVEL'
]

"""Logging helpers: leveled, coloured lines on stderr via click."""
from __future__ import annotations
import logging, random, time
from typing import Callable, Optional
import click
from config.settings import PACE_RANGE

LEVEL_LABELS = {logging.CRITICAL: 'FATAL'}
LEVEL_COLORS = {
	logging.DEBUG: 'bright_black',
	logging.INFO: 'bright_black',
	logging.WARNING: 'yellow',
	logging.ERROR: 'red',
	logging.CRITICAL: 'red',
}

def no_delay() -> None:
	pass

def random_delay() -> None:
	"""Sleep a random moment so long runs scroll at a readable pace."""
	time.sleep(random.uniform(*PACE_RANGE))

class LevelFormatter(logging.Formatter):
	def __init__(self):
		super().__init__('[%(levelname)s] %(message)s')

	def format(self, record: logging.LogRecord) -> str:
		label = LEVEL_LABELS.get(record.levelno, record.levelname)
		text = super().format(record)
		return text.replace(f'[{record.levelname}]', f'[{label}]', 1)

class ClickHandler(logging.Handler):
	"""Write records to stderr with click, resolving the stream at emit time."""

	def __init__(self, pace: Optional[Callable[[], None]] = None):
		super().__init__()
		self.pace = pace or no_delay
		self.setFormatter(LevelFormatter())

	def emit(self, record: logging.LogRecord) -> None:
		try:
			# undecodable filename bytes arrive as surrogates
			msg = self.format(record).encode('utf-8', 'surrogateescape').decode('utf-8', 'replace')
			self.pace()
			click.secho(msg, fg=LEVEL_COLORS.get(record.levelno), err=True)
		except Exception:
			self.handleError(record)

def setup_logging(level: str | int = logging.INFO, pace: Optional[Callable[[], None]] = None) -> ClickHandler:
	"""Install a single ClickHandler on the root logger and set its level."""
	root = logging.getLogger()
	for h in list(root.handlers):
		if isinstance(h, ClickHandler):
			root.removeHandler(h)
	handler = ClickHandler(pace)
	root.addHandler(handler)
	root.setLevel(level)
	return handler

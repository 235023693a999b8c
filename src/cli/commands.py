"""CLI implemented with click.

`backup-tool -t DIR` stores a new default target; `backup-tool SOURCE` copies
SOURCE into a timestamped directory under the stored target.
"""
from __future__ import annotations
import logging, click
from pathlib import Path
from config.settings import LOG_LEVEL
from src.lib.log import setup_logging, random_delay
from src.lib.utils import (
	BackupError, InvalidTarget, read_default, write_default, run_backup
)

log = logging.getLogger(__name__)

def _resolve_target(raw: str) -> Path:
	try:
		target = Path(raw).expanduser().resolve(strict=True)
	except (OSError, RuntimeError) as e:
		raise InvalidTarget(f'Invalid target directory: {raw} ({getattr(e, "strerror", None) or e})') from e
	if not target.is_dir():
		log.warning(f'Target is not a directory: {target}')
	return target

def _fatal(err: Exception):
	log.critical(f'Program terminating due to error: {err}')
	raise SystemExit(1)

@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('-t', '--target', 'target_dir', metavar='TARGET_DIR', help='Store TARGET_DIR as the default backup location and exit.')
@click.option('-v', '--verbose', is_flag=True, help='Show debug output.')
@click.option('--pace', is_flag=True, help='Pause briefly before each log line.')
@click.argument('source_dir', required=False)
def cli(target_dir, verbose, pace, source_dir):
	"""Copy SOURCE_DIR into a timestamped folder under the default target."""
	setup_logging(logging.DEBUG if verbose else LOG_LEVEL, random_delay if pace else None)
	log.debug('Starting backup tool.')
	home = Path.home()

	if target_dir is not None:
		log.debug(f'-t option provided with argument: {target_dir}')
		try:
			target = _resolve_target(target_dir)
		except InvalidTarget as e:
			_fatal(e)
		log.debug(f'Updating default backup directory to: {target}')
		if not write_default(home, target):
			raise SystemExit(1)
		click.echo(f'Updated default backup directory to: {click.format_filename(target)}')
		return

	log.debug('Reading default backup directory.')
	target = read_default(home)
	if source_dir is None:
		log.error('Expected source_dir after options.')
		raise click.UsageError('Missing argument SOURCE_DIR.')

	source = Path(source_dir)
	def announce(backup_dir: Path):
		click.echo(f"Backing up '{click.format_filename(source)}' to '{click.format_filename(backup_dir)}'")

	try:
		_backup_dir, report = run_backup(source, target, announce=announce)
	except BackupError as e:
		_fatal(e)
	click.echo(report.summary())
	if report.ok:
		log.debug('Backup process completed successfully.')
		click.echo('Backup completed successfully!')
	else:
		log.warning(f'{report.failed} entries could not be copied.')
		click.echo('Backup completed with errors.')

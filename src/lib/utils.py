"""Utility layer: config store, timestamped naming and the tree copier.

The copier never raises for a single entry: failures are logged and counted
in a CopyReport so one unreadable file does not stop the rest of the tree.
Only problems with the backup as a whole raise BackupError.
"""
from __future__ import annotations
import os, stat, shutil, logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple
from config.settings import (
	DEFAULT_TARGET_DIR, CONFIG_RELATIVE_PATH, BACKUP_DIR_FORMAT, DIR_MODE,
	COPY_BUFFER_SIZE, FALLBACK_PATH_MAX
)

log = logging.getLogger(__name__)

class BackupError(Exception): ...
class InvalidSource(BackupError): ...
class InvalidTarget(BackupError): ...
class PathTooLong(BackupError): ...


# --- Config store ---

def config_path(home: Path) -> Path:
	return Path(home) / CONFIG_RELATIVE_PATH

def read_default(home: Path) -> Path:
	"""Return the stored default target, or DEFAULT_TARGET_DIR if there is none."""
	path = config_path(home)
	log.debug(f'Reading config file: {path}')
	try:
		with open(path, 'r', encoding='utf-8', errors='surrogateescape') as fh:
			line = fh.readline().rstrip('\n')
	except OSError as e:
		log.debug(f'Cannot read {path}: {e}')
		line = ''
	if line:
		log.debug(f'Default target directory read: {line}')
		return Path(line)
	log.warning('Config file not found or empty. Using default target directory.')
	return DEFAULT_TARGET_DIR

def write_default(home: Path, target: Path) -> bool:
	"""Persist `target` as the new default. Returns False (logged) on failure."""
	path = config_path(home)
	log.debug(f'Ensuring config directory exists: {path.parent}')
	try:
		path.parent.mkdir(mode=DIR_MODE, parents=True)
	except FileExistsError:
		log.debug('Config directory already exists.')
	except OSError as e:
		log.critical(f'Failed to create config directory {path.parent}: {e}')
		return False
	log.debug(f'Writing new default directory to config file: {path}')
	try:
		with open(path, 'w', encoding='utf-8', errors='surrogateescape') as fh:
			fh.write(f'{target}\n')
	except OSError as e:
		log.critical(f'Failed to update default backup directory: {e}')
		return False
	log.debug('Config file updated successfully.')
	return True


# --- Timestamped naming ---

def _path_max(base: Path) -> int:
	try:
		limit = os.pathconf(base, 'PC_PATH_MAX')
	except (OSError, ValueError, AttributeError):
		limit = -1
	return limit if limit and limit > 0 else FALLBACK_PATH_MAX

def timestamped_dir(base: Path, now: Optional[datetime] = None) -> Path:
	now = now or datetime.now()
	try:
		name = now.strftime(BACKUP_DIR_FORMAT)
	except (ValueError, OverflowError) as e:
		raise BackupError(f'Failed to format timestamp: {e}') from e
	target = Path(base) / name
	limit = _path_max(Path(base))
	if len(os.fsencode(str(target))) >= limit:
		raise PathTooLong(f'Path is too long ({limit} bytes max): {target}')
	return target


# --- Copier ---

@dataclass
class CopyReport:
	directories: int = 0
	files: int = 0
	skipped: int = 0
	failed: int = 0

	@property
	def ok(self) -> bool:
		return self.failed == 0

	def summary(self) -> str:
		return f'Copied {self.files} files in {self.directories} directories ({self.skipped} skipped, {self.failed} failed)'

def copy_file(src: Path, dst: Path, report: Optional[CopyReport] = None) -> bool:
	"""Copy one regular file byte for byte, then its permission bits."""
	report = report if report is not None else CopyReport()
	try:
		fsrc = open(src, 'rb')
	except OSError as e:
		log.error(f'Could not open source file: {src} ({e.strerror})')
		report.failed += 1
		return False
	with fsrc:
		log.info(f'Opened source file: {src}')
		try:
			fdst = open(dst, 'wb')
		except OSError as e:
			log.error(f'Could not open destination file: {dst} ({e.strerror})')
			report.failed += 1
			return False
		with fdst:
			log.info(f'Created destination file: {dst}')
			try:
				shutil.copyfileobj(fsrc, fdst, COPY_BUFFER_SIZE)
			except OSError as e:
				log.error(f'Write error occurred while copying file: {src} -> {dst} ({e.strerror})')
				report.failed += 1
				return False
	log.info(f'File copy completed: {src} -> {dst}')
	try:
		os.chmod(dst, stat.S_IMODE(os.stat(src).st_mode))
	except OSError as e:
		log.warning(f'Permissions not set correctly for: {dst} ({e.strerror})')
		report.failed += 1
		return False
	log.info(f'Permissions set successfully for: {dst}')
	report.files += 1
	return True

def _copy_level(src: Path, dst: Path, report: CopyReport) -> List[Tuple[Path, Path]]:
	"""Copy the files of one directory; return its subdirectories still to visit."""
	subdirs: List[Tuple[Path, Path]] = []
	try:
		it = os.scandir(src)
	except OSError as e:
		log.error(f'Could not open directory: {src} ({e.strerror})')
		report.failed += 1
		return subdirs
	with it:
		log.info(f'Opened source directory: {src}')
		try:
			dst.mkdir(mode=DIR_MODE)
		except FileExistsError:
			if not dst.is_dir():
				log.error(f'Could not create destination directory: {dst} (not a directory)')
				report.failed += 1
				return subdirs
		except OSError as e:
			log.error(f'Could not create destination directory: {dst} ({e.strerror})')
			report.failed += 1
			return subdirs
		log.info(f'Destination directory created or already exists: {dst}')
		report.directories += 1
		for entry in it:
			src_path = Path(entry.path)
			dst_path = dst / entry.name
			try:
				mode = entry.stat(follow_symlinks=False).st_mode
			except OSError as e:
				log.warning(f'Could not stat entry: {src_path} ({e.strerror})')
				report.failed += 1
				continue
			if stat.S_ISDIR(mode):
				log.info(f'Found directory: {src_path}')
				subdirs.append((src_path, dst_path))
			elif stat.S_ISREG(mode):
				log.info(f'Found file: {src_path}')
				copy_file(src_path, dst_path, report)
			else:
				log.warning(f'Skipped unknown entry type: {src_path}')
				report.skipped += 1
	log.info(f'Finished processing directory: {src}')
	return subdirs

def copy_tree(src: Path, dst: Path, report: Optional[CopyReport] = None) -> CopyReport:
	"""Copy directories and regular files from `src` into `dst`.

	Entries are inspected without following symlinks; anything that is not a
	directory or a regular file is skipped with a warning. The walk keeps its
	own stack, so tree depth is bounded by the filesystem, not the interpreter.
	"""
	report = report if report is not None else CopyReport()
	pending = [(Path(src), Path(dst))]
	while pending:
		src_dir, dst_dir = pending.pop()
		pending.extend(reversed(_copy_level(src_dir, dst_dir, report)))
	return report

# --- Pipeline ---

def prepare_backup(source: Path, target: Path, now: Optional[datetime] = None) -> Path:
	"""Validate `source` and create the timestamped directory under `target`."""
	source = Path(source)
	log.debug(f'Validating source directory: {source}')
	if not source.is_dir():
		reason = 'not a directory' if source.exists() else 'no such directory'
		raise InvalidSource(f'Invalid source directory: {source} ({reason})')
	log.debug(f'Creating timestamped backup directory in: {target}')
	backup_dir = timestamped_dir(target, now)
	try:
		backup_dir.mkdir(mode=DIR_MODE)
	except OSError as e:
		raise BackupError(f'Failed to create backup directory: {backup_dir} ({e.strerror})') from e
	return backup_dir

def run_backup(source: Path, target: Path, now: Optional[datetime] = None,
		announce: Optional[Callable[[Path], None]] = None) -> Tuple[Path, CopyReport]:
	"""Copy `source` into a fresh timestamped directory under `target`.

	`announce` is called with the new directory once it exists, before any
	file is copied.
	"""
	backup_dir = prepare_backup(source, target, now)
	if announce is not None:
		announce(backup_dir)
	log.debug('Starting backup process.')
	report = copy_tree(source, backup_dir)
	log.debug('Backup process completed.')
	return backup_dir, report

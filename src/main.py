"""Console entry point for backup-tool.

Argument handling lives in src.cli.commands; this only fixes the program
name shown in usage messages.
"""
from __future__ import annotations
from src.cli.commands import cli

PROG_NAME = 'backup-tool'

def main(argv=None):
	cli.main(args=argv, prog_name=PROG_NAME)

if __name__ == '__main__':  # pragma: no cover
	main()

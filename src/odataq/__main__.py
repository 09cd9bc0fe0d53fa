"""Entry point for `python -m odataq`."""

from odataq import cli


cli.main()

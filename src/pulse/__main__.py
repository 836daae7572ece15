"""Allow running Pulse as ``python -m pulse``."""

from pulse.cli.main import cli

if __name__ == "__main__":
    cli()

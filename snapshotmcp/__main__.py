"""Allow `python -m snapshotmcp`."""

from snapshotmcp.cli.commands import app

if __name__ == "__main__":
    app()

"""Allow running tarstream with ``python -m tarstream``."""

from tarstream.cli import app

if __name__ == "__main__":
    app()

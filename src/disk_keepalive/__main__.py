"""Entry point for ``python -m disk_keepalive``."""

from .cli import app


if __name__ == "__main__":
    app()

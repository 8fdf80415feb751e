"""
Entry point for ``python -m weekclock``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()

"""
Convenience entry point for running eventslots directly.

Usage: python -m eventslots [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()

"""Entry point for running spintable as a module.

This allows running the demos and text utilities with:
    python -m spintable [COMMAND] [OPTIONS]
"""

from spintable.cli import app

if __name__ == "__main__":
    app()

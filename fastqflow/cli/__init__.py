"""CLI package

Exposes `main` so `fastqflow.cli:main` works as an entry point alongside
`fastqflow.cli.cli:main`.
"""

from .cli import main

__all__ = ["main"]

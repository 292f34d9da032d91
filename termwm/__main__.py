"""Entry point for ``python -m termwm``."""

from .cli import cli

if __name__ == '__main__':
    cli()

"""User-facing output helpers.

All human-readable output goes to stderr so stdout stays clean for
machine-readable results.
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Echo a message to stderr."""
    click.echo(message, nl=nl, err=True)

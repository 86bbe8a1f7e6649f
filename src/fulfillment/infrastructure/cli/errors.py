"""Translate domain errors into click errors with distinct exit codes."""

from __future__ import annotations

import click

from fulfillment.domain.exceptions import DomainException


def to_click_error(exc: DomainException) -> click.ClickException:
    error = click.ClickException(str(exc))
    error.exit_code = exc.exit_code
    return error

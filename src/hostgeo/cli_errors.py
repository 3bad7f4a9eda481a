"""Turn exceptions raised by CLI commands into messages and exit codes."""

from __future__ import annotations

import logging
import sys
import traceback
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import click

from .errors import GeoIPError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Standard exit status for SIGINT
INTERRUPTED_EXIT_CODE = 130


def format_error_message(error: BaseException, context: Optional[str] = None) -> str:
    """One-line description of ``error``, prefixed with the operation that failed."""
    prefix = f"❌ {context}: " if context else "❌ "
    detail = str(error)
    return f"{prefix}{type(error).__name__}" + (f" - {detail}" if detail else "")


def handle_cli_errors(context: str = "") -> Callable[[F], F]:
    """
    Decorator for click commands.

    GeoIPError exits with the error's own exit code, Ctrl+C exits with 130 and
    anything else is reported with its traceback and exits with 1. Click's own
    exits pass through untouched.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except (click.exceptions.Exit, click.ClickException):
                raise
            except KeyboardInterrupt:
                click.echo("\n⚠️  Operation cancelled by user", err=True)
                sys.exit(INTERRUPTED_EXIT_CODE)
            except GeoIPError as e:
                message = format_error_message(e, context or e.context)
                click.echo(message, err=True)
                logger.debug(message, exc_info=True)
                sys.exit(e.exit_code)
            except Exception as e:
                click.echo(format_error_message(e, context or "Unexpected error"), err=True)
                click.echo(traceback.format_exc(), err=True)
                sys.exit(1)

        return wrapper  # type: ignore[return-value]

    return decorator

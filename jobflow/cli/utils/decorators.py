"""Decorators for CLI error handling and consistent output formatting."""

from collections.abc import Callable
from functools import wraps

import typer

from jobflow.models import JobflowError


def handle_cli_errors(error_message: str) -> Callable:
    """Decorator turning jobflow errors into a formatted message and exit code 2.

    The error is printed as JSON or rich text depending on the context's
    json_mode. ``typer.Exit`` raised by the command passes through untouched.

    Args:
        error_message: Prefix for the printed message

    Example:
        ```python
        @handle_cli_errors("Cannot authorize transition")
        def authorize_command(ctx: typer.Context, ...):
            ...
        ```
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            # Standard Typer pattern: context is the first argument
            ctx = args[0] if args else kwargs.get("ctx")
            try:
                return func(*args, **kwargs)
            except typer.Exit:
                raise
            except JobflowError as e:
                if ctx is None or ctx.obj is None:
                    raise
                ctx.obj.fail(f"{error_message}: {e}")

        return wrapper

    return decorator

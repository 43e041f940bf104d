"""Uniform failure reporting for filesystem operations.

Every operation signals failure by returning an OpResult built here
rather than raising. Failures are logged at debug level only; the CLI
decides what to show the user.
"""

import logging

from fsops.filesystem.models import ErrorKind, OpResult

logger = logging.getLogger(__name__)


def fail(
    kind: ErrorKind,
    message: str,
    *,
    path: str,
    failed_path: str | None = None,
    cause: str | None = None,
) -> OpResult:
    """Record a failure and return the corresponding result.

    Args:
        kind: Failure classification.
        message: Human-readable message naming the offending path(s).
        path: Path the operation was requested for.
        failed_path: Path that actually failed. Defaults to ``path``.
        cause: Underlying error text, e.g. ``str(OSError)``.

    Returns:
        OpResult with ``success=False``.
    """
    logger.debug("%s: %s (cause: %s)", kind.value, message, cause or "-")
    return OpResult(
        path=path,
        success=False,
        error_kind=kind,
        error=message,
        failed_path=failed_path or path,
        cause=cause,
    )


def wrap(kind: ErrorKind, message: str, *, path: str, inner: OpResult) -> OpResult:
    """Collapse a nested failure into a top-level error kind.

    The inner result's failed path and cause are carried over so the
    caller can still see which entry broke the recursion.
    """
    return fail(
        kind,
        message,
        path=path,
        failed_path=inner.failed_path,
        cause=inner.cause or inner.error,
    )

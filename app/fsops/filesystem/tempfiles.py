"""Temporary file and directory registry.

A TempRegistry owns every temporary path created through it (or handed
to it) and removes them all exactly once: when it is drained
explicitly, when its ``with`` block exits, or at interpreter exit via
an ``atexit`` hook installed on first registration.

State machine:
    EMPTY --register--> ARMED --cleanup_all--> DRAINED (terminal)
"""

from __future__ import annotations

import atexit
import logging
import os
import tempfile
import time
from enum import Enum
from typing import TYPE_CHECKING

from fsops.filesystem.errors import fail
from fsops.filesystem.models import ErrorKind, OpResult
from fsops.filesystem.transfer import delete_tree

if TYPE_CHECKING:
    from types import TracebackType

    from fsops.core.config import Options

logger = logging.getLogger(__name__)

TEMP_PREFIX = "fsops_"


class RegistryState(str, Enum):
    """Lifecycle state of a TempRegistry."""

    EMPTY = "empty"
    ARMED = "armed"
    DRAINED = "drained"


class TempRegistry:
    """Registry of temporary paths removed when the process finishes.

    Construct one at the program entry point and pass it to whatever
    needs temporary storage. Draining is idempotent: only the first
    call to :meth:`cleanup_all` removes anything.

    Attributes:
        state: Current lifecycle state.
    """

    def __init__(self, options: Options | None = None) -> None:
        """Initialize an empty registry.

        Args:
            options: Option lookup used to find the ``tmp_dir`` setting.
        """
        self._options = options
        self._paths: list[str] = []
        self.state = RegistryState.EMPTY

    def __enter__(self) -> TempRegistry:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup_all()

    @property
    def registered(self) -> tuple[str, ...]:
        """Paths registered so far, in registration order."""
        return tuple(self._paths)

    def register(self, path: str | os.PathLike[str]) -> None:
        """Register a path for deletion when the registry is drained.

        The first registration installs the exit hook.

        Raises:
            RuntimeError: If the registry has already been drained.
        """
        if self.state == RegistryState.DRAINED:
            msg = f"Cannot register {os.fspath(path)}: temp registry already drained"
            raise RuntimeError(msg)

        if self.state == RegistryState.EMPTY:
            atexit.register(self.cleanup_all)
            self.state = RegistryState.ARMED

        self._paths.append(os.fspath(path))

    def cleanup_all(self) -> list[OpResult]:
        """Delete every registered path that still exists.

        Directories are force-deleted recursively; files have read-only
        protection cleared and are unlinked. Paths already removed by
        someone else are skipped. Failures are logged and do not stop
        the remaining deletions.

        Returns:
            One OpResult per registered path, or an empty list if the
            registry was already drained.
        """
        if self.state == RegistryState.DRAINED:
            return []

        was_armed = self.state == RegistryState.ARMED
        self.state = RegistryState.DRAINED
        if was_armed:
            atexit.unregister(self.cleanup_all)

        results = [self._remove(path) for path in self._paths]
        failed = [r for r in results if not r.success]
        if failed:
            logger.warning("Could not remove %d temporary path(s)", len(failed))
        return results

    def find_tmp(self) -> str:
        """Return the base directory for temporary files.

        Uses the ``tmp_dir`` option when set, otherwise the system
        temporary directory.
        """
        if self._options is not None:
            configured = self._options.get_option("tmp_dir")
            if configured:
                return os.fspath(configured)
        return tempfile.gettempdir()

    def tempdir(self) -> str:
        """Create and register a unique temporary directory.

        Raises:
            OSError: If the directory cannot be created under find_tmp().
        """
        prefix = f"{TEMP_PREFIX}tmp_{int(time.time())}_"
        path = tempfile.mkdtemp(prefix=prefix, dir=self.find_tmp())
        self.register(path)
        return path

    def tempnam(
        self,
        prefix: str = TEMP_PREFIX,
        tmp_dir: str | None = None,
        suffix: str = "",
    ) -> str:
        """Create and register a unique temporary file name.

        An empty file is created to reserve the name. When ``suffix`` is
        given, both the reserved name and the suffixed name are
        registered, and the suffixed name is returned.

        Returns:
            Path of the temporary file (not created if suffixed).

        Raises:
            OSError: If the file cannot be created.
        """
        fd, path = tempfile.mkstemp(prefix=prefix, dir=tmp_dir or self.find_tmp())
        os.close(fd)
        self.register(path)
        if suffix:
            path = path + suffix
            self.register(path)
        return path

    def save_data_to_temp_file(self, data: str | bytes, suffix: str = "") -> str:
        """Write ``data`` to a new registered temporary file.

        Returns:
            Path of the written file.
        """
        path = self.tempnam(suffix=suffix)
        mode = "wb" if isinstance(data, bytes) else "w"
        with open(path, mode) as f:
            f.write(data)
        return path

    def _remove(self, path: str) -> OpResult:
        if not os.path.lexists(path):
            return OpResult.ok(path)

        if os.path.isdir(path) and not os.path.islink(path):
            result = delete_tree(path, force=True)
            if not result.success:
                logger.warning("Could not remove temporary directory %s: %s", path, result.cause)
            return result

        try:
            if not os.path.islink(path):
                os.chmod(path, 0o777)
            os.unlink(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove temporary file %s: %s", path, e)
            return fail(
                ErrorKind.DELETE_FAILURE,
                f"Unable to delete {path}.",
                path=path,
                cause=str(e),
            )
        return OpResult.ok(path)

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional

from dukan.domain.errors import AppError, OperationBusyError

log = logging.getLogger("dukan.ai")


@dataclass(frozen=True)
class TaskResult:
    value: Any = None
    error: Optional[AppError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AiTaskRunner:
    """Runs AI assist calls off the caller's thread.

    Only one call per operation name may be in flight; the UI disables the
    triggering control while ``is_busy`` is true.
    """

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="dukan-ai")
        self._busy: set[str] = set()
        self._lock = threading.Lock()

    def is_busy(self, operation: str) -> bool:
        with self._lock:
            return operation in self._busy

    def submit(self, operation: str, fn: Callable[..., Any], *args: Any) -> Future:
        with self._lock:
            if operation in self._busy:
                raise OperationBusyError(f"{operation} is already running.")
            self._busy.add(operation)

        try:
            return self._executor.submit(self._run, operation, fn, *args)
        except RuntimeError:
            self._release(operation)
            raise

    def _run(self, operation: str, fn: Callable[..., Any], *args: Any) -> TaskResult:
        try:
            return TaskResult(value=fn(*args))
        except AppError as e:
            log.warning("task_failed operation=%s error=%s", operation, e)
            return TaskResult(error=e)
        finally:
            self._release(operation)

    def _release(self, operation: str) -> None:
        with self._lock:
            self._busy.discard(operation)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

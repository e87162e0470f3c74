from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Protocol, TypeVar

from ..core.exceptions import DeliveryTimeoutError

if TYPE_CHECKING:
    from ..attendance.model import LedgerSnapshot
    from ..returns.model import ReturnRequest

T = TypeVar("T")


@dataclass(frozen=True)
class DeliveryResult:
    ok: bool
    message: str = ""
    reference: Optional[str] = None

    @classmethod
    def success(cls, message: str = "", reference: Optional[str] = None) -> "DeliveryResult":
        return cls(ok=True, message=message, reference=reference)

    @classmethod
    def failure(cls, message: str) -> "DeliveryResult":
        return cls(ok=False, message=message)


class DeliveryCollaborator(Protocol):
    """Sends submitted data somewhere outside the app (email, report inbox).

    A failed result is retryable; the caller keeps its data.
    """

    def submit_report(self, snapshot: "LedgerSnapshot") -> DeliveryResult:
        raise NotImplementedError

    def submit_return(self, request: "ReturnRequest") -> DeliveryResult:
        raise NotImplementedError


def start_delivery(fn: Callable[[], T]) -> Future[T]:
    """Run ``fn`` on its own worker thread and return its future."""
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="delivery")
    try:
        return executor.submit(fn)
    finally:
        executor.shutdown(wait=False)


def wait_for_delivery(future: Future[T], timeout_seconds: Optional[float]) -> T:
    """Wait at most ``timeout_seconds`` (``None`` waits forever).

    On expiry DeliveryTimeoutError is raised and the worker keeps running;
    the caller holds the future if it must know when the call settles.
    """
    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeoutError:
        future.cancel()
        raise DeliveryTimeoutError(
            f"The delivery service did not answer within {timeout_seconds:g} seconds, please try again"
        )


def call_with_timeout(fn: Callable[[], T], timeout_seconds: Optional[float]) -> T:
    return wait_for_delivery(start_delivery(fn), timeout_seconds)

"""Display client: fetches records once and cycles through them on each click.

``DisplayState`` is immutable and only changes through ``advance`` (a click)
and ``resolve`` (a finished fetch). ``DisplayClient`` owns one state, runs the
fetch on a worker thread and applies the result under a lock.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
import logging
from threading import Lock
from typing import Callable, Optional, Union

from pydantic import ValidationError
import requests

from ..config import settings
from ..schemas import RECORD_LIST_ADAPTER, RecordItem

logger = logging.getLogger("rowcycle.client")

DATA_PATH = "/api/data"
EMPTY_TEXT = "no data"

FALLBACK_RECORDS: tuple[RecordItem, ...] = (
    RecordItem(id=1, data="default data #1"),
    RecordItem(id=2, data="default data #2"),
    RecordItem(id=3, data="default data #3"),
)


@dataclass(frozen=True)
class FetchSuccess:
    records: tuple[RecordItem, ...]

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FetchFailure:
    reason: str

    @property
    def ok(self) -> bool:
        return False


FetchResult = Union[FetchSuccess, FetchFailure]


@dataclass(frozen=True)
class DisplayState:
    records: tuple[RecordItem, ...] = FALLBACK_RECORDS
    cursor: int = 0

    def advance(self) -> DisplayState:
        return replace(self, cursor=self.cursor + 1)

    def resolve(self, result: FetchResult) -> DisplayState:
        if isinstance(result, FetchSuccess):
            return replace(self, records=tuple(result.records))
        return self

    @property
    def current(self) -> Optional[RecordItem]:
        # Reduced at read time: records may have been swapped since the last click.
        if not self.records:
            return None
        return self.records[self.cursor % len(self.records)]

    @property
    def display_text(self) -> str:
        record = self.current
        if record is None:
            return EMPTY_TEXT
        return record.data or ""


class RecordFetcher:
    """Calls ``GET {base_url}/api/data`` and wraps the outcome in a FetchResult."""

    def __init__(
        self,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url if base_url is not None else settings.api_url).rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout if timeout is not None else settings.client_timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}{DATA_PATH}"

    def __call__(self) -> FetchResult:
        try:
            response = self._session.get(self.url, timeout=self._timeout)
            response.raise_for_status()
            records = RECORD_LIST_ADAPTER.validate_python(response.json())
        except requests.RequestException as exc:
            return self._failed(f"request failed: {exc}")
        except ValidationError as exc:
            return self._failed(f"unexpected payload: {exc.error_count()} validation error(s)")
        except ValueError as exc:
            return self._failed(f"invalid JSON: {exc}")

        logger.info(
            "Fetched records",
            extra={"event": "fetch_succeeded", "record_count": len(records), "base_url": self.base_url},
        )
        return FetchSuccess(records=tuple(records))

    def _failed(self, reason: str) -> FetchFailure:
        logger.warning(
            "Error fetching data",
            extra={"event": "fetch_failed", "reason": reason, "base_url": self.base_url},
        )
        return FetchFailure(reason=reason)


class DisplayClient:
    """Client-side component holding the records and the click cursor.

    Each mount issues exactly one fetch. Results that land after ``unmount``
    (or after a newer mount) are dropped instead of touching the state.
    """

    def __init__(self, fetcher: Callable[[], FetchResult], state: DisplayState | None = None) -> None:
        self._fetcher = fetcher
        self._state = state or DisplayState()
        self._phase = "uninitialized"
        self._mounted = False
        self._generation = 0
        self._future: Optional[Future] = None
        self._lock = Lock()

    @property
    def state(self) -> DisplayState:
        with self._lock:
            return self._state

    @property
    def phase(self) -> str:
        with self._lock:
            return self._phase

    @property
    def display_text(self) -> str:
        return self.state.display_text

    def mount(self) -> Future:
        with self._lock:
            if self._mounted and self._future is not None:
                return self._future
            self._mounted = True
            self._generation += 1
            self._phase = "fetch-pending"
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="rowcycle-fetch")
            self._future = executor.submit(self._fetch_and_apply, self._generation)
            executor.shutdown(wait=False)
            return self._future

    def unmount(self) -> None:
        with self._lock:
            self._mounted = False

    def click(self) -> str:
        with self._lock:
            self._state = self._state.advance()
            return self._state.display_text

    def wait_until_settled(self, timeout: float | None = None) -> Optional[FetchResult]:
        with self._lock:
            future = self._future
        if future is None:
            return None
        return future.result(timeout=timeout)

    def _fetch_and_apply(self, generation: int) -> FetchResult:
        try:
            result = self._fetcher()
        except Exception as exc:
            logger.exception("Fetcher raised", extra={"event": "fetch_failed", "reason": str(exc)})
            result = FetchFailure(reason=str(exc))

        with self._lock:
            if not self._mounted or generation != self._generation:
                logger.info("Dropping fetch result after unmount", extra={"event": "fetch_discarded"})
                return result
            self._state = self._state.resolve(result)
            self._phase = "fetch-resolved" if result.ok else "fetch-failed"
        return result

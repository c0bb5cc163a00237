"""View state shared by the catalog and the ledger."""

from dataclasses import dataclass, field
from typing import Any

STATUS_LOADING = 'loading'
STATUS_EMPTY = 'empty'
STATUS_ERROR = 'error'
STATUS_DATA = 'data'


@dataclass(frozen=True)
class FetchResult:
    """Outcome of the latest fetch: loading, empty, error or data."""

    status: str
    data: list[dict[str, Any]] = field(default_factory=list)
    error: Exception | None = None

    @classmethod
    def loading(cls) -> 'FetchResult':
        return cls(STATUS_LOADING)

    @classmethod
    def from_rows(cls, rows: list[dict[str, Any]]) -> 'FetchResult':
        return cls(STATUS_DATA, list(rows)) if rows else cls(STATUS_EMPTY)

    @classmethod
    def failed(cls, error: Exception) -> 'FetchResult':
        return cls(STATUS_ERROR, error=error)

    @property
    def is_error(self) -> bool:
        return self.status == STATUS_ERROR


class RequestGeneration:
    """Monotonic tag issued per fetch; only the latest tag may write state."""

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, tag: int) -> bool:
        return tag == self._latest

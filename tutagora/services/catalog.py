import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool

from tutagora.core.errors import GatewayError
from tutagora.gateway.client import GatewayClient
from tutagora.services.state import FetchResult, RequestGeneration

logger = logging.getLogger(__name__)

TUTOR_SELECT = ('account', 'availability')


def _display_name(tutor: dict[str, Any]) -> str:
    account = tutor.get('account') or {}
    return account.get('full_name') or ''


def filter_tutors(tutors: list[dict[str, Any]], search: str | None) -> list[dict[str, Any]]:
    """Case-insensitive substring match on display name or subject."""
    needle = (search or '').strip().lower()
    if not needle:
        return list(tutors)
    return [
        tutor for tutor in tutors
        if needle in _display_name(tutor).lower() or needle in (tutor.get('subject') or '').lower()
    ]


class TutorCatalog:
    """Verified tutors, fetched in full and filtered locally."""

    def __init__(self, gateway: GatewayClient):
        self.gateway = gateway
        self.state = FetchResult.loading()
        self._generation = RequestGeneration()

    async def list_verified_tutors(self) -> list[dict[str, Any]]:
        return await run_in_threadpool(
            self.gateway.fetch,
            'tutors',
            TUTOR_SELECT,
            {'verified': True},
            'rating',
            True,
        )

    async def load(self) -> FetchResult:
        tag = self._generation.issue()
        try:
            result = FetchResult.from_rows(await self.list_verified_tutors())
        except GatewayError as exc:
            logger.warning('Tutor catalog fetch failed: %s', exc.message)
            result = FetchResult.failed(exc)

        if not self._generation.is_current(tag):
            logger.debug('Discarding stale tutor catalog fetch %s', tag)
            return self.state

        self.state = result
        return result

    async def search(self, search: str | None) -> FetchResult:
        result = await self.load()
        if result.is_error:
            return result
        return FetchResult.from_rows(filter_tutors(result.data, search))

    async def get_tutor(self, tutor_id: int) -> dict[str, Any]:
        return await run_in_threadpool(
            self.gateway.fetch_one,
            'tutors',
            TUTOR_SELECT,
            {'id': tutor_id, 'verified': True},
        )

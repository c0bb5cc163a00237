"""Booking ledger for the signed-in account.

The ledger never patches its list in place: after a booking is created it
re-fetches everything, so callers see stale rows only until that reload
completes.
"""

import logging
from datetime import date, time
from typing import Any

from fastapi.concurrency import run_in_threadpool

from tutagora.core.errors import AuthError, GatewayError
from tutagora.gateway.client import GatewaySession
from tutagora.models.account import ROLE_TUTOR
from tutagora.models.booking import STATUS_COMPLETED, STATUS_CONFIRMED, STATUS_PENDING
from tutagora.services.session import SessionContext
from tutagora.services.state import FetchResult, RequestGeneration

logger = logging.getLogger(__name__)

BOOKING_SELECT = ('tutor', 'tutor.account', 'student')
UPCOMING_STATUSES = (STATUS_CONFIRMED, STATUS_PENDING)


def summarize(bookings: list[dict[str, Any]], hourly_rate: float | None = None) -> dict[str, Any]:
    """Dashboard figures: upcoming, past (completed) and, for tutors, earnings."""
    upcoming = [booking for booking in bookings if booking.get('status') in UPCOMING_STATUSES]
    past = [booking for booking in bookings if booking.get('status') == STATUS_COMPLETED]

    summary = {
        'upcoming': upcoming,
        'past': past,
        'upcoming_count': len(upcoming),
        'completed_count': len(past),
    }
    if hourly_rate is not None:
        summary['hourly_rate'] = hourly_rate
        summary['earnings'] = len(past) * hourly_rate
    return summary


class BookingLedger:
    def __init__(self, context: SessionContext):
        self.context = context
        self.gateway = context.gateway
        self.state = FetchResult.loading()
        self._generation = RequestGeneration()
        self._unsubscribe = context.subscribe(self._on_identity_change)

    def _on_identity_change(self, event: str, session: GatewaySession | None) -> None:
        self._generation.issue()
        self.state = FetchResult.loading() if session else FetchResult.from_rows([])

    def close(self) -> None:
        self._unsubscribe()

    async def resolve_tutor_id(self, account_id: str) -> int:
        tutor = await run_in_threadpool(self.gateway.fetch_one, 'tutors', (), {'user_id': account_id})
        return tutor['id']

    async def list_bookings(self, account_id: str, role: str | None) -> list[dict[str, Any]]:
        if role == ROLE_TUTOR:
            filters = {'tutor_id': await self.resolve_tutor_id(account_id)}
        else:
            filters = {'student_id': account_id}

        return await run_in_threadpool(
            self.gateway.fetch,
            'bookings',
            BOOKING_SELECT,
            filters,
            'lesson_date',
        )

    async def load(self) -> FetchResult:
        account_id = self.context.identity_id
        if account_id is None:
            self.state = FetchResult.from_rows([])
            return self.state

        tag = self._generation.issue()
        try:
            result = FetchResult.from_rows(await self.list_bookings(account_id, self.context.role))
        except GatewayError as exc:
            logger.warning('Booking fetch failed for %s: %s', account_id, exc.message)
            result = FetchResult.failed(exc)

        if not self._generation.is_current(tag):
            logger.debug('Discarding stale booking fetch %s for %s', tag, account_id)
            return self.state

        self.state = result
        return result

    async def create_booking(
        self,
        tutor_id: int,
        subject: str,
        lesson_date: date,
        start_time: time,
    ) -> dict[str, Any]:
        account_id = self.context.identity_id
        if account_id is None:
            raise AuthError('Sign in to book a lesson.')

        booking = await run_in_threadpool(
            self.gateway.insert,
            'bookings',
            {
                'student_id': account_id,
                'tutor_id': tutor_id,
                'subject': subject,
                'lesson_date': lesson_date,
                'start_time': start_time,
                'status': STATUS_CONFIRMED,
            },
        )
        logger.info('Booking %s created for tutor %s on %s %s', booking['id'], tutor_id, lesson_date, start_time)

        await self.load()
        return booking

from fastapi import APIRouter, Depends, HTTPException, status

from tutagora.auth.dependencies import get_current_context
from tutagora.core.errors import GatewayError
from tutagora.models.account import ROLE_TUTOR
from tutagora.schemas import BookingCreatedResponse, BookingResponse, BookingSummaryResponse, CreateBookingRequest
from tutagora.services.availability import is_bookable
from tutagora.services.catalog import TutorCatalog
from tutagora.services.ledger import BookingLedger, summarize
from tutagora.services.session import SessionContext

router = APIRouter(tags=['bookings'])


async def get_ledger(context: SessionContext = Depends(get_current_context)):
    ledger = BookingLedger(context)
    try:
        yield ledger
    finally:
        ledger.close()


async def load_bookings(ledger: BookingLedger) -> list[dict]:
    result = await ledger.load()
    if result.is_error:
        if isinstance(result.error, GatewayError) and result.error.status_code == status.HTTP_404_NOT_FOUND:
            raise result.error.to_http_exception() from result.error
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Bookings could not be loaded. Try again shortly.',
        )
    return result.data


@router.get('', response_model=list[BookingResponse])
async def list_bookings(ledger: BookingLedger = Depends(get_ledger)):
    return await load_bookings(ledger)


@router.get('/summary', response_model=BookingSummaryResponse)
async def booking_summary(ledger: BookingLedger = Depends(get_ledger)):
    bookings = await load_bookings(ledger)

    hourly_rate = None
    profile = ledger.context.profile or {}
    if profile.get('role') == ROLE_TUTOR and profile.get('tutor'):
        hourly_rate = profile['tutor'].get('hourly_rate') or 0

    return summarize(bookings, hourly_rate)


@router.post('', response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(data: CreateBookingRequest, ledger: BookingLedger = Depends(get_ledger)):
    try:
        tutor = await TutorCatalog(ledger.gateway).get_tutor(data.tutor_id)
    except GatewayError as exc:
        raise exc.to_http_exception() from exc

    if not is_bookable(tutor['availability'], data.date, data.time):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Selected time is not an available slot in the booking window.',
        )

    try:
        booking = await ledger.create_booking(
            tutor['id'],
            data.subject or tutor.get('subject'),
            data.date,
            data.time,
        )
    except GatewayError as exc:
        raise exc.to_http_exception() from exc

    bookings = ledger.state.data
    created = next((row for row in bookings if row['id'] == booking['id']), booking)
    return BookingCreatedResponse(booking=created, bookings=bookings)

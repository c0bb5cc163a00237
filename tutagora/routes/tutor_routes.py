from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tutagora.auth.dependencies import get_current_context, get_gateway
from tutagora.core.errors import GatewayError
from tutagora.gateway.client import GatewayClient
from tutagora.schemas import (
    CalendarDayResponse,
    ProfileResponse,
    SlotListResponse,
    TutorResponse,
    UpdateTutorProfileRequest,
)
from tutagora.services.availability import bookable_days, expand_slots
from tutagora.services.catalog import TutorCatalog
from tutagora.services.profile import update_tutor_profile
from tutagora.services.session import SessionContext

router = APIRouter(tags=['tutors'])


def get_catalog(gateway: GatewayClient = Depends(get_gateway)) -> TutorCatalog:
    return TutorCatalog(gateway)


async def load_tutor(tutor_id: int, catalog: TutorCatalog) -> dict:
    try:
        return await catalog.get_tutor(tutor_id)
    except GatewayError as exc:
        raise exc.to_http_exception() from exc


@router.get('', response_model=list[TutorResponse])
async def list_tutors(
    search: str = Query(default=''),
    catalog: TutorCatalog = Depends(get_catalog),
):
    result = await catalog.search(search)
    if result.is_error:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Tutors could not be loaded. Try again shortly.',
        )
    return result.data


@router.patch('/me', response_model=ProfileResponse)
async def update_my_tutor_profile(
    data: UpdateTutorProfileRequest,
    context: SessionContext = Depends(get_current_context),
):
    try:
        return await update_tutor_profile(context, data.model_dump(exclude_unset=True))
    except GatewayError as exc:
        raise exc.to_http_exception() from exc


@router.get('/{tutor_id}', response_model=TutorResponse)
async def get_tutor(tutor_id: int, catalog: TutorCatalog = Depends(get_catalog)):
    return await load_tutor(tutor_id, catalog)


@router.get('/{tutor_id}/calendar', response_model=list[CalendarDayResponse])
async def get_tutor_calendar(tutor_id: int, catalog: TutorCatalog = Depends(get_catalog)):
    tutor = await load_tutor(tutor_id, catalog)
    return bookable_days(tutor['availability'])


@router.get('/{tutor_id}/slots', response_model=SlotListResponse)
async def get_tutor_slots(
    tutor_id: int,
    slot_date: date = Query(..., alias='date'),
    catalog: TutorCatalog = Depends(get_catalog),
):
    tutor = await load_tutor(tutor_id, catalog)
    return SlotListResponse(date=slot_date, slots=expand_slots(tutor['availability'], slot_date))

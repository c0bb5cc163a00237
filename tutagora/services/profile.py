import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool

from tutagora.core.errors import AuthError, NotFoundError, ValidationError
from tutagora.models.account import ROLE_TUTOR
from tutagora.services.session import SessionContext

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('subject', 'headline', 'bio', 'hourly_rate', 'degree')


async def update_tutor_profile(context: SessionContext, patch: dict[str, Any]) -> dict[str, Any]:
    """Apply a tutor's own profile edits and return the refreshed profile."""
    if context.identity_id is None:
        raise AuthError('Sign in to edit your profile.')
    if context.role != ROLE_TUTOR:
        raise AuthError('Only tutors can edit a tutor profile.')

    tutor = (context.profile or {}).get('tutor')
    if not tutor:
        raise NotFoundError('Tutor profile is still being set up.')

    unknown = set(patch) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}.")
    if not patch:
        raise ValidationError('Nothing to update.')

    cleared = sorted(name for name, value in patch.items() if value is None)
    if cleared:
        raise ValidationError(f"Fields cannot be cleared: {', '.join(cleared)}.", {'fields': cleared})

    hourly_rate = patch.get('hourly_rate')
    if hourly_rate is not None and hourly_rate < 0:
        raise ValidationError('Hourly rate cannot be negative.', {'field': 'hourly_rate'})

    updated = await run_in_threadpool(
        context.gateway.update,
        'tutors',
        patch,
        {'id': tutor['id'], 'user_id': context.identity_id},
    )
    if not updated:
        raise NotFoundError('Tutor profile not found.')

    logger.info('Tutor %s updated fields %s', tutor['id'], sorted(patch))
    return await context.refetch_profile()

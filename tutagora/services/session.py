"""Session/profile resolver.

``SessionContext`` owns the signed-in identity and its profile for one
caller. Components that depend on identity receive the context explicitly
and subscribe to it; they are told about every identity transition and must
drop their own state when the identity goes away.
"""

import logging
from typing import Any, Callable

from email_validator import EmailNotValidError, validate_email
from fastapi.concurrency import run_in_threadpool

from tutagora.core import config
from tutagora.core.errors import NotFoundError, ValidationError
from tutagora.gateway.client import GatewayClient, GatewaySession
from tutagora.models.account import ROLES
from tutagora.services.state import RequestGeneration

logger = logging.getLogger(__name__)

EVENT_INITIAL_SESSION = 'INITIAL_SESSION'
PROFILE_SELECT = ('tutor', 'tutor.availability')

SessionCallback = Callable[[str, GatewaySession | None], None]


def normalize_email(value: str) -> str:
    return (value or '').strip().lower()


def validate_sign_up(email: str, password: str, full_name: str, role: str) -> None:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError('A valid email address is required.', {'field': 'email'}) from exc
    if len(password or '') < config.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f'Password must be at least {config.MIN_PASSWORD_LENGTH} characters.',
            {'field': 'password'},
        )
    if not (full_name or '').strip():
        raise ValidationError('Full name is required.', {'field': 'full_name'})
    if role not in ROLES:
        raise ValidationError('Role must be student or tutor.', {'field': 'role'})


class SessionContext:
    def __init__(self, gateway: GatewayClient):
        self.gateway = gateway
        self.session: GatewaySession | None = None
        self.profile: dict[str, Any] | None = None
        self.loading = True
        self._generation = RequestGeneration()
        self._subscribers: list[SessionCallback] = []
        self._unsubscribe_gateway: Callable[[], None] | None = gateway.on_session_change(
            self._on_gateway_change
        )

    @property
    def identity_id(self) -> str | None:
        return self.session.identity_id if self.session else None

    @property
    def role(self) -> str | None:
        return self.profile.get('role') if self.profile else None

    def subscribe(self, callback: SessionCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: str, session: GatewaySession | None) -> None:
        for callback in list(self._subscribers):
            callback(event, session)

    def _on_gateway_change(self, event: str, session: GatewaySession | None) -> None:
        self._generation.issue()
        self.session = session
        if session is None:
            self.profile = None
            self.loading = False
        self._notify(event, session)

    async def initialize(self) -> None:
        self.session = await run_in_threadpool(self.gateway.get_current_session)
        self._notify(EVENT_INITIAL_SESSION, self.session)
        if self.session is None:
            self.loading = False
            return
        await self.refetch_profile()

    def close(self) -> None:
        if self._unsubscribe_gateway is not None:
            self._unsubscribe_gateway()
            self._unsubscribe_gateway = None
        self._subscribers.clear()

    async def refetch_profile(self) -> dict[str, Any] | None:
        session = self.session
        if session is None:
            return None

        tag = self._generation.issue()
        try:
            profile = await run_in_threadpool(
                self.gateway.fetch_one,
                'profiles',
                PROFILE_SELECT,
                {'id': session.identity_id},
            )
        except NotFoundError:
            logger.warning('No profile row for identity %s', session.identity_id)
            profile = None

        if not self._generation.is_current(tag):
            logger.debug('Discarding stale profile fetch for identity %s', session.identity_id)
            return self.profile

        self.profile = profile
        self.loading = False
        return profile

    async def sign_up(self, email: str, password: str, full_name: str, role: str) -> dict[str, Any]:
        email = normalize_email(email)
        role = (role or '').strip().lower()
        validate_sign_up(email, password, full_name, role)

        account = await run_in_threadpool(
            self.gateway.create_identity,
            email,
            password,
            {'full_name': full_name.strip(), 'role': role},
        )
        logger.info('Registered %s account %s', role, account['id'])
        return account

    async def sign_in(self, email: str, password: str) -> dict[str, Any] | None:
        session = await run_in_threadpool(self.gateway.authenticate, normalize_email(email), password)
        logger.info('Identity %s signed in', session.identity_id)
        return await self.refetch_profile()

    async def sign_out(self) -> None:
        identity_id = self.identity_id
        await run_in_threadpool(self.gateway.end_session)
        logger.info('Identity %s signed out', identity_id)

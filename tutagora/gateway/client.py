"""Gateway client: hosted-style identity plus a row store with relational embeds.

The services only talk to :class:`GatewayClient`. Rows come back as plain
dicts; related rows named in ``select`` are embedded under the relationship
name, with dotted paths reaching further (``"tutor.account"``).
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Iterator
from uuid import uuid4

import jwt
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from tutagora.auth import jwt_handler
from tutagora.auth.passwords import hash_password, verify_password
from tutagora.core import config
from tutagora.core.errors import AuthError, DuplicateError, NetworkError, NotFoundError, ValidationError
from tutagora.database import SessionLocal
from tutagora.models.account import ROLE_TUTOR, Account
from tutagora.models.availability import AvailabilityWindow
from tutagora.models.booking import Booking
from tutagora.models.identity import AuthSession, Identity
from tutagora.models.tutor import TutorDetail

logger = logging.getLogger(__name__)

TABLES = {
    'profiles': Account,
    'tutors': TutorDetail,
    'availability': AvailabilityWindow,
    'bookings': Booking,
}

EVENT_SIGNED_IN = 'SIGNED_IN'
EVENT_SIGNED_OUT = 'SIGNED_OUT'

SessionListener = Callable[[str, 'GatewaySession | None'], None]


@dataclass(frozen=True)
class GatewaySession:
    identity_id: str
    email: str
    access_token: str


def _model_for(table: str):
    try:
        return TABLES[table]
    except KeyError:
        raise ValidationError(f"Unknown table '{table}'.") from None


def _column(model, name: str):
    if name not in sa_inspect(model).columns:
        raise ValidationError(f"Unknown column '{name}' on {model.__tablename__}.")
    return getattr(model, name)


def _relationship(model, name: str):
    if name not in sa_inspect(model).relationships:
        raise ValidationError(f"Unknown relation '{name}' on {model.__tablename__}.")
    return getattr(model, name)


def _select_tree(paths: Iterable[str]) -> dict:
    tree: dict = {}
    for path in paths:
        node = tree
        for name in path.split('.'):
            node = node.setdefault(name, {})
    return tree


def _loader_options(model, paths: Iterable[str]) -> list:
    options = []
    for path in paths:
        current = model
        loader = None
        for name in path.split('.'):
            attribute = _relationship(current, name)
            loader = selectinload(attribute) if loader is None else loader.selectinload(attribute)
            current = attribute.property.mapper.class_
        options.append(loader)
    return options


def _to_dict(instance, tree: dict) -> dict[str, Any]:
    mapper = sa_inspect(instance).mapper
    row = {attribute.key: getattr(instance, attribute.key) for attribute in mapper.column_attrs}
    for name, subtree in tree.items():
        value = getattr(instance, name)
        if value is None:
            row[name] = None
        elif isinstance(value, list):
            row[name] = [_to_dict(item, subtree) for item in value]
        else:
            row[name] = _to_dict(value, subtree)
    return row


def _check_required(model, record: dict[str, Any]) -> None:
    for column in model.__table__.columns:
        if column.primary_key or column.nullable or column.default is not None:
            continue
        value = record.get(column.key)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Missing required field '{column.key}'.", {'field': column.key})


class GatewayClient:
    """One client per caller; holds that caller's access token."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal, access_token: str | None = None):
        self._session_factory = session_factory
        self._access_token = access_token
        self._listeners: list[SessionListener] = []

    @property
    def access_token(self) -> str | None:
        return self._access_token

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except IntegrityError as exc:
            db.rollback()
            message = str(exc.orig).lower()
            if 'unique' in message or 'duplicate' in message:
                raise DuplicateError('A record with the same key already exists.') from exc
            raise ValidationError('The record was rejected by the data store.') from exc
        except SQLAlchemyError as exc:
            db.rollback()
            raise NetworkError('Database unavailable. Verify DATABASE_URL and database credentials.') from exc
        finally:
            db.close()

    # -- session -----------------------------------------------------------

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, event: str, session: GatewaySession | None) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    def get_current_session(self) -> GatewaySession | None:
        if not self._access_token:
            return None

        try:
            payload = jwt_handler.decode_access_token(self._access_token)
        except jwt.PyJWTError:
            logger.debug('Discarding undecodable or expired access token.')
            return None
        if not payload.get('jti'):
            return None

        with self._session_scope() as db:
            record = db.get(AuthSession, payload['jti'])
            if record is None or record.revoked_at is not None or record.identity_id != payload.get('sub'):
                return None
            identity = db.get(Identity, record.identity_id)
            if identity is None:
                return None
            return GatewaySession(identity_id=identity.id, email=identity.email, access_token=self._access_token)

    # -- auth mutation -----------------------------------------------------

    def create_identity(self, email: str, password: str, attributes: dict[str, Any]) -> dict[str, Any]:
        """Register credentials and provision the profile (and tutor row for tutors)."""
        role = attributes.get('role')
        full_name = attributes.get('full_name')
        if not email or not password:
            raise ValidationError('Email and password are required.')
        if not role or not full_name:
            raise ValidationError('Full name and role are required.')

        with self._session_scope() as db:
            if db.query(Identity).filter(Identity.email == email).first():
                raise DuplicateError('User already registered.', {'email': email})

            identity = Identity(id=str(uuid4()), email=email, password_hash=hash_password(password))
            account = Account(
                id=identity.id,
                email=email,
                full_name=full_name,
                role=role,
                avatar_url=attributes.get('avatar_url'),
            )
            db.add(identity)
            db.flush()
            db.add(account)
            if role == ROLE_TUTOR:
                db.add(
                    TutorDetail(
                        user_id=identity.id,
                        subject=attributes.get('subject'),
                        hourly_rate=config.DEFAULT_HOURLY_RATE,
                        currency=config.DEFAULT_CURRENCY,
                        verified=False,
                    )
                )
            db.commit()
            db.refresh(account)
            return _to_dict(account, {})

    def authenticate(self, email: str, password: str) -> GatewaySession:
        with self._session_scope() as db:
            identity = db.query(Identity).filter(Identity.email == email).first()
            if identity is None or not verify_password(password, identity.password_hash):
                raise AuthError('Invalid login credentials.')

            record = AuthSession(id=str(uuid4()), identity_id=identity.id)
            db.add(record)
            db.commit()
            token = jwt_handler.create_access_token(subject=identity.id, session_id=record.id)
            session = GatewaySession(identity_id=identity.id, email=identity.email, access_token=token)

        self._access_token = token
        self._emit(EVENT_SIGNED_IN, session)
        return session

    def end_session(self) -> None:
        token = self._access_token
        self._access_token = None
        if token:
            try:
                payload = jwt_handler.decode_access_token(token)
            except jwt.PyJWTError:
                payload = None
            if payload is not None and payload.get('jti'):
                with self._session_scope() as db:
                    record = db.get(AuthSession, payload['jti'])
                    if record is not None and record.revoked_at is None:
                        record.revoked_at = datetime.now(timezone.utc)
                        db.commit()
        self._emit(EVENT_SIGNED_OUT, None)

    # -- row queries -------------------------------------------------------

    def fetch(
        self,
        table: str,
        select: Iterable[str] = (),
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        model = _model_for(table)
        select = tuple(select)

        with self._session_scope() as db:
            query = db.query(model).options(*_loader_options(model, select))
            for name, value in (filters or {}).items():
                column = _column(model, name)
                query = query.filter(column.is_(None) if value is None else column == value)
            if order_by:
                column = _column(model, order_by)
                query = query.order_by(column.desc() if descending else column.asc())
            primary_key = sa_inspect(model).primary_key[0]
            query = query.order_by(primary_key.asc())

            tree = _select_tree(select)
            return [_to_dict(row, tree) for row in query.all()]

    def fetch_one(
        self,
        table: str,
        select: Iterable[str] = (),
        filters: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        rows = self.fetch(table, select=select, filters=filters)
        if not rows:
            raise NotFoundError(f'No {table} row matches the query.', {'filters': filters or {}})
        return rows[0]

    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        model = _model_for(table)
        for name in record:
            _column(model, name)
        _check_required(model, record)

        with self._session_scope() as db:
            instance = model(**record)
            db.add(instance)
            db.commit()
            db.refresh(instance)
            return _to_dict(instance, {})

    def update(self, table: str, patch: dict[str, Any], filters: dict[str, Any]) -> int:
        model = _model_for(table)
        if not filters:
            raise ValidationError('Updates require at least one filter.')
        for name in patch:
            _column(model, name)

        with self._session_scope() as db:
            query = db.query(model)
            for name, value in filters.items():
                query = query.filter(_column(model, name) == value)
            updated = query.update(patch, synchronize_session=False)
            db.commit()
            return updated

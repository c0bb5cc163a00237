import os
from datetime import time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('JWT_SECRET_KEY', 'tutagora-test-signing-key-0123456789abcdef')
os.environ.setdefault('SLOT_ALIGNMENT', 'hour')

from tutagora.database import Base  # noqa: E402
from tutagora.gateway.client import GatewayClient  # noqa: E402
from tutagora.models import account, availability, booking, identity, tutor  # noqa: E402,F401

PASSWORD = 'secret-pass'


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield testing_session_local
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def gateway(session_factory) -> GatewayClient:
    return GatewayClient(session_factory)


@pytest.fixture
def make_tutor(session_factory):
    """Register a tutor account and shape its tutor row."""

    def _make_tutor(
        full_name: str,
        subject: str,
        rating: float = 4.5,
        verified: bool = True,
        windows=((1, time(9, 0), time(12, 0)),),
        hourly_rate: float = 1000,
    ) -> dict:
        admin = GatewayClient(session_factory)
        email = full_name.lower().replace(' ', '.') + '@example.com'
        profile = admin.create_identity(email, PASSWORD, {'full_name': full_name, 'role': 'tutor'})
        tutor_row = admin.fetch_one('tutors', filters={'user_id': profile['id']})
        admin.update(
            'tutors',
            {'subject': subject, 'rating': rating, 'verified': verified, 'hourly_rate': hourly_rate},
            {'id': tutor_row['id']},
        )
        for day_of_week, start_time, end_time in windows:
            admin.insert(
                'availability',
                {
                    'tutor_id': tutor_row['id'],
                    'day_of_week': day_of_week,
                    'start_time': start_time,
                    'end_time': end_time,
                },
            )
        return admin.fetch_one('tutors', ('account', 'availability'), {'id': tutor_row['id']})

    return _make_tutor


@pytest.fixture
def make_student(session_factory):
    def _make_student(full_name: str = 'Wanjiru Kamau', email: str = 'wanjiru@example.com') -> dict:
        return GatewayClient(session_factory).create_identity(
            email,
            PASSWORD,
            {'full_name': full_name, 'role': 'student'},
        )

    return _make_student

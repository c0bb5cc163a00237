"""Create the schema and load demo tutors with weekly availability.

Usage:
    python -m tutagora.seed
"""
import logging
import sys
from datetime import time

from tutagora.core.errors import DuplicateError, GatewayError
from tutagora.database import Base, engine
from tutagora.gateway.client import GatewayClient
from tutagora.models import account, availability, booking, identity, tutor  # noqa: F401

logger = logging.getLogger(__name__)

DEMO_PASSWORD = 'tutagora-demo'

DEMO_TUTORS = [
    {
        'email': 'amina@example.com',
        'full_name': 'Amina Otieno',
        'subject': 'Math',
        'headline': 'KCSE mathematics, made simple',
        'hourly_rate': 1500,
        'rating': 4.9,
        'windows': [(1, time(9, 0), time(12, 0)), (3, time(14, 0), time(17, 0))],
    },
    {
        'email': 'brian@example.com',
        'full_name': 'Brian Kiptoo',
        'subject': 'Physics',
        'headline': 'Mechanics and electricity for A-level',
        'hourly_rate': 1200,
        'rating': 4.7,
        'windows': [(2, time(10, 0), time(13, 0)), (6, time(9, 0), time(11, 0))],
    },
]


def seed_tutor(gateway: GatewayClient, spec: dict) -> None:
    profile = gateway.create_identity(
        spec['email'],
        DEMO_PASSWORD,
        {'full_name': spec['full_name'], 'role': 'tutor', 'subject': spec['subject']},
    )
    tutor_row = gateway.fetch_one('tutors', filters={'user_id': profile['id']})
    gateway.update(
        'tutors',
        {
            'headline': spec['headline'],
            'hourly_rate': spec['hourly_rate'],
            'rating': spec['rating'],
            'verified': True,
        },
        {'id': tutor_row['id']},
    )
    for day_of_week, start_time, end_time in spec['windows']:
        gateway.insert(
            'availability',
            {
                'tutor_id': tutor_row['id'],
                'day_of_week': day_of_week,
                'start_time': start_time,
                'end_time': end_time,
            },
        )


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    gateway = GatewayClient()

    for spec in DEMO_TUTORS:
        try:
            seed_tutor(gateway, spec)
        except DuplicateError:
            logger.info('Skipping %s: already registered', spec['email'])
        except GatewayError as exc:
            print('Seeding failed:', exc.message, file=sys.stderr)
            sys.exit(1)
        else:
            logger.info('Seeded tutor %s', spec['full_name'])


if __name__ == "__main__":
    main()

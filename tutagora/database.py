from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from tutagora.core import config


def build_engine(database_url: str, **kwargs) -> Engine:
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(database_url, echo=config.SQL_ECHO, **kwargs)


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_booking_schema_checked = False


def ensure_booking_schema(bind: Engine | None = None) -> None:
    global _booking_schema_checked

    if _booking_schema_checked:
        return

    bind = bind or engine
    with _schema_lock:
        if _booking_schema_checked:
            return

        inspector = inspect(bind)

        if 'bookings' not in inspector.get_table_names():
            _booking_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('bookings')}
        migration_steps = [
            ('status', "ALTER TABLE bookings ADD COLUMN status VARCHAR DEFAULT 'confirmed'"),
            ('created_at', 'ALTER TABLE bookings ADD COLUMN created_at TIMESTAMP'),
        ]

        with bind.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text(
                    'CREATE UNIQUE INDEX IF NOT EXISTS uq_bookings_tutor_slot '
                    'ON bookings(tutor_id, lesson_date, start_time)'
                )
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_bookings_student_date ON bookings(student_id, lesson_date)')
            )

        _booking_schema_checked = True

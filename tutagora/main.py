import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from tutagora.core import config
from tutagora.database import Base, engine, ensure_booking_schema
from tutagora.models import account, availability, booking, identity, tutor  # noqa: F401
from tutagora.routes import auth_routes, booking_routes, tutor_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

config.validate_runtime_config()

app = FastAPI(title='Tutagora API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_booking_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Tutagora API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(tutor_routes.router, prefix='/tutors')
app.include_router(booking_routes.router, prefix='/bookings')

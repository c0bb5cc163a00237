"""Response and request payloads shared by the routers."""

from datetime import date, datetime, time

from pydantic import BaseModel, EmailStr, field_validator

from tutagora.models.account import ROLES


class AccountResponse(BaseModel):
    id: str
    email: str
    full_name: str
    role: str
    avatar_url: str | None = None

    class Config:
        from_attributes = True


class AccountDisplayResponse(BaseModel):
    full_name: str
    avatar_url: str | None = None


class AvailabilityWindowResponse(BaseModel):
    id: int
    day_of_week: int
    start_time: time
    end_time: time

    class Config:
        from_attributes = True


class TutorResponse(BaseModel):
    id: int
    user_id: str
    subject: str | None = None
    headline: str | None = None
    bio: str | None = None
    hourly_rate: float | None = None
    currency: str | None = None
    degree: str | None = None
    rating: float | None = None
    reviews_count: int | None = None
    students_total: int | None = None
    lessons_completed: int | None = None
    verified: bool = False
    account: AccountDisplayResponse | None = None
    availability: list[AvailabilityWindowResponse] = []

    class Config:
        from_attributes = True


class ProfileResponse(AccountResponse):
    tutor: TutorResponse | None = None


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: str
    role: str = 'student'

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in ROLES:
            raise ValueError('Role must be student or tutor.')
        return normalized


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    profile: ProfileResponse | None = None


class CalendarDayResponse(BaseModel):
    date: date
    day_name: str
    slots: list[str]
    enabled: bool


class SlotListResponse(BaseModel):
    date: date
    slots: list[str]


class UpdateTutorProfileRequest(BaseModel):
    subject: str | None = None
    headline: str | None = None
    bio: str | None = None
    hourly_rate: float | None = None
    degree: str | None = None

    @field_validator('hourly_rate')
    @classmethod
    def validate_hourly_rate(cls, value: float | None) -> float | None:
        if value is not None and value < 0:
            raise ValueError('Hourly rate cannot be negative.')
        return value


class CreateBookingRequest(BaseModel):
    tutor_id: int
    date: date
    time: time
    subject: str | None = None

    @field_validator('subject')
    @classmethod
    def normalize_subject(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class BookingResponse(BaseModel):
    id: int
    student_id: str
    tutor_id: int
    subject: str
    lesson_date: date
    start_time: time
    status: str
    created_at: datetime | None = None
    tutor: TutorResponse | None = None
    student: AccountDisplayResponse | None = None

    class Config:
        from_attributes = True


class BookingCreatedResponse(BaseModel):
    booking: BookingResponse
    bookings: list[BookingResponse]


class BookingSummaryResponse(BaseModel):
    upcoming: list[BookingResponse]
    past: list[BookingResponse]
    upcoming_count: int
    completed_count: int
    hourly_rate: float | None = None
    earnings: float | None = None

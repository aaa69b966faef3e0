"""Pydantic request/response schemas for the Zentro API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract: camelCase on the wire, every
response wrapped in the ``{success, message, data, errors}`` envelope.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from consulting.consultant.consultant import WEEKDAYS

T = TypeVar("T")

HH_MM = r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$"
HEX_COLOR = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"

MeetingTypeName = Literal["video", "audio", "in-person"]
BookingStatusName = Literal["pending", "confirmed", "completed", "cancelled", "no-show"]
TargetStatusName = Literal["confirmed", "completed", "cancelled", "no-show"]

# Keeps the `date` field name from shadowing its own annotation
CalendarDate = date


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------
class FieldError(CamelModel):
    field: str
    message: str


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None
    errors: list[FieldError] | None = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def of(cls, page, limit, total) -> Pagination:
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
class CreateCategoryRequest(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=10, max_length=500)
    icon: str = Field(min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    sort_order: int = Field(default=0, ge=0)


class UpdateCategoryRequest(CamelModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = Field(default=None, min_length=10, max_length=500)
    icon: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    sort_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class CategoryOut(CamelModel):
    id: str
    name: str
    description: str
    icon: str
    color: str
    is_active: bool
    sort_order: int
    consultant_count: int
    booking_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def of(cls, category) -> CategoryOut:
        return cls(
            id=str(category.id),
            name=category.name,
            description=category.description,
            icon=category.icon,
            color=category.color,
            is_active=category.is_active,
            sort_order=category.sort_order or 0,
            consultant_count=category.consultant_count or 0,
            booking_count=category.booking_count or 0,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class CategoryData(CamelModel):
    category: CategoryOut


class CategoryListData(CamelModel):
    categories: list[CategoryOut]


# ---------------------------------------------------------------------------
# Consultants
# ---------------------------------------------------------------------------
class DayAvailabilitySchema(CamelModel):
    is_available: bool = False
    start_time: str = Field(default="09:00", pattern=HH_MM)
    end_time: str = Field(default="17:00", pattern=HH_MM)


class QualificationSchema(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    institution: str = Field(min_length=1, max_length=200)
    year: int = Field(ge=1900)


class CertificationSchema(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    issuing_body: str = Field(min_length=1, max_length=200)
    issue_date: date
    expiry_date: date | None = None


class CreateConsultantRequest(CamelModel):
    categories: list[str] = Field(min_length=1)
    bio: str = Field(min_length=50, max_length=1000)
    experience: int = Field(ge=0, le=50)
    hourly_rate: float = Field(ge=10, le=1000)
    languages: list[str] = Field(default_factory=list)
    specializations: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    availability: dict[str, DayAvailabilitySchema] | None = None
    qualifications: list[QualificationSchema] = Field(default_factory=list)
    certifications: list[CertificationSchema] = Field(default_factory=list)


class UpdateConsultantRequest(CamelModel):
    categories: list[str] | None = Field(default=None, min_length=1)
    bio: str | None = Field(default=None, min_length=50, max_length=1000)
    experience: int | None = Field(default=None, ge=0, le=50)
    hourly_rate: float | None = Field(default=None, ge=10, le=1000)
    languages: list[str] | None = None
    specializations: list[str] | None = None
    achievements: list[str] | None = None
    availability: dict[str, DayAvailabilitySchema] | None = None
    qualifications: list[QualificationSchema] | None = None
    certifications: list[CertificationSchema] | None = None
    is_active: bool | None = None


class VerifyConsultantRequest(CamelModel):
    is_verified: bool


class RatingSummaryOut(CamelModel):
    average: float = 0.0
    count: int = 0


class ConsultantOut(CamelModel):
    id: str
    user_id: str
    categories: list[str]
    bio: str
    experience: int
    hourly_rate: float
    availability: dict[str, DayAvailabilitySchema]
    qualifications: list[QualificationSchema]
    certifications: list[CertificationSchema]
    languages: list[str]
    specializations: list[str]
    achievements: list[str]
    rating: RatingSummaryOut
    is_verified: bool
    is_active: bool
    is_currently_available: bool
    total_bookings: int
    completed_bookings: int
    completion_rate: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def of(cls, consultant) -> ConsultantOut:
        rating = consultant.rating
        return cls(
            id=str(consultant.id),
            user_id=str(consultant.user_id),
            categories=consultant.categories,
            bio=consultant.bio,
            experience=consultant.experience,
            hourly_rate=consultant.hourly_rate,
            availability={
                weekday: DayAvailabilitySchema(
                    is_available=bool(window.is_available),
                    start_time=window.start_time,
                    end_time=window.end_time,
                )
                for weekday, window in ((day, consultant.availability_for(day)) for day in WEEKDAYS)
            },
            qualifications=[
                QualificationSchema(name=q.name, institution=q.institution, year=q.year)
                for q in consultant.qualifications
            ],
            certifications=[
                CertificationSchema(
                    name=c.name,
                    issuing_body=c.issuing_body,
                    issue_date=c.issue_date,
                    expiry_date=c.expiry_date,
                )
                for c in consultant.certifications
            ],
            languages=consultant.language_list,
            specializations=consultant.specialization_list,
            achievements=consultant.achievement_list,
            rating=RatingSummaryOut(average=rating.average, count=rating.count) if rating else RatingSummaryOut(),
            is_verified=bool(consultant.is_verified),
            is_active=bool(consultant.is_active),
            is_currently_available=consultant.is_currently_available,
            total_bookings=consultant.total_bookings or 0,
            completed_bookings=consultant.completed_bookings or 0,
            completion_rate=consultant.completion_rate,
            created_at=consultant.created_at,
            updated_at=consultant.updated_at,
        )


class ConsultantData(CamelModel):
    consultant: ConsultantOut


class ConsultantListData(CamelModel):
    consultants: list[ConsultantOut]
    pagination: Pagination | None = None


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------
class ClientNotesSchema(CamelModel):
    client: str | None = Field(default=None, max_length=500)


class ConsultantNotesSchema(CamelModel):
    consultant: str | None = Field(default=None, max_length=500)


class CreateBookingRequest(CamelModel):
    consultant: str
    category: str
    date: CalendarDate
    start_time: str = Field(pattern=HH_MM)
    # Accepted for compatibility; the stored end time is always derived
    end_time: str | None = Field(default=None, pattern=HH_MM)
    duration: int = Field(ge=30, le=480)
    total_amount: float | None = Field(default=None, ge=0)
    meeting_type: MeetingTypeName = "video"
    notes: ClientNotesSchema | None = None
    location: str | None = Field(default=None, max_length=200)


class ChangeStatusRequest(CamelModel):
    status: TargetStatusName
    notes: ConsultantNotesSchema | None = None


class CancelBookingRequest(CamelModel):
    reason: str | None = Field(default=None, max_length=200)


class RateBookingRequest(CamelModel):
    score: int = Field(ge=1, le=5)
    review: str | None = Field(default=None, max_length=1000)


class BookingNotesOut(CamelModel):
    client: str | None = None
    consultant: str | None = None


class BookingRatingOut(CamelModel):
    score: int
    review: str | None = None
    created_at: datetime | None = None


class BookingOut(CamelModel):
    id: str
    client_id: str
    consultant_id: str
    category_id: str
    date: CalendarDate
    start_time: str
    end_time: str
    duration: int
    time_range: str
    duration_hours: float
    status: BookingStatusName
    total_amount: float
    notes: BookingNotesOut
    meeting_type: MeetingTypeName
    meeting_link: str | None = None
    location: str | None = None
    cancellation_reason: str | None = None
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None
    completed_at: datetime | None = None
    rating: BookingRatingOut | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def of(cls, booking) -> BookingOut:
        notes = booking.notes
        return cls(
            id=str(booking.id),
            client_id=str(booking.client_id),
            consultant_id=str(booking.consultant_id),
            category_id=str(booking.category_id),
            date=booking.date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            duration=booking.duration,
            time_range=booking.time_range,
            duration_hours=booking.duration_hours,
            status=booking.status,
            total_amount=booking.total_amount,
            notes=BookingNotesOut(
                client=notes.client if notes else None,
                consultant=notes.consultant if notes else None,
            ),
            meeting_type=booking.meeting_type,
            meeting_link=booking.meeting_link,
            location=booking.location,
            cancellation_reason=booking.cancellation_reason,
            cancelled_by=booking.cancelled_by,
            cancelled_at=booking.cancelled_at,
            completed_at=booking.completed_at,
            rating=(
                BookingRatingOut(
                    score=booking.rating.score,
                    review=booking.rating.review,
                    created_at=booking.rating.created_at,
                )
                if booking.is_rated
                else None
            ),
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class BookingData(CamelModel):
    booking: BookingOut


class BookingListData(CamelModel):
    bookings: list[BookingOut]
    pagination: Pagination | None = None


class ConflictData(CamelModel):
    has_conflict: bool
    conflicting_booking: BookingOut | None = None


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
class DashboardStats(CamelModel):
    total_consultants: int
    total_categories: int
    total_bookings: int


class DashboardData(CamelModel):
    stats: DashboardStats
    booking_stats: dict[str, int]
    recent_bookings: list[BookingOut]
    top_categories: list[CategoryOut]
    top_consultants: list[ConsultantOut]


class ReconcileData(CamelModel):
    categories_fixed: int
    consultants_fixed: int


# ---------------------------------------------------------------------------
# Service catalogue
# ---------------------------------------------------------------------------
class ServiceOut(CamelModel):
    id: str
    title: str
    description: str | None = None
    image: str | None = None
    category: str | None = None
    duration: str | None = None
    price: float | None = None
    rating: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def of(cls, service) -> ServiceOut:
        return cls(
            id=str(service.id),
            title=service.title,
            description=service.description,
            image=service.image,
            category=service.category,
            duration=service.duration,
            price=service.price,
            rating=service.rating,
            created_at=service.created_at,
            updated_at=service.updated_at,
        )


class ServiceData(CamelModel):
    service: ServiceOut


class ServiceListData(CamelModel):
    services: list[ServiceOut]

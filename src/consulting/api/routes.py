"""FastAPI routes for the Zentro marketplace.

Write routes translate Pydantic schemas into Protean commands and process
them synchronously; read routes go straight to repositories and the read-side
services. Every response is wrapped in ``ApiResponse``.
"""

import json
from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from consulting.admin.dashboard import build_dashboard
from consulting.admin.reconciliation import ReconcileCounters
from consulting.api.auth import current_caller, require_roles
from consulting.api.schemas import (
    ApiResponse,
    BookingData,
    BookingListData,
    BookingOut,
    CancelBookingRequest,
    CategoryData,
    CategoryListData,
    CategoryOut,
    ChangeStatusRequest,
    ConflictData,
    ConsultantData,
    ConsultantListData,
    ConsultantOut,
    CreateBookingRequest,
    CreateCategoryRequest,
    CreateConsultantRequest,
    DashboardData,
    DashboardStats,
    Pagination,
    RateBookingRequest,
    ReconcileData,
    ServiceData,
    ServiceListData,
    ServiceOut,
    UpdateCategoryRequest,
    UpdateConsultantRequest,
    VerifyConsultantRequest,
)
from consulting.booking.booking import Booking
from consulting.booking.cancellation import CancelBooking
from consulting.booking.creation import CreateBooking
from consulting.booking.queries import BookingQueries
from consulting.booking.rating import RateBooking
from consulting.booking.status import ChangeBookingStatus
from consulting.catalog.service import Service
from consulting.category.category import Category
from consulting.category.management import CreateCategory, DeleteCategory, UpdateCategory
from consulting.category.registry import CategoryRegistry
from consulting.consultant.directory import ConsultantDirectory
from consulting.consultant.profile import CreateConsultantProfile, UpdateConsultantProfile
from consulting.consultant.verification import VerifyConsultant
from consulting.shared.access import Caller, Role

MAX_PAGE_SIZE = 50
MAX_ADMIN_PAGE_SIZE = 100

ConsultantSort = Literal["rating", "hourlyRate", "experience"]
SortOrder = Literal["asc", "desc"]
BookingStatusFilter = Literal["pending", "confirmed", "completed", "cancelled", "no-show"]

admin_only = require_roles(Role.ADMIN)
client_only = require_roles(Role.CLIENT)
consultant_only = require_roles(Role.CONSULTANT)
consultant_or_admin = require_roles(Role.CONSULTANT, Role.ADMIN)


def _json_list(items):
    return json.dumps([item.model_dump(mode="json") for item in items]) if items is not None else None


def _json_availability(availability):
    if availability is None:
        return None
    return json.dumps({weekday: window.model_dump() for weekday, window in availability.items()})


# ---------------------------------------------------------------------------
# Category Router
# ---------------------------------------------------------------------------
category_router = APIRouter(prefix="/categories", tags=["categories"])


@category_router.get("", response_model=ApiResponse[CategoryListData])
async def list_categories(
    active: bool | None = None,
    sort: Literal["name", "sortOrder", "consultantCount"] = "sortOrder",
    order: SortOrder = "asc",
):
    """List categories, optionally only the active ones."""
    categories = current_domain.repository_for(Category).listing(active=active, sort=sort, order=order)
    return ApiResponse(data=CategoryListData(categories=[CategoryOut.of(c) for c in categories]))


@category_router.get("/{category_id}", response_model=ApiResponse[CategoryData])
async def get_category(category_id: str):
    category = CategoryRegistry.for_domain(current_domain).get(category_id)
    return ApiResponse(data=CategoryData(category=CategoryOut.of(category)))


@category_router.get("/{category_id}/consultants", response_model=ApiResponse[ConsultantListData])
async def list_category_consultants(
    category_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=MAX_PAGE_SIZE),
    sort: ConsultantSort = "rating",
    order: SortOrder = "desc",
):
    """Active consultants offering the category."""
    CategoryRegistry.for_domain(current_domain).get(category_id)
    consultants, total = ConsultantDirectory.for_domain(current_domain).listing(
        category=category_id, active=True, sort=sort, order=order, page=page, limit=limit
    )
    return ApiResponse(
        data=ConsultantListData(
            consultants=[ConsultantOut.of(c) for c in consultants],
            pagination=Pagination.of(page, limit, total),
        )
    )


@category_router.post("", status_code=201, response_model=ApiResponse[CategoryData])
async def create_category(body: CreateCategoryRequest, caller: Caller = Depends(admin_only)):
    command = CreateCategory(
        name=body.name,
        description=body.description,
        icon=body.icon,
        color=body.color,
        sort_order=body.sort_order,
    )
    category_id = current_domain.process(command, asynchronous=False)
    category = CategoryRegistry.for_domain(current_domain).get(category_id)
    return ApiResponse(message="Category created successfully", data=CategoryData(category=CategoryOut.of(category)))


@category_router.put("/{category_id}", response_model=ApiResponse[CategoryData])
async def update_category(category_id: str, body: UpdateCategoryRequest, caller: Caller = Depends(admin_only)):
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        icon=body.icon,
        color=body.color,
        sort_order=body.sort_order,
        is_active=body.is_active,
    )
    current_domain.process(command, asynchronous=False)
    category = CategoryRegistry.for_domain(current_domain).get(category_id)
    return ApiResponse(message="Category updated successfully", data=CategoryData(category=CategoryOut.of(category)))


@category_router.delete("/{category_id}", response_model=ApiResponse[None])
async def delete_category(category_id: str, caller: Caller = Depends(admin_only)):
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return ApiResponse(message="Category deleted successfully")


# ---------------------------------------------------------------------------
# Consultant Router
# ---------------------------------------------------------------------------
consultant_router = APIRouter(prefix="/consultants", tags=["consultants"])


@consultant_router.get("", response_model=ApiResponse[ConsultantListData])
async def list_consultants(
    category: str | None = None,
    min_rate: float | None = Query(default=None, alias="minRate", ge=0),
    max_rate: float | None = Query(default=None, alias="maxRate", ge=0),
    active: bool = True,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=MAX_PAGE_SIZE),
    sort: ConsultantSort = "rating",
    order: SortOrder = "desc",
):
    consultants, total = ConsultantDirectory.for_domain(current_domain).listing(
        category=category,
        active=active,
        min_rate=min_rate,
        max_rate=max_rate,
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    return ApiResponse(
        data=ConsultantListData(
            consultants=[ConsultantOut.of(c) for c in consultants],
            pagination=Pagination.of(page, limit, total),
        )
    )


@consultant_router.get("/top-rated", response_model=ApiResponse[ConsultantListData])
async def top_rated_consultants(order: SortOrder = "desc"):
    """Ten active consultants ranked by rating, best first unless ``order=asc``."""
    consultants = ConsultantDirectory.for_domain(current_domain).top_rated(order=order)
    return ApiResponse(data=ConsultantListData(consultants=[ConsultantOut.of(c) for c in consultants]))


@consultant_router.get("/me", response_model=ApiResponse[ConsultantData])
async def my_consultant_profile(caller: Caller = Depends(consultant_only)):
    consultant = ConsultantDirectory.for_domain(current_domain).profile_of(caller.id)
    return ApiResponse(data=ConsultantData(consultant=ConsultantOut.of(consultant)))


@consultant_router.get("/{consultant_id}", response_model=ApiResponse[ConsultantData])
async def get_consultant(consultant_id: str):
    consultant = ConsultantDirectory.for_domain(current_domain).get(consultant_id)
    return ApiResponse(data=ConsultantData(consultant=ConsultantOut.of(consultant)))


@consultant_router.post("", status_code=201, response_model=ApiResponse[ConsultantData])
async def create_consultant(body: CreateConsultantRequest, caller: Caller = Depends(consultant_only)):
    """Publish the caller's consultant profile. Each user gets at most one."""
    command = CreateConsultantProfile(
        user_id=caller.id,
        category_ids=json.dumps(body.categories),
        bio=body.bio,
        experience=body.experience,
        hourly_rate=body.hourly_rate,
        languages=json.dumps(body.languages),
        specializations=json.dumps(body.specializations),
        achievements=json.dumps(body.achievements),
        availability=_json_availability(body.availability),
        qualifications=_json_list(body.qualifications),
        certifications=_json_list(body.certifications),
    )
    consultant_id = current_domain.process(command, asynchronous=False)
    consultant = ConsultantDirectory.for_domain(current_domain).get(consultant_id)
    return ApiResponse(
        message="Consultant profile created successfully",
        data=ConsultantData(consultant=ConsultantOut.of(consultant)),
    )


@consultant_router.put("/{consultant_id}", response_model=ApiResponse[ConsultantData])
async def update_consultant(
    consultant_id: str,
    body: UpdateConsultantRequest,
    caller: Caller = Depends(current_caller),
):
    """Patch a profile. Only its owner or an admin may do so."""
    command = UpdateConsultantProfile(
        consultant_id=consultant_id,
        actor_id=caller.id,
        actor_role=caller.role.value,
        category_ids=json.dumps(body.categories) if body.categories is not None else None,
        bio=body.bio,
        experience=body.experience,
        hourly_rate=body.hourly_rate,
        languages=json.dumps(body.languages) if body.languages is not None else None,
        specializations=json.dumps(body.specializations) if body.specializations is not None else None,
        achievements=json.dumps(body.achievements) if body.achievements is not None else None,
        availability=_json_availability(body.availability),
        qualifications=_json_list(body.qualifications),
        certifications=_json_list(body.certifications),
        is_active=body.is_active,
    )
    current_domain.process(command, asynchronous=False)
    consultant = ConsultantDirectory.for_domain(current_domain).get(consultant_id)
    return ApiResponse(
        message="Consultant profile updated successfully",
        data=ConsultantData(consultant=ConsultantOut.of(consultant)),
    )


# ---------------------------------------------------------------------------
# Booking Router
# ---------------------------------------------------------------------------
booking_router = APIRouter(prefix="/bookings", tags=["bookings"])


def _booking(booking_id) -> BookingOut:
    return BookingOut.of(current_domain.repository_for(Booking).get(str(booking_id)))


@booking_router.post("", status_code=201, response_model=ApiResponse[BookingData])
async def create_booking(body: CreateBookingRequest, caller: Caller = Depends(client_only)):
    command = CreateBooking(
        client_id=caller.id,
        consultant_id=body.consultant,
        category_id=body.category,
        date=body.date,
        start_time=body.start_time,
        duration=body.duration,
        total_amount=body.total_amount,
        meeting_type=body.meeting_type,
        client_notes=body.notes.client if body.notes else None,
        location=body.location,
    )
    booking_id = current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Booking created successfully", data=BookingData(booking=_booking(booking_id)))


@booking_router.get("", response_model=ApiResponse[BookingListData])
async def list_bookings(
    status: BookingStatusFilter | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=MAX_PAGE_SIZE),
    caller: Caller = Depends(current_caller),
):
    bookings, total = BookingQueries.for_domain(current_domain).listing(caller, status=status, page=page, limit=limit)
    return ApiResponse(
        data=BookingListData(
            bookings=[BookingOut.of(b) for b in bookings],
            pagination=Pagination.of(page, limit, total),
        )
    )


@booking_router.get("/me", response_model=ApiResponse[BookingListData])
async def my_bookings(caller: Caller = Depends(current_caller)):
    bookings = BookingQueries.for_domain(current_domain).mine(caller)
    return ApiResponse(data=BookingListData(bookings=[BookingOut.of(b) for b in bookings]))


@booking_router.get("/conflicts", response_model=ApiResponse[ConflictData])
async def check_conflicts(
    consultant: str,
    on_date: date = Query(alias="date"),
    start_time: str = Query(alias="startTime"),
    end_time: str = Query(alias="endTime"),
    exclude: str | None = None,
    caller: Caller = Depends(current_caller),
):
    """Report whether a slot overlaps one of the consultant's live bookings."""
    conflict = BookingQueries.for_domain(current_domain).conflict(
        consultant, on_date, start_time, end_time, exclude=exclude
    )
    return ApiResponse(
        data=ConflictData(
            has_conflict=conflict is not None,
            conflicting_booking=BookingOut.of(conflict) if conflict is not None else None,
        )
    )


@booking_router.get("/{booking_id}", response_model=ApiResponse[BookingData])
async def get_booking(booking_id: str, caller: Caller = Depends(current_caller)):
    booking = BookingQueries.for_domain(current_domain).visible(booking_id, caller)
    return ApiResponse(data=BookingData(booking=BookingOut.of(booking)))


def _change_status(booking_id, body: ChangeStatusRequest, caller: Caller):
    command = ChangeBookingStatus(
        booking_id=booking_id,
        status=body.status,
        actor_id=caller.id,
        actor_role=caller.role.value,
        consultant_notes=body.notes.consultant if body.notes else None,
    )
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Booking status updated successfully", data=BookingData(booking=_booking(booking_id)))


@booking_router.put("/{booking_id}/status", response_model=ApiResponse[BookingData])
async def change_booking_status(
    booking_id: str,
    body: ChangeStatusRequest,
    caller: Caller = Depends(consultant_or_admin),
):
    return _change_status(booking_id, body, caller)


@booking_router.post("/{booking_id}/cancel", response_model=ApiResponse[BookingData])
async def cancel_booking(
    booking_id: str,
    body: CancelBookingRequest | None = None,
    caller: Caller = Depends(client_only),
):
    command = CancelBooking(booking_id=booking_id, client_id=caller.id, reason=body.reason if body else None)
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Booking cancelled successfully", data=BookingData(booking=_booking(booking_id)))


@booking_router.post("/{booking_id}/rate", response_model=ApiResponse[BookingData])
async def rate_booking(booking_id: str, body: RateBookingRequest, caller: Caller = Depends(client_only)):
    command = RateBooking(booking_id=booking_id, client_id=caller.id, score=body.score, review=body.review)
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Booking rated successfully", data=BookingData(booking=_booking(booking_id)))


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_only)])


@admin_router.get("/dashboard", response_model=ApiResponse[DashboardData])
async def dashboard():
    board = build_dashboard(current_domain)
    return ApiResponse(
        data=DashboardData(
            stats=DashboardStats(
                total_consultants=board.total_consultants,
                total_categories=board.total_categories,
                total_bookings=board.total_bookings,
            ),
            booking_stats=board.bookings_by_status,
            recent_bookings=[BookingOut.of(b) for b in board.recent_bookings],
            top_categories=[CategoryOut.of(c) for c in board.top_categories],
            top_consultants=[ConsultantOut.of(c) for c in board.top_consultants],
        )
    )


@admin_router.get("/consultants", response_model=ApiResponse[ConsultantListData])
async def admin_list_consultants(
    verified: bool | None = None,
    active: bool | None = None,
    category: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=MAX_ADMIN_PAGE_SIZE),
):
    consultants, total = ConsultantDirectory.for_domain(current_domain).listing(
        category=category,
        active=active,
        verified=verified,
        sort="createdAt",
        order="desc",
        page=page,
        limit=limit,
    )
    return ApiResponse(
        data=ConsultantListData(
            consultants=[ConsultantOut.of(c) for c in consultants],
            pagination=Pagination.of(page, limit, total),
        )
    )


@admin_router.put("/consultants/{consultant_id}/verify", response_model=ApiResponse[ConsultantData])
async def verify_consultant(consultant_id: str, body: VerifyConsultantRequest):
    current_domain.process(
        VerifyConsultant(consultant_id=consultant_id, is_verified=body.is_verified),
        asynchronous=False,
    )
    consultant = ConsultantDirectory.for_domain(current_domain).get(consultant_id)
    verb = "verified" if body.is_verified else "unverified"
    return ApiResponse(
        message=f"Consultant {verb} successfully",
        data=ConsultantData(consultant=ConsultantOut.of(consultant)),
    )


@admin_router.get("/bookings", response_model=ApiResponse[BookingListData])
async def admin_list_bookings(
    status: BookingStatusFilter | None = None,
    date_from: date | None = Query(default=None, alias="dateFrom"),
    date_to: date | None = Query(default=None, alias="dateTo"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=MAX_ADMIN_PAGE_SIZE),
):
    """All bookings, newest first."""
    bookings, total = BookingQueries.for_domain(current_domain).for_admin(
        status=status, date_from=date_from, date_to=date_to, page=page, limit=limit
    )
    return ApiResponse(
        data=BookingListData(
            bookings=[BookingOut.of(b) for b in bookings],
            pagination=Pagination.of(page, limit, total),
        )
    )


@admin_router.put("/bookings/{booking_id}/status", response_model=ApiResponse[BookingData])
async def admin_change_booking_status(
    booking_id: str,
    body: ChangeStatusRequest,
    caller: Caller = Depends(admin_only),
):
    return _change_status(booking_id, body, caller)


@admin_router.post("/reconcile", response_model=ApiResponse[ReconcileData])
async def reconcile_counters(caller: Caller = Depends(admin_only)):
    result = current_domain.process(ReconcileCounters(requested_by=caller.id), asynchronous=False)
    return ApiResponse(
        message="Counters reconciled",
        data=ReconcileData(categories_fixed=result["categories"], consultants_fixed=result["consultants"]),
    )


# ---------------------------------------------------------------------------
# Service Router
# ---------------------------------------------------------------------------
service_router = APIRouter(prefix="/services", tags=["services"])


@service_router.get("", response_model=ApiResponse[ServiceListData])
async def list_services(category: str | None = None):
    services = current_domain.repository_for(Service).listing(category=category)
    return ApiResponse(data=ServiceListData(services=[ServiceOut.of(s) for s in services]))


@service_router.get("/{service_id}", response_model=ApiResponse[ServiceData])
async def get_service(service_id: str):
    service = current_domain.repository_for(Service).get(service_id)
    return ApiResponse(data=ServiceData(service=ServiceOut.of(service)))

"""Consultant aggregate — a service provider's published profile.

A consultant belongs to exactly one user and to one or more categories.
``total_bookings``, ``completed_bookings`` and ``rating`` are aggregates of
the consultant's bookings: only the booking write path changes them, through
``ConsultantDirectory``.
"""

import json
from datetime import UTC, date, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    Date,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from consulting.consultant.events import (
    ConsultantProfileUpdated,
    ConsultantRatingRecalculated,
    ConsultantRegistered,
    ConsultantVerificationChanged,
)
from consulting.domain import consulting
from consulting.shared import timeslots

_UNSET = object()


class Language(Enum):
    ENGLISH = "English"
    SPANISH = "Spanish"
    FRENCH = "French"
    GERMAN = "German"
    CHINESE = "Chinese"
    JAPANESE = "Japanese"
    KOREAN = "Korean"
    ARABIC = "Arabic"
    HINDI = "Hindi"
    PORTUGUESE = "Portuguese"
    RUSSIAN = "Russian"
    ITALIAN = "Italian"
    DUTCH = "Dutch"
    SWEDISH = "Swedish"
    NORWEGIAN = "Norwegian"
    DANISH = "Danish"
    FINNISH = "Finnish"
    POLISH = "Polish"
    TURKISH = "Turkish"
    GREEK = "Greek"


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_LANGUAGES = {language.value for language in Language}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@consulting.value_object(part_of="Consultant")
class DayAvailability:
    """The working window for one weekday."""

    is_available = Boolean(default=False)
    start_time = String(max_length=5, default="09:00")
    end_time = String(max_length=5, default="17:00")

    @invariant.post
    def window_must_be_valid(self):
        for field in ("start_time", "end_time"):
            if not timeslots.is_valid_time(getattr(self, field)):
                raise ValidationError({field: ["Time must be in HH:MM format"]})
        if self.is_available and timeslots.to_minutes(self.start_time) >= timeslots.to_minutes(self.end_time):
            raise ValidationError({"end_time": ["End time must be after start time"]})


@consulting.value_object(part_of="Consultant")
class RatingSummary:
    """Average score and number of rated bookings."""

    average = Float(default=0.0, min_value=0.0, max_value=5.0)
    count = Integer(default=0, min_value=0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@consulting.entity(part_of="Consultant")
class Qualification:
    name = String(required=True, max_length=200)
    institution = String(required=True, max_length=200)
    year = Integer(required=True, min_value=1900)

    @invariant.post
    def year_cannot_be_in_future(self):
        if self.year is not None and self.year > date.today().year:
            raise ValidationError({"year": ["Year cannot be in the future"]})


@consulting.entity(part_of="Consultant")
class Certification:
    name = String(required=True, max_length=200)
    issuing_body = String(required=True, max_length=200)
    issue_date = Date(required=True)
    expiry_date = Date()

    @invariant.post
    def expiry_after_issue(self):
        if self.expiry_date and self.issue_date and self.expiry_date < self.issue_date:
            raise ValidationError({"expiry_date": ["Expiry date cannot be before issue date"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@consulting.aggregate
class Consultant:
    user_id = Identifier(required=True)
    category_ids = Text(required=True)  # JSON array of category ids

    bio = String(required=True, max_length=1000)
    experience = Integer(required=True, min_value=0, max_value=50)
    hourly_rate = Float(required=True, min_value=10.0, max_value=1000.0)

    monday = ValueObject(DayAvailability)
    tuesday = ValueObject(DayAvailability)
    wednesday = ValueObject(DayAvailability)
    thursday = ValueObject(DayAvailability)
    friday = ValueObject(DayAvailability)
    saturday = ValueObject(DayAvailability)
    sunday = ValueObject(DayAvailability)

    qualifications = HasMany(Qualification)
    certifications = HasMany(Certification)
    languages = Text()  # JSON array of Language values
    specializations = Text()  # JSON array of strings
    achievements = Text()  # JSON array of strings

    rating = ValueObject(RatingSummary)
    is_verified = Boolean(default=False)
    is_active = Boolean(default=True)
    total_bookings = Integer(default=0, min_value=0)
    completed_bookings = Integer(default=0, min_value=0)

    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def must_belong_to_a_category(self):
        if not self.categories:
            raise ValidationError({"categories": ["At least one category is required"]})

    @invariant.post
    def bio_minimum_length(self):
        if self.bio is not None and len(self.bio.strip()) < 50:
            raise ValidationError({"bio": ["Bio must be between 50 and 1000 characters"]})

    @invariant.post
    def languages_must_be_supported(self):
        unsupported = [language for language in self.language_list if language not in _LANGUAGES]
        if unsupported:
            raise ValidationError({"languages": [f"Unsupported language: {unsupported[0]}"]})

    @invariant.post
    def completed_cannot_exceed_total(self):
        if (self.completed_bookings or 0) > (self.total_bookings or 0):
            raise ValidationError({"completed_bookings": ["Completed bookings cannot exceed total bookings"]})

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def categories(self):
        return json.loads(self.category_ids) if self.category_ids else []

    @property
    def language_list(self):
        return json.loads(self.languages) if self.languages else []

    @property
    def specialization_list(self):
        return json.loads(self.specializations) if self.specializations else []

    @property
    def achievement_list(self):
        return json.loads(self.achievements) if self.achievements else []

    @property
    def counted_categories(self):
        """Categories whose consultant_count includes this consultant."""
        return set(self.categories) if self.is_active else set()

    @property
    def completion_rate(self):
        if not self.total_bookings:
            return 0
        return round(self.completed_bookings / self.total_bookings * 100)

    def availability_for(self, weekday):
        return getattr(self, weekday) or DayAvailability()

    def is_available_at(self, moment):
        window = self.availability_for(WEEKDAYS[moment.weekday()])
        if not window.is_available:
            return False
        return timeslots.within(moment.strftime("%H:%M"), window.start_time, window.end_time)

    @property
    def is_currently_available(self):
        return self.is_available_at(datetime.now())

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(
        cls,
        user_id,
        category_ids,
        bio,
        experience,
        hourly_rate,
        languages=None,
        specializations=None,
        achievements=None,
        availability=None,
        qualifications=None,
        certifications=None,
    ):
        now = datetime.now(UTC)
        category_ids = _unique_ids(category_ids)

        consultant = cls(
            user_id=user_id,
            category_ids=json.dumps(category_ids),
            bio=bio.strip() if bio else bio,
            experience=experience,
            hourly_rate=hourly_rate,
            languages=json.dumps(languages or []),
            specializations=json.dumps(specializations or []),
            achievements=json.dumps(achievements or []),
            rating=RatingSummary(average=0.0, count=0),
            is_verified=False,
            is_active=True,
            total_bookings=0,
            completed_bookings=0,
            created_at=now,
            updated_at=now,
            **_availability_values(availability or {}),
        )

        for item in qualifications or []:
            consultant.add_qualifications(Qualification(**item))
        for item in certifications or []:
            consultant.add_certifications(Certification(**item))

        consultant.raise_(
            ConsultantRegistered(
                consultant_id=str(consultant.id),
                user_id=str(user_id),
                category_ids=consultant.category_ids,
                hourly_rate=hourly_rate,
                registered_at=now,
            )
        )
        return consultant

    # -------------------------------------------------------------------
    # Profile maintenance
    # -------------------------------------------------------------------
    def update_profile(
        self,
        category_ids=_UNSET,
        bio=_UNSET,
        experience=_UNSET,
        hourly_rate=_UNSET,
        languages=_UNSET,
        specializations=_UNSET,
        achievements=_UNSET,
        availability=_UNSET,
        qualifications=_UNSET,
        certifications=_UNSET,
        is_active=_UNSET,
    ):
        """Patch the profile. Returns the names of the fields that were supplied."""
        changed = []
        now = datetime.now(UTC)

        with atomic_change(self):
            if category_ids is not _UNSET:
                self.category_ids = json.dumps(_unique_ids(category_ids))
                changed.append("categories")
            if bio is not _UNSET:
                self.bio = bio.strip() if bio else bio
                changed.append("bio")
            if experience is not _UNSET:
                self.experience = experience
                changed.append("experience")
            if hourly_rate is not _UNSET:
                self.hourly_rate = hourly_rate
                changed.append("hourly_rate")
            for field, value in (
                ("languages", languages),
                ("specializations", specializations),
                ("achievements", achievements),
            ):
                if value is not _UNSET:
                    setattr(self, field, json.dumps(value or []))
                    changed.append(field)
            if availability is not _UNSET:
                for weekday, window in _availability_values(availability or {}, partial=True).items():
                    setattr(self, weekday, window)
                changed.append("availability")
            if is_active is not _UNSET:
                self.is_active = is_active
                changed.append("is_active")
            self.updated_at = now

        if qualifications is not _UNSET:
            for existing in list(self.qualifications):
                self.remove_qualifications(existing)
            for item in qualifications or []:
                self.add_qualifications(Qualification(**item))
            changed.append("qualifications")
        if certifications is not _UNSET:
            for existing in list(self.certifications):
                self.remove_certifications(existing)
            for item in certifications or []:
                self.add_certifications(Certification(**item))
            changed.append("certifications")

        self.raise_(
            ConsultantProfileUpdated(
                consultant_id=str(self.id),
                changed_fields=json.dumps(changed),
                category_ids=self.category_ids,
                is_active=self.is_active,
                updated_at=now,
            )
        )
        return changed

    def set_verified(self, is_verified):
        now = datetime.now(UTC)
        self.is_verified = is_verified
        self.updated_at = now

        self.raise_(
            ConsultantVerificationChanged(
                consultant_id=str(self.id),
                is_verified=is_verified,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Booking aggregates
    # -------------------------------------------------------------------
    def record_booking(self):
        self.total_bookings = (self.total_bookings or 0) + 1

    def record_completion(self):
        self.completed_bookings = (self.completed_bookings or 0) + 1

    def apply_rating(self, average, count):
        now = datetime.now(UTC)
        self.rating = RatingSummary(average=average, count=count)
        self.updated_at = now

        self.raise_(
            ConsultantRatingRecalculated(
                consultant_id=str(self.id),
                average=average,
                count=count,
                recalculated_at=now,
            )
        )

    def restate_counters(self, total_bookings, completed_bookings):
        """Overwrite booking counters with values re-derived from bookings."""
        with atomic_change(self):
            self.total_bookings = total_bookings
            self.completed_bookings = completed_bookings


def _unique_ids(ids):
    seen = []
    for value in ids or []:
        value = str(value)
        if value not in seen:
            seen.append(value)
    return seen


def _availability_values(availability, partial=False):
    """Build DayAvailability values from ``{weekday: {is_available, start_time, end_time}}``.

    Unknown weekdays are rejected. With ``partial`` only the supplied days are
    returned; otherwise every weekday gets a value.
    """
    unknown = set(availability) - set(WEEKDAYS)
    if unknown:
        raise ValidationError({"availability": [f"Unknown weekday: {sorted(unknown)[0]}"]})

    values = {}
    for weekday in WEEKDAYS:
        window = availability.get(weekday)
        if window is None:
            if not partial:
                values[weekday] = DayAvailability()
            continue
        values[weekday] = DayAvailability(
            is_available=window.get("is_available", False),
            start_time=timeslots.normalize(window.get("start_time") or "09:00", "start_time"),
            end_time=timeslots.normalize(window.get("end_time") or "17:00", "end_time"),
        )
    return values

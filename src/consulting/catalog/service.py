"""Service aggregate — a read-only catalogue entry.

Services are packaged consultations shown on the marketing pages: a title,
a nominal duration label such as "60 min", a list price and a display
rating. They are loaded by ``manage.py seed-services`` and never written
through the API.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, String, Text

from consulting.domain import consulting


@consulting.aggregate
class Service:
    title = String(required=True, max_length=200)
    description = Text()
    image = String(max_length=500)
    category = String(max_length=100)
    duration = String(max_length=20)
    price = Float(min_value=0.0)
    rating = Float(min_value=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def rating_is_at_most_five(self):
        if self.rating is not None and self.rating > 5:
            raise ValidationError({"rating": ["Rating must be between 0 and 5"]})

    @classmethod
    def publish(cls, title, description=None, image=None, category=None, duration=None, price=None, rating=None):
        now = datetime.now(UTC)
        return cls(
            title=title.strip() if title else title,
            description=description,
            image=image,
            category=category,
            duration=duration,
            price=price,
            rating=rating,
            created_at=now,
            updated_at=now,
        )

"""Rating aggregation over a consultant's rated bookings.

Always a full recomputation from the scores that are currently visible, so
a rating removed out of band is reflected the next time anything is rated or
reconciled. No running average is kept.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RatingSnapshot:
    average: float
    count: int


def summarize(scores) -> RatingSnapshot:
    scores = [score for score in scores if score is not None]
    if not scores:
        return RatingSnapshot(average=0.0, count=0)
    return RatingSnapshot(average=sum(scores) / len(scores), count=len(scores))


def scores_of(bookings):
    """Scores of the bookings that carry a rating."""
    return [booking.rating.score for booking in bookings if booking.rating and booking.rating.score is not None]

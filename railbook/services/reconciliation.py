import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import atomic
from . import inventory

logger = logging.getLogger(__name__)


def reconcile(db: Session) -> List[schemas.Correction]:
    """Rebuild every train's ``seat_available`` from its ticket count.

    Each train is fixed in its own unit while holding the train row lock, so a
    booking or cancellation on the same train waits for the repair and vice
    versa. Only trains whose counter was wrong are returned.
    """
    train_numbers = [row[0] for row in db.query(models.Train.train_no).order_by(models.Train.train_no).all()]
    db.commit()     # don't carry the read transaction into the per-train units

    corrections = []
    for train_no in train_numbers:
        with atomic(db):
            train = inventory.lock_train(db, train_no)
            if train is None:       # removed since the listing
                continue

            booked = db.query(func.count(models.Ticket.pnr_no)).filter(
                models.Ticket.train_no == train_no
            ).scalar()

            if booked > train.total_capacity:
                logger.warning(
                    "Train %s has %s tickets for %s seats", train_no, booked, train.total_capacity
                )

            correct_available = max(0, train.total_capacity - booked)
            if train.seat_available == correct_available:
                continue

            correction = schemas.Correction(
                train_no=train_no,
                old_available=train.seat_available,
                new_available=correct_available,
                booked_tickets=booked,
            )
            train.seat_available = correct_available

        logger.info(
            "Reconciled train %s: seat_available %s -> %s (%s booked)",
            train_no, correction.old_available, correction.new_available, booked,
        )
        corrections.append(correction)

    return corrections

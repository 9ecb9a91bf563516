"""
Train inventory: capacity reads and the ``seat_available`` counter.

``decrement_seat`` and ``increment_seat`` must only be called on a train
returned by ``lock_train`` inside an open atomic unit (see
``services/booking.py`` and ``services/reconciliation.py``). Nothing else
writes the counter.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from .. import models
from ..exceptions import SeatUnavailable, TrainNotFound

logger = logging.getLogger(__name__)


def get_train(db: Session, train_no: int) -> models.Train:
    train = db.query(models.Train).options(selectinload(models.Train.classes)).filter(
        models.Train.train_no == train_no
    ).first()

    if not train:
        raise TrainNotFound()
    return train


def get_capacity_snapshot(db: Session, train_no: int) -> Dict[str, int]:
    row = db.query(models.Train.total_capacity, models.Train.seat_available).filter(
        models.Train.train_no == train_no
    ).first()

    if row is None:
        raise TrainNotFound()

    total_capacity, seat_available = row
    return {"total_capacity": total_capacity, "seat_available": seat_available}


def list_trains(db: Session, source: Optional[str] = None, destination: Optional[str] = None) -> List[models.Train]:
    query = db.query(models.Train).options(selectinload(models.Train.classes))

    if source:
        query = query.filter(models.Train.source == source)
    if destination:
        query = query.filter(models.Train.destination == destination)

    return query.order_by(models.Train.train_no).all()


def lock_train(db: Session, train_no: int) -> Optional[models.Train]:
    """SELECT ... FOR UPDATE on the train row. Held until commit/rollback."""
    return db.query(models.Train).filter(
        models.Train.train_no == train_no
    ).with_for_update().populate_existing().first()


def decrement_seat(train: models.Train) -> None:
    if train.seat_available <= 0:
        raise SeatUnavailable()
    train.seat_available -= 1


def increment_seat(train: models.Train) -> None:
    if train.seat_available >= train.total_capacity:
        # counter already at capacity while a ticket existed: drift, leave it for reconcile
        logger.warning(
            "Train %s already at capacity (%s) on seat release, counter not incremented",
            train.train_no, train.total_capacity,
        )
        return
    train.seat_available += 1

"""
Booking and cancellation.

Each call is one atomic unit over the ticket, its payment row and the
train's ``seat_available`` counter: either every write lands or none do.

Lock order is train row for booking, and ticket row then train row for
cancellation. Bookings insert new tickets only, so the two never wait on
each other in opposite order.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas, utils
from ..config import settings
from ..database import atomic
from ..exceptions import CancellationWindowClosed, SeatUnavailable, TicketNotFound, TrainNotFound
from . import inventory

logger = logging.getLogger(__name__)


def _create_payment(db: Session, pnr_no: str, request: schemas.BookingCreate) -> models.Payment:
    payment = models.Payment(
        pnr_no=pnr_no,
        bank=request.bank or "N/A",
        card_no=utils.mask_card(request.card_no),
        amount=request.amount,
    )
    db.add(payment)
    db.flush()      # assigns transaction_id
    return payment


#------------------------------------------------------BOOK-----------------------------------------------------#

def book_ticket(db: Session, user_id: int, request: schemas.BookingCreate) -> Tuple[str, int]:
    """Reserve one seat on ``request.train_no`` and return ``(pnr_no, transaction_id)``."""
    with atomic(db):
        #1. lock the inventory row, concurrent bookings on this train queue here
        train = inventory.lock_train(db, request.train_no)

        #2. validate
        if train is None:
            raise TrainNotFound()

        if train.seat_available <= 0:
            logger.info("Booking rejected, train %s is full", request.train_no)
            raise SeatUnavailable()

        #3. ticket
        ticket = models.Ticket(
            pnr_no=utils.generate_pnr(),
            train_no=train.train_no,
            user_id=user_id,
            passenger_name=request.passenger_name,
            class_type=request.class_type,
            seat_no=request.seat_no or None,
            source=request.source,
            destination=request.destination,
            date_time=request.date_time,
        )
        db.add(ticket)
        db.flush()

        #4. payment stub
        payment = _create_payment(db, ticket.pnr_no, request)

        #5. counter
        inventory.decrement_seat(train)

        pnr_no, transaction_id, remaining = ticket.pnr_no, payment.transaction_id, train.seat_available

    logger.info(
        "Booked PNR %s on train %s for user %s, %s seats left",
        pnr_no, request.train_no, user_id, remaining,
    )
    return pnr_no, transaction_id


#------------------------------------------------------CANCEL-----------------------------------------------------#

def cancel_ticket(db: Session, pnr_no: str, user_id: int, now: Optional[datetime] = None) -> str:
    """Delete the caller's ticket and its payment, and release the seat."""
    now = now or utils.utcnow()
    window = timedelta(hours=settings.cancellation_window_hours)

    with atomic(db):
        #1. lock the ticket, filtering on owner so nobody cancels someone else's ticket
        ticket = db.query(models.Ticket).filter(
            models.Ticket.pnr_no == pnr_no,
            models.Ticket.user_id == user_id,
        ).with_for_update().populate_existing().first()

        if not ticket:
            raise TicketNotFound()

        #2. cancellation window
        if ticket.date_time - now < window:
            logger.info("Cancellation of PNR %s rejected, departure at %s", pnr_no, ticket.date_time)
            raise CancellationWindowClosed(
                f"Cannot cancel ticket within {settings.cancellation_window_hours} hours of departure"
            )

        train_no = ticket.train_no

        #3. payment goes first, it must never outlive its ticket
        db.query(models.Payment).filter(models.Payment.pnr_no == pnr_no).delete(synchronize_session=False)
        db.query(models.Ticket).filter(models.Ticket.pnr_no == pnr_no).delete(synchronize_session=False)

        #4. give the seat back
        train = inventory.lock_train(db, train_no)
        inventory.increment_seat(train)

    logger.info("Cancelled PNR %s on train %s for user %s", pnr_no, train_no, user_id)
    return pnr_no


#------------------------------------------------------READS-----------------------------------------------------#

def list_user_tickets(db: Session, user_id: int) -> List[schemas.TicketDetails]:
    results = db.query(models.Ticket, models.Payment.transaction_id).outerjoin(
        models.Payment, models.Ticket.pnr_no == models.Payment.pnr_no
    ).filter(
        models.Ticket.user_id == user_id
    ).order_by(
        models.Ticket.date_time.desc()
    ).all()

    response = []
    for ticket, transaction_id in results:
        details = schemas.TicketDetails.model_validate(ticket)
        details.transaction_id = transaction_id
        response.append(details)

    return response


def train_status(db: Session, train_no: int) -> dict:
    train = inventory.get_train(db, train_no)

    booked_count = db.query(func.count(models.Ticket.pnr_no)).filter(
        models.Ticket.train_no == train_no
    ).scalar()

    recent_bookings = db.query(models.Ticket).filter(
        models.Ticket.train_no == train_no
    ).order_by(
        models.Ticket.booking_time.desc()
    ).limit(5).all()

    return {
        "train_details": train,
        "booked_tickets_count": booked_count,
        "actual_available": train.seat_available,
        "recent_bookings": recent_bookings,
    }

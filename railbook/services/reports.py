from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, utils


def summary(db: Session) -> dict:
    today_start = utils.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)

    total_revenue = db.query(func.sum(models.Payment.amount)).scalar()

    return {
        "total_users": db.query(func.count(models.User.user_id)).scalar(),
        "total_trains": db.query(func.count(models.Train.train_no)).scalar(),
        "total_bookings": db.query(func.count(models.Ticket.pnr_no)).scalar(),
        "total_revenue": total_revenue if total_revenue is not None else Decimal("0"),
        "today_bookings": db.query(func.count(models.Ticket.pnr_no)).filter(
            models.Ticket.booking_time >= today_start
        ).scalar(),
    }


def popular_trains(db: Session, limit: int = 10) -> list:
    # bookings per train, only trains that have any
    booking_counts = db.query(
        models.Ticket.train_no.label("train_no"),
        func.count(models.Ticket.pnr_no).label("total_bookings"),
    ).group_by(models.Ticket.train_no).subquery()

    average = db.query(func.avg(booking_counts.c.total_bookings)).scalar_subquery()

    rows = db.query(models.Train, booking_counts.c.total_bookings).join(
        booking_counts, booking_counts.c.train_no == models.Train.train_no
    ).filter(
        booking_counts.c.total_bookings > average
    ).order_by(
        booking_counts.c.total_bookings.desc(), models.Train.train_no
    ).limit(limit).all()

    return [
        {
            "train_no": train.train_no,
            "train_name": train.train_name,
            "source": train.source,
            "destination": train.destination,
            "total_bookings": total_bookings,
        }
        for train, total_bookings in rows
    ]

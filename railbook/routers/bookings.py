from fastapi import Depends, APIRouter, status
from sqlalchemy.orm import Session
from typing import List

from .. import schemas, models
from ..database import get_db
from ..oauth2 import get_current_user
from ..services import booking, inventory


router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


#------------------------------------------------------BOOK TICKET ROUTE-----------------------------------------------------#

@router.post("/book", status_code=status.HTTP_200_OK, response_model=schemas.BookingResponse)
def book_ticket(request: schemas.BookingCreate, db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    pnr_no, transaction_id = booking.book_ticket(db, current_user.user_id, request)
    return {
        "message": "Booked successfully",
        "pnr_no": pnr_no,
        "transaction_id": transaction_id,
    }


#------------------------------------------------------GET MY TICKETS ROUTE-----------------------------------------------------#

@router.get("/my", status_code=status.HTTP_200_OK, response_model=List[schemas.TicketDetails])
def get_my_tickets(db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    return booking.list_user_tickets(db, current_user.user_id)


#------------------------------------------------------CANCEL TICKET ROUTE-----------------------------------------------------#

@router.delete("/cancel/{pnr_no}", status_code=status.HTTP_200_OK, response_model=schemas.CancelResponse)
def cancel_ticket(pnr_no: str, db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    booking.cancel_ticket(db, pnr_no, current_user.user_id)
    return {"message": "Ticket cancelled successfully", "pnr_no": pnr_no}


#------------------------------------------------------AVAILABILITY ROUTES-----------------------------------------------------#

@router.get("/seat-availability/{train_no}", status_code=status.HTTP_200_OK, response_model=schemas.SeatAvailability)
def seat_availability(train_no: int, db: Session = Depends(get_db)):
    snapshot = inventory.get_capacity_snapshot(db, train_no)
    return {
        "train_no": train_no,
        "available_seats": snapshot["seat_available"],
        "total_capacity": snapshot["total_capacity"],
    }


@router.get("/check-train-status/{train_no}", status_code=status.HTTP_200_OK, response_model=schemas.TrainStatus)
def check_train_status(train_no: int, db: Session = Depends(get_db)):
    return booking.train_status(db, train_no)

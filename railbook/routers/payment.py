from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..exceptions import PaymentNotFound
from ..oauth2 import get_current_user

router = APIRouter(prefix="/api/payments", tags=["Payments"])


@router.get("/pnr/{pnr_no}", status_code=status.HTTP_200_OK, response_model=schemas.PaymentResponse)
def get_payment(pnr_no: str, db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    # only the ticket owner sees the payment row
    payment = db.query(models.Payment).join(
        models.Ticket, models.Payment.pnr_no == models.Ticket.pnr_no
    ).filter(
        models.Payment.pnr_no == pnr_no,
        models.Ticket.user_id == current_user.user_id,
    ).first()

    if not payment:
        raise PaymentNotFound()

    return payment

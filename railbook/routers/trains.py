from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from .. import schemas
from ..database import get_db
from ..services import inventory

router = APIRouter(prefix="/api/trains", tags=["Trains"])


@router.get("/", status_code=status.HTTP_200_OK, response_model=List[schemas.TrainResponse])
def search_trains(source: Optional[str] = None, destination: Optional[str] = None, db: Session = Depends(get_db)):
    return inventory.list_trains(db, source=source, destination=destination)


@router.get("/{train_no}", status_code=status.HTTP_200_OK, response_model=schemas.TrainResponse)
def get_train(train_no: int, db: Session = Depends(get_db)):
    return inventory.get_train(db, train_no)

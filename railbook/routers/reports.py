from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from .. import schemas
from ..database import get_db
from ..services import reports

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/summary", status_code=status.HTTP_200_OK, response_model=schemas.Summary)
def get_summary(db: Session = Depends(get_db)):
    return reports.summary(db)


@router.get("/popular-trains", status_code=status.HTTP_200_OK, response_model=List[schemas.PopularTrain])
def get_popular_trains(db: Session = Depends(get_db)):
    return reports.popular_trains(db)

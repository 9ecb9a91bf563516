from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..oauth2 import get_current_admin
from ..services import reconciliation


router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/reconcile", status_code=status.HTTP_200_OK, response_model=schemas.ReconcileResponse)
def reconcile_seats(db: Session = Depends(get_db), current_admin: models.User = Depends(get_current_admin)):
    fixes = reconciliation.reconcile(db)
    return {"fixes_applied": len(fixes), "fixes": fixes}

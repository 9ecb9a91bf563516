from fastapi import APIRouter, status, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from .. import schemas
from ..services import auth as auth_service

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_200_OK, response_model=schemas.UserRegistered)
def register(user: schemas.UserCreate, db: Session = Depends(get_db)):
    user_id = auth_service.register_user(db, user)
    return {"message": "Registered", "user_id": user_id}


@router.post("/login", status_code=status.HTTP_200_OK, response_model=schemas.Token)
def login(user_credentials: schemas.UserLogin, db: Session = Depends(get_db)):
    token, user = auth_service.login(db, user_credentials.username, user_credentials.password)
    return {"token": token, "token_type": "bearer", "user": user}

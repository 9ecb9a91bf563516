import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, schemas, utils, oauth2
from ..exceptions import DuplicateCredential, InvalidCredentials

logger = logging.getLogger(__name__)


def register_user(db: Session, user: schemas.UserCreate) -> int:
    #1. reject duplicates before paying for the hash
    mobile_no = user.mobile_no or None
    clauses = [models.User.username == user.username]
    if mobile_no:
        clauses.append(models.User.mobile_no == mobile_no)

    if db.query(models.User.user_id).filter(or_(*clauses)).first():
        raise DuplicateCredential()

    #2. hash the password
    new_user = models.User(
        username=user.username,
        password=utils.hash_password(user.password),
        f_name=user.f_name,
        l_name=user.l_name,
        mobile_no=mobile_no,
    )

    #3. save to db, the unique constraints still catch a racing duplicate
    try:
        db.add(new_user)
        db.flush()
        user_id = new_user.user_id
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateCredential()

    logger.info("Registered user %s (id=%s)", user.username, user_id)
    return user_id


def login(db: Session, username: str, password: str):
    """Check credentials and return ``(token, user)``."""
    user = db.query(models.User).filter(models.User.username == username).first()

    if not user or not utils.verify(password, user.password):
        logger.warning("Failed login for %s", username)
        raise InvalidCredentials()

    token = oauth2.create_access_token({"user_id": user.user_id, "username": user.username})
    return token, user

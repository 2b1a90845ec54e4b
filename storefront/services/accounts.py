import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.context import SessionUser
from storefront.hashing import hash_password, verify_password
from storefront.models import Role, User
from storefront.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)


def _create_user(db: Session, email: str, password: str, role: Role) -> Result:
    try:
        user = User(email=email, password=hash_password(password), role=role.value)
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not create %s account for %s", role.value, email)
        return Err(ErrorKind.STORE, "user insert failed")
    logger.info("Created %s account id=%s", role.value, user.id)
    return Ok(user)


def register_user(db: Session, email: str, password: str) -> Result:
    return _create_user(db, email, password, Role.CUSTOMER)


def create_admin(db: Session, email: str, password: str) -> Result:
    return _create_user(db, email, password, Role.ADMIN)


def authenticate(db: Session, email: str, password: str) -> Result:
    """
    Check credentials. ``Ok(SessionUser)`` on success, ``Ok(None)`` when the
    email is unknown or the password is wrong.
    """
    try:
        user = db.query(User).filter(User.email == email).first()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("User lookup failed during login")
        return Err(ErrorKind.STORE, "user lookup failed")

    if user is None or not verify_password(password, user.password):
        # One log line for both causes so the logs do not enumerate accounts either
        logger.info("Login rejected for %s", email)
        return Ok(None)

    logger.info("Login succeeded for user id=%s", user.id)
    return Ok(SessionUser.from_user(user))


def ensure_first_admin(db: Session, email: str, password: str) -> Result:
    """Create the bootstrap admin unless some admin already exists."""
    try:
        existing_admin = db.query(User).filter(User.role == Role.ADMIN.value).first()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Admin lookup failed")
        return Err(ErrorKind.STORE, "admin lookup failed")
    if existing_admin:
        return Ok(None)
    return create_admin(db, email, password)

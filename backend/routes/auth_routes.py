import hmac
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.dependencies import get_current_identity
from backend.auth.token_verifier import Identity
from backend.database import get_db
from backend.models.user import User
from backend.models.website import Website  # noqa: F401

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

USER_EXISTS_MESSAGE = 'User already exists'
INVALID_CREDENTIALS_MESSAGE = 'Invalid credentials'
USER_NOT_FOUND_MESSAGE = 'User not found'


def _normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized:
        raise ValueError('Email is required.')
    return normalized


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Username is required.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError('Password is required.')
        return value


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)


class TokenResponse(BaseModel):
    token: str


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: str

    class Config:
        from_attributes = True


def _server_error(db: Session, action: str) -> HTTPException:
    db.rollback()
    logger.exception('Failed to %s', action)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail='Server error',
    )


@router.post('/register', response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    try:
        existing_user = db.query(User).filter(
            (User.username == data.username) | (User.email == data.email)
        ).first()
        if existing_user:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=USER_EXISTS_MESSAGE)

        # TODO: hash passwords once the stored credentials have a migration path.
        user = User(username=data.username, email=data.email, password=data.password, role='user')
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=USER_EXISTS_MESSAGE) from exc
    except SQLAlchemyError as exc:
        raise _server_error(db, 'register user') from exc

    logger.info('Registered user %s', user.id)
    return TokenResponse(token=jwt_handler.create_access_token(user.id))


@router.post('/login', response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = db.query(User).filter(User.email == data.email).first()
    except SQLAlchemyError as exc:
        raise _server_error(db, 'load user') from exc

    if user is None or not hmac.compare_digest(user.password.encode(), data.password.encode()):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_CREDENTIALS_MESSAGE)

    return TokenResponse(token=jwt_handler.create_access_token(user.id))


@router.get('/me', response_model=UserResponse)
def me(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    try:
        user = db.query(User).filter(User.id == identity.id).first()
    except SQLAlchemyError as exc:
        raise _server_error(db, 'load user') from exc

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND_MESSAGE)
    return user

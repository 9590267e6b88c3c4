"""Authentication endpoints (API JWT)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.security import create_access_token, get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import AuthUserResponse, LoginRequest, RegisterRequest, TokenResponse
from app.services.account_service import AccountError, authenticate_user, register_account
from app.services.restaurant_service import get_owned_restaurant

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


def _serialize_user(db: Session, user: User) -> AuthUserResponse:
    restaurant = get_owned_restaurant(db, user.id)
    return AuthUserResponse(id=user.id, email=user.email, restaurant_id=restaurant.id if restaurant else None)


@router.post("/register", response_model=AuthUserResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthUserResponse:
    try:
        user = register_account(db, payload.email, payload.password)
    except AccountError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _serialize_user(db, user)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    user = authenticate_user(db, payload.email, payload.password)
    if user is None:
        logger.info("[AUTH] API login rejected for email=%s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")
    return TokenResponse(access_token=create_access_token(user.id, {"email": user.email}))


@router.get("/me", response_model=AuthUserResponse)
def me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> AuthUserResponse:
    return _serialize_user(db, current_user)

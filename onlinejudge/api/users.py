"""
User registration and login.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from onlinejudge.config import get_settings
from onlinejudge.database import get_db
from onlinejudge.models.user import User
from onlinejudge.schemas.user import UserCreate, UserLogin, UserResponse, TokenResponse
from onlinejudge.auth.jwt_handler import create_access_token, get_current_user
from onlinejudge.auth.passwords import hash_password, verify_password

settings = get_settings()
logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a normal user."""
    user = User(
        username=user_data.username,
        password_hash=hash_password(user_data.password),
        name=user_data.name,
        email=user_data.email,
        authority=settings.default_authority,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already taken"
        )
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


@router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Exchange username and password for a bearer token."""
    user = db.query(User).filter(User.username == credentials.username).first()
    if user is None or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    token = create_access_token({"sub": str(user.id), "authority": user.authority})
    return TokenResponse(access_token=token, user_id=user.id, user_authority=user.authority)


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    """
    Tokens are stateless; clients discard theirs. The endpoint only confirms
    the token was valid.
    """
    return {"message": "Successfully logged out"}

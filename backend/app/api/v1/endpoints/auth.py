"""
Account endpoints

- POST /auth/register      create an account (3/minute per client)
- POST /auth/login         exchange email + password for a bearer token (5/minute)
- GET  /auth/verify-token  echo the claims of a valid bearer token
- GET  /auth/me            the authenticated user
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging_config import logger, set_user_id
from app.core.rate_limiter import LOGIN_LIMIT, REGISTER_LIMIT, limiter
from app.core.security import ACCESS_TOKEN_TYPE, create_access_token, decode_token, get_password_hash, verify_password
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, security
from app.schemas.auth import LoginResponse, RegisterResponse, UserLogin, UserRegister, UserResponse

router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def _user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(REGISTER_LIMIT)
async def register(request: Request, user_data: UserRegister, db: AsyncSession = Depends(get_db)):
    """Create an account; emails are stored lower-cased and must be unique"""
    email = user_data.email.lower()

    if await _user_by_email(db, email) is not None:
        logger.log_auth_event("register", False, user_email=email, reason="duplicate email", client_ip=_client_ip(request))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    user = User(email=email, name=user_data.name, hashed_password=get_password_hash(user_data.password))
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.log_auth_event("register", True, user_email=email, client_ip=_client_ip(request), user_id=user.id)
    return RegisterResponse(message="User registered successfully", user_id=str(user.id))


@router.post("/login", response_model=LoginResponse)
@limiter.limit(LOGIN_LIMIT)
async def login(request: Request, credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    """Issue an access token; unknown email and wrong password get the same 401"""
    email = credentials.email.lower()
    user = await _user_by_email(db, email)

    if user is None or not verify_password(credentials.password, user.hashed_password):
        logger.log_auth_event("login", False, user_email=email, reason="bad credentials", client_ip=_client_ip(request))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    if not user.is_active:
        logger.log_auth_event("login", False, user_email=email, reason="inactive", client_ip=_client_ip(request))
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

    user.last_login = datetime.utcnow()
    await db.commit()

    set_user_id(str(user.id))
    logger.log_auth_event("login", True, user_email=email, client_ip=_client_ip(request), user_id=user.id)

    return LoginResponse(
        access_token=create_access_token({"sub": str(user.id), "email": user.email}),
        user=UserResponse.model_validate(user),
    )


@router.get("/verify-token")
async def verify_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)):
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token is required")

    claims = decode_token(credentials.credentials)
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type")

    return {"message": "Token is valid", "user": claims}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user

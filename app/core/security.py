"""Password hashing, JWT issuing and the role-checking auth dependencies."""

from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import Session, select

from app.core.clock import utcnow
from app.core.config import Settings
from app.database import get_session
from app.models.user import ROLE_CUSTOMER, ROLE_PROVIDER, User


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Sign ``data`` with an ``exp`` claim; the default lifetime comes from settings."""
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {**data, "exp": utcnow() + lifetime}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise credentials_exception

    email: Optional[str] = payload.get("sub")
    if email is None:
        raise credentials_exception

    user = session.exec(select(User).where(User.email == email)).first()
    if user is None:
        raise credentials_exception
    return user


def _require_role(user: User, role: str, label: str) -> User:
    if user.role != role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only {label} can access this route",
        )
    return user


def get_current_provider(current_user: User = Depends(get_current_user)) -> User:
    return _require_role(current_user, ROLE_PROVIDER, "providers")


def get_current_customer(current_user: User = Depends(get_current_user)) -> User:
    return _require_role(current_user, ROLE_CUSTOMER, "customers")

from typing import Optional
from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException, Response, status
from fastapi.security import APIKeyCookie
from jose import JWTError, jwt
from loguru import logger
from passlib.context import CryptContext
from sqlmodel import Session, select
from crimewatch.core.config import settings
from crimewatch.db.session import get_session
from crimewatch.models.user import User
from crimewatch.models.enums import UserRole

pwd_context = CryptContext(schemes=['bcrypt'], deprecated='auto')
session_cookie = APIKeyCookie(name=settings.AUTH_COOKIE_NAME, auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(password, hashed_password)


def create_access_token(user: User) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        'sub': user.id,
        'role': user.role.value if isinstance(user.role, UserRole) else user.role,
        'type': 'access',
        'iat': now,
        'exp': now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get('type') != 'access':
        return None
    return payload.get('sub')


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite='lax',
        secure=settings.AUTH_COOKIE_SECURE,
        path='/',
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.AUTH_COOKIE_NAME, path='/', httponly=True, samesite='lax')


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email)).first()


def create_user(
    session: Session,
    email: str,
    password: str,
    name: str = '',
    role: UserRole = UserRole.USER,
) -> User:
    user = User(email=email, hashed_password=hash_password(password), name=name, role=role)
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info('auth.user_created', user_id=user.id, role=user.role.value)
    return user


def authenticate_user(session: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(session, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def get_optional_user(
    token: Optional[str] = Depends(session_cookie),
    session: Session = Depends(get_session),
) -> Optional[User]:
    """Resolve the session cookie; a missing or invalid token means anonymous."""
    if not token:
        return None
    user_id = decode_access_token(token)
    if not user_id:
        logger.debug('auth.invalid_token')
        return None
    user = session.exec(select(User).where(User.id == user_id)).first()
    if not user or not user.is_active:
        return None
    return user


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Not authenticated')
    return user


def is_admin(user: Optional[User]) -> bool:
    return user is not None and user.role == UserRole.ADMIN


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not is_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Admin only')
    return user

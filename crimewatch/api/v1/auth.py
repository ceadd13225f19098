from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel import Session
from crimewatch.db.session import get_session
from crimewatch.models.enums import UserRole
from crimewatch.models.user import User
from crimewatch.schemas.auth import LoginRequest, RegisterRequest
from crimewatch.schemas.user import UserEnvelope
from crimewatch.services.auth_service import (
    clear_session_cookie,
    create_access_token,
    create_user,
    get_optional_user,
    get_user_by_email,
    set_session_cookie,
    verify_password,
)
from crimewatch.services.user_service import to_user_out

router = APIRouter(prefix='/auth', tags=['auth'])


@router.post('/register', response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    response: Response,
    session: Session = Depends(get_session),
) -> UserEnvelope:
    if get_user_by_email(session, payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail='User already exists')
    user = create_user(session, payload.email, payload.password, name=payload.name.strip())
    set_session_cookie(response, create_access_token(user))
    return UserEnvelope(user=to_user_out(user))


@router.post('/login', response_model=UserEnvelope)
def login(
    payload: LoginRequest,
    response: Response,
    session: Session = Depends(get_session),
) -> UserEnvelope:
    user = get_user_by_email(session, payload.email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='User not found')
    if not user.is_active or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid credentials')
    if payload.is_admin_login and user.role != UserRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Not authorized as admin')
    set_session_cookie(response, create_access_token(user))
    return UserEnvelope(user=to_user_out(user))


@router.post('/logout', response_model=UserEnvelope)
def logout(response: Response) -> UserEnvelope:
    clear_session_cookie(response)
    return UserEnvelope(user=None)


@router.get('/me', response_model=UserEnvelope)
def me(user: Optional[User] = Depends(get_optional_user)) -> UserEnvelope:
    return UserEnvelope(user=to_user_out(user) if user else None)

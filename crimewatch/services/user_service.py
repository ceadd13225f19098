from sqlmodel import Session

from crimewatch.models.enums import UserRole
from crimewatch.models.user import User
from crimewatch.schemas.user import UserOut
from crimewatch.services.auth_service import create_user, get_user_by_email, hash_password


def to_user_out(user: User) -> UserOut:
    return UserOut(id=user.id, email=user.email, name=user.name, is_active=user.is_active, role=user.role)


def ensure_admin_user(session: Session, email: str, password: str, name: str = 'Administrator') -> tuple[User, bool]:
    """Create an admin account, or promote an existing one. Returns ``(user, created)``."""
    record = get_user_by_email(session, email)
    if record is None:
        return create_user(session, email, password, name=name, role=UserRole.ADMIN), True
    record.role = UserRole.ADMIN
    record.is_active = True
    if password:
        record.hashed_password = hash_password(password)
    if not record.name:
        record.name = name
    session.add(record)
    session.commit()
    session.refresh(record)
    return record, False

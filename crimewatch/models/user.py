from sqlmodel import Field, SQLModel
from crimewatch.models.base import IDModel, TimestampModel
from crimewatch.models.enums import UserRole, enum_column


class User(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'users'

    email: str = Field(index=True, unique=True)
    hashed_password: str
    name: str = ''
    is_active: bool = True
    role: UserRole = Field(default=UserRole.USER, sa_column=enum_column(UserRole, 'user_role'))

from sqlmodel import SQLModel
from crimewatch.db.session import engine
from crimewatch.core.config import settings
from crimewatch.models import (  # noqa: F401
    user,
    report,
)


def init_db(drop_all: bool = False) -> None:
    if drop_all:
        SQLModel.metadata.drop_all(engine)
    if settings.DB_URL.startswith('sqlite') or settings.ENV != 'production' or settings.AUTO_CREATE_TABLES:
        SQLModel.metadata.create_all(engine)

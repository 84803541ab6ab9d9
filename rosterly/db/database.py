from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from rosterly.core.config import settings


class Base(DeclarativeBase):
    pass


connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db() -> None:
    import rosterly.db.models  # noqa: F401  registers tables on Base.metadata

    Base.metadata.create_all(bind=engine)

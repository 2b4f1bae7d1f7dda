from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from authgate.core.config import settings


def build_engine(database_url: Optional[str] = None) -> Engine:
    database_url = database_url or settings.DATABASE_URL
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url,
                         connect_args=connect_args,
                         pool_pre_ping=True,
                         pool_recycle=3600,
    )


def build_sessionmaker(engine: Engine) -> sessionmaker:
    # Create a configured "Session" class
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

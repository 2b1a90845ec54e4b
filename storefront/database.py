import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.config import Settings, get_settings

logger = logging.getLogger(__name__)


def build_database_url(settings: Settings) -> URL:
    if settings.DATABASE_URL:
        return make_url(settings.DATABASE_URL)
    return URL.create(
        "mysql+mysqlconnector",
        username=settings.DB_USER,
        password=settings.DB_PASSWORD,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_NAME,
    )


def create_db_engine(url: URL):
    if url.get_backend_name() == "sqlite":
        # In-memory databases must share one connection across threads
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


engine = create_db_engine(build_database_url(get_settings()))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # Model classes must be registered on Base before create_all
    from storefront import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


@contextmanager
def unit_of_work(db: Session):
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        logger.warning("Transaction rolled back")
        raise

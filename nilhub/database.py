# nilhub/database.py
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from nilhub.core.config import get_settings
from nilhub.core.errors import DuplicateKeyError

settings = get_settings()

# ---------------------------------------------------------
# Postgres connection (production)
#
# - sslmode=require   : enforce SSL when running in the cloud
# - pool_size=1       : keep a single pooled connection per process
# - max_overflow=0    : do not open extra connections beyond the pool
# - pool_pre_ping=True: validate connections before using them
#
# SQLite (local runs / tests) shares one connection across threads.
# ---------------------------------------------------------


def build_engine(db_url: str):
    if db_url.startswith("sqlite"):
        return create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # Append sslmode=require if it is not already present
    if "sslmode=" not in db_url:
        if "?" in db_url:
            db_url = db_url + "&sslmode=require"
        else:
            db_url = db_url + "?sslmode=require"

    return create_engine(
        db_url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session


# ---------------------------------------------------------
# Unique-constraint translation
# ---------------------------------------------------------

# Postgres: Key (email)=(a@b.com) already exists.
_PG_DUPLICATE = re.compile(r"Key \((?P<field>[^)]+)\)=\((?P<value>[^)]*)\)")
# SQLite: UNIQUE constraint failed: accounts.email
_SQLITE_DUPLICATE = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w., ]+)")


def duplicate_key_from_integrity(
    error: IntegrityError,
    instance: object | None = None,
) -> DuplicateKeyError | None:
    """
    Build a DuplicateKeyError from a driver IntegrityError.

    Returns None when the error is not a uniqueness violation
    (e.g. a foreign key or NOT NULL failure).
    """
    message = str(error.orig)

    match = _PG_DUPLICATE.search(message)
    if match:
        return DuplicateKeyError({match.group("field"): match.group("value")})

    match = _SQLITE_DUPLICATE.search(message)
    if match:
        key_value: dict[str, object] = {}
        for column in match.group("columns").split(","):
            field = column.strip().split(".")[-1]
            key_value[field] = getattr(instance, field, None)
        return DuplicateKeyError(key_value)

    return None


def commit_or_raise(session: Session, instance: object | None = None) -> None:
    """
    Commit the session, turning unique-constraint violations into
    DuplicateKeyError so the error handler can name the field.
    """
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        duplicate = duplicate_key_from_integrity(e, instance)
        if duplicate is not None:
            raise duplicate from e
        raise

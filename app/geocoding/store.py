"""Relational store for resolved city coordinates."""

from functools import partial

from sqlalchemy import (
    Column,
    Double,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    insert,
    select,
    text,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from app.config import DATABASE_URL
from app.errors import DuplicateCityError, StoreUnavailableError, StoreWriteError
from app.logging_config import logger
from app.models.coordinate import Coordinate

metadata = MetaData()

# id doubles as the insertion order used by list_recent.
cities = Table(
    "cities",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False, unique=True),
    Column("lat", Double, nullable=False),
    Column("long", Double, nullable=False),
)


def create_db_engine(database_url: str) -> Engine:
    """Build a SQLAlchemy engine for ``database_url``.

    ``postgres://`` and driverless ``postgresql://`` URLs are pinned to
    psycopg 3. In-memory SQLite gets a single shared connection so every
    thread sees the same database.
    """
    url = make_url(database_url)
    if url.drivername in ("postgres", "postgresql"):
        url = url.set(drivername="postgresql+psycopg")
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


class CoordinateStore:
    """Point lookups and inserts over the ``cities`` table.

    Every method runs in its own transaction; a lookup and the insert that
    may follow it are never atomic.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def create_schema(self):
        """Create the ``cities`` table if it does not exist."""
        metadata.create_all(self.engine)

    def get(self, city_name: str) -> Coordinate | None:
        """Return the cached coordinate for an exact city name.

        Args:
            city_name: City name key, compared verbatim.

        Returns:
            Coordinate if present, otherwise None.

        Raises:
            StoreUnavailableError: If the database cannot be queried.
        """
        query = select(cities.c.lat, cities.c.long).where(cities.c.name == city_name)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(query).first()
        except SQLAlchemyError as exc:
            logger.error("DB_GET_CITY_FAILED", city=city_name, error=str(exc))
            raise StoreUnavailableError("City cache lookup failed") from exc
        if row is None:
            return None
        return Coordinate(latitude=row.lat, longitude=row.long)

    def put(self, city_name: str, coordinate: Coordinate):
        """Insert a new city row.

        Args:
            city_name: City name key.
            coordinate: Coordinate to persist verbatim.

        Raises:
            DuplicateCityError: If a row for ``city_name`` already exists.
            StoreWriteError: If the insert fails for any other reason.
        """
        statement = insert(cities).values(
            name=city_name, lat=coordinate.latitude, long=coordinate.longitude
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(statement)
        except IntegrityError as exc:
            raise DuplicateCityError(f"City already cached: {city_name}") from exc
        except SQLAlchemyError as exc:
            raise StoreWriteError("City cache insert failed") from exc

    def list_recent(self, limit: int) -> list[str]:
        """Return up to ``limit`` city names, most recently inserted first.

        Raises:
            StoreUnavailableError: If the database cannot be queried.
        """
        query = select(cities.c.name).order_by(cities.c.id.desc()).limit(limit)
        try:
            with self.engine.connect() as conn:
                return list(conn.execute(query).scalars())
        except SQLAlchemyError as exc:
            logger.error("DB_LIST_CITIES_FAILED", error=str(exc))
            raise StoreUnavailableError("Recent cities lookup failed") from exc

    def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("DB_PING_FAILED", error=str(exc))
            return False
        return True


engine = create_db_engine(DATABASE_URL)
coordinate_store = partial(CoordinateStore, engine=engine)

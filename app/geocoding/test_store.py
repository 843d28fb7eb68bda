import pytest
from sqlalchemy import create_engine

from app.errors import DuplicateCityError, StoreUnavailableError, StoreWriteError
from app.geocoding.store import CoordinateStore, create_db_engine
from app.models.coordinate import Coordinate


@pytest.fixture
def store():
    store = CoordinateStore(create_db_engine("sqlite://"))
    store.create_schema()
    return store


@pytest.fixture
def broken_store(tmp_path):
    # The schema is never created, so every query fails.
    return CoordinateStore(create_engine(f"sqlite:///{tmp_path / 'empty.db'}"))


@pytest.mark.parametrize(
    "database_url",
    ["postgres://u:p@localhost/db", "postgresql://u:p@localhost/db"],
)
def test_postgres_urls_use_psycopg(database_url):
    engine = create_db_engine(database_url)
    assert engine.dialect.name == "postgresql"
    assert engine.dialect.driver == "psycopg"


def test_explicit_postgres_driver_is_kept():
    engine = create_db_engine("postgresql+psycopg://u:p@localhost/db")
    assert engine.dialect.driver == "psycopg"


def test_get_missing_city_returns_none(store):
    assert store.get("Unknown City") is None


def test_put_then_get(store):
    store.put("Rio de Janeiro", Coordinate(latitude=-22.90642, longitude=-43.18223))
    assert store.get("Rio de Janeiro") == Coordinate(
        latitude=-22.90642, longitude=-43.18223
    )


def test_get_matches_name_exactly(store):
    store.put("Paris", Coordinate(latitude=48.8566, longitude=2.3522))
    assert store.get("paris") is None
    assert store.get(" Paris") is None


def test_put_duplicate_raises(store):
    store.put("Paris", Coordinate(latitude=48.8566, longitude=2.3522))
    with pytest.raises(DuplicateCityError):
        store.put("Paris", Coordinate(latitude=0.0, longitude=0.0))
    assert store.get("Paris") == Coordinate(latitude=48.8566, longitude=2.3522)


def test_list_recent_newest_first(store):
    for name in ["A", "B", "C"]:
        store.put(name, Coordinate(latitude=1.0, longitude=2.0))
    assert store.list_recent(2) == ["C", "B"]
    assert store.list_recent(10) == ["C", "B", "A"]


def test_list_recent_empty(store):
    assert store.list_recent(10) == []


def test_get_failure_raises_store_unavailable(broken_store):
    with pytest.raises(StoreUnavailableError):
        broken_store.get("Paris")


def test_put_failure_raises_store_write_error(broken_store):
    with pytest.raises(StoreWriteError) as exc_info:
        broken_store.put("Paris", Coordinate(latitude=48.8566, longitude=2.3522))
    assert not isinstance(exc_info.value, DuplicateCityError)


def test_list_recent_failure_raises_store_unavailable(broken_store):
    with pytest.raises(StoreUnavailableError):
        broken_store.list_recent(10)


def test_ping(store):
    assert store.ping() is True

from app.health.health_check import is_database_available
from app.models.health import ServiceStatus


class FakeStore:
    def __init__(self, reachable: bool):
        self.reachable = reachable

    def ping(self) -> bool:
        return self.reachable


def test_database_available(monkeypatch):
    monkeypatch.setattr(
        "app.health.health_check.coordinate_store", lambda: FakeStore(True)
    )
    assert is_database_available() == ServiceStatus.available


def test_database_not_available(monkeypatch):
    monkeypatch.setattr(
        "app.health.health_check.coordinate_store", lambda: FakeStore(False)
    )
    assert is_database_available() == ServiceStatus.not_available

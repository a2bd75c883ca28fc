import datetime
from typing import Dict, List

import pytest

from src.dto.namespace import NamespaceRecord
from src.util.errors import GatewayConflict, GatewayNotFound

START = datetime.datetime(2026, 10, 17, 12, 0, 0, tzinfo=datetime.timezone.utc)


class FakeClock:
    """Wall clock and monotonic clock that only move when told to."""

    def __init__(self, start: datetime.datetime = START):
        self.now = start
        self.elapsed = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> datetime.datetime:
        return self.now

    def monotonic(self) -> float:
        return self.elapsed

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)

    def advance(self, seconds: float) -> None:
        self.elapsed += seconds
        self.now += datetime.timedelta(seconds=seconds)


class FakeGateway:
    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.records: Dict[str, NamespaceRecord] = {}
        self.calls: List[tuple] = []
        self.delete_error = None
        self.list_error = None
        # errors raised by get_namespace after a delete, in order; None means "still present"
        self.poll_script: List = []
        self.vanish_after_delete = False

    def add(self, name: str, annotations: Dict[str, str] = None) -> NamespaceRecord:
        record = NamespaceRecord(name=name, annotations=dict(annotations or {}), created_at=self.clock())
        self.records[name] = record
        return record

    def create_namespace(self, name, annotations):
        self.calls.append(("create", name))
        if name in self.records:
            raise GatewayConflict(f'namespaces "{name}" already exists', status=409)
        return self.add(name, annotations)

    def get_namespace(self, name):
        self.calls.append(("get", name))
        if self.poll_script:
            outcome = self.poll_script.pop(0)
            if outcome is not None:
                raise outcome
        if name not in self.records:
            raise GatewayNotFound(f'namespaces "{name}" not found', status=404)
        return self.records[name]

    def get_namespaces(self):
        self.calls.append(("list",))
        if self.list_error is not None:
            raise self.list_error
        return list(self.records.values())

    def delete_namespace(self, name):
        self.calls.append(("delete", name))
        if self.delete_error is not None:
            raise self.delete_error
        if name not in self.records:
            raise GatewayNotFound(f'namespaces "{name}" not found', status=404)
        if self.vanish_after_delete:
            del self.records[name]

    def polls(self) -> int:
        return sum(1 for call in self.calls if call[0] == "get")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway(clock):
    return FakeGateway(clock)


@pytest.fixture
def lifecycle_service(gateway, clock):
    from src.services.namespace_lifecycle_service import NamespaceLifecycleService
    return NamespaceLifecycleService(
        namespace_service=gateway,
        poll_interval=0.5,
        confirm_timeout=30,
        clock=clock,
        monotonic=clock.monotonic,
        sleep=clock.sleep,
    )

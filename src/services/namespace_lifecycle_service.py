import datetime
import threading
import time
from typing import Callable, List, Optional

from src.dto.namespace import LifecycleMetadata, NamespaceRecord, NamespaceView, format_timestamp
from src.services.protocol.kubernetes_services.namespace_service_protocol import NamespaceServiceProtocol
from src.util.errors import (
    DeleteCancelled,
    DeleteConfirmTimeout,
    DeleteState,
    DeleteSubmitFailed,
    GatewayError,
    GatewayNotFound,
    InvalidTTL,
)
from src.util.logger import log

def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)

class NamespaceLifecycleService:
    """Creates, lists and deletes TTL-tagged namespaces.

    TTL is stored as an absolute ``expires_at`` annotation at creation and the
    remaining hours are derived from the clock on every read. Deletion is
    confirmed by polling the gateway until the namespace is gone or
    ``confirm_timeout`` seconds have passed since the delete was submitted.
    """

    def __init__(
        self,
        namespace_service: NamespaceServiceProtocol,
        poll_interval: float = 0.5,
        confirm_timeout: float = 30.0,
        treat_errors_as_deleted: bool = False,
        clock: Callable[[], datetime.datetime] = utc_now,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.namespace_service = namespace_service
        self.poll_interval = poll_interval
        self.confirm_timeout = confirm_timeout
        self.treat_errors_as_deleted = treat_errors_as_deleted
        self.clock = clock
        self.monotonic = monotonic
        self.sleep = sleep

    def create(self, name: str, ttl_hours: int, owner: str, team: str) -> NamespaceRecord:
        try:
            expires_at = self.clock() + datetime.timedelta(hours=ttl_hours)
        except (OverflowError, ValueError) as e:
            log(f"Rejected TTL {ttl_hours}h for namespace {name}: {e}", "ERROR")
            raise InvalidTTL(ttl_hours, f"TTL of {ttl_hours} hours is out of range") from e
        metadata = LifecycleMetadata(owner=owner, team=team, expires_at=expires_at)
        record = self.namespace_service.create_namespace(name, metadata.to_annotations())
        log(f"Namespace {name} created for {owner}/{team}, expires at {format_timestamp(expires_at)}")
        return record

    def list_namespaces(self, owner: str = "") -> List[NamespaceView]:
        records = self.namespace_service.get_namespaces()
        now = self.clock()
        views = []
        for record in records:
            view = NamespaceView.from_record(record, now)
            if owner and view.owner != owner:
                continue
            views.append(view)
        return views

    def get_namespace(self, name: str) -> NamespaceView:
        record = self.namespace_service.get_namespace(name)
        return NamespaceView.from_record(record, self.clock())

    def delete(self, name: str, cancel: Optional[threading.Event] = None) -> DeleteState:
        try:
            self.namespace_service.delete_namespace(name)
        except GatewayError as e:
            log(f"Delete of namespace {name} rejected: {e}", "ERROR")
            raise DeleteSubmitFailed(name, str(e)) from e

        deadline = self.monotonic() + self.confirm_timeout
        polls = 0
        while True:
            if cancel is not None and cancel.is_set():
                log(f"Delete confirmation for {name} cancelled after {polls} polls", "WARNING")
                raise DeleteCancelled(name, f"Delete confirmation for namespace {name} was cancelled")

            polls += 1
            try:
                self.namespace_service.get_namespace(name)
            except GatewayNotFound:
                log(f"Namespace {name} deleted (confirmed after {polls} polls)")
                return DeleteState.DELETED
            except GatewayError as e:
                if self.treat_errors_as_deleted:
                    log(f"Namespace {name} treated as deleted after poll error: {e}", "WARNING")
                    return DeleteState.DELETED
                log(f"Poll for namespace {name} failed, still waiting: {e}", "WARNING")

            remaining = deadline - self.monotonic()
            if remaining <= 0:
                log(f"Timeout waiting for namespace {name} deletion", "ERROR")
                raise DeleteConfirmTimeout(
                    name,
                    f"Namespace {name} still present {self.confirm_timeout}s after delete was submitted",
                )
            self._wait(min(self.poll_interval, remaining), cancel)

    def _wait(self, seconds: float, cancel: Optional[threading.Event]) -> None:
        if cancel is None:
            self.sleep(seconds)
        else:
            cancel.wait(seconds)

import datetime
from unittest.mock import MagicMock

import pytest
from kubernetes import client
from urllib3.exceptions import MaxRetryError

from src.services.kubernetes_services.namespace_service import NamespaceService
from src.util.errors import GatewayConflict, GatewayError, GatewayNotFound, GatewayTransport

CREATED = datetime.datetime(2026, 10, 1, 8, 30, tzinfo=datetime.timezone.utc)


def _namespace(name, annotations=None):
    return client.V1Namespace(
        metadata=client.V1ObjectMeta(name=name, annotations=annotations, creation_timestamp=CREATED)
    )


@pytest.fixture
def v1():
    return MagicMock(spec=client.CoreV1Api)


@pytest.fixture
def service(v1):
    return NamespaceService(v1=v1)


def test_create_sends_annotations(service, v1):
    v1.create_namespace.return_value = _namespace("demo", {"owner": "alice"})

    record = service.create_namespace("demo", {"owner": "alice"})

    body = v1.create_namespace.call_args.kwargs["body"]
    assert body.metadata.name == "demo"
    assert body.metadata.annotations == {"owner": "alice"}
    assert record.name == "demo"
    assert record.created_at == CREATED


@pytest.mark.parametrize("status, expected", [
    (409, GatewayConflict),
    (403, GatewayTransport),
    (503, GatewayTransport),
    (422, GatewayError),
])
def test_create_translates_api_errors(service, v1, status, expected):
    v1.create_namespace.side_effect = client.ApiException(status=status, reason="nope")

    with pytest.raises(expected) as exc:
        service.create_namespace("demo", {})
    assert type(exc.value) is expected
    assert exc.value.status == status


def test_get_not_found(service, v1):
    v1.read_namespace.side_effect = client.ApiException(status=404, reason="Not Found")

    with pytest.raises(GatewayNotFound):
        service.get_namespace("demo")


def test_connection_errors_are_transport(service, v1):
    v1.read_namespace.side_effect = MaxRetryError(pool=None, url="/api/v1/namespaces/demo")

    with pytest.raises(GatewayTransport):
        service.get_namespace("demo")


def test_list_keeps_order_and_tolerates_missing_annotations(service, v1):
    v1.list_namespace.return_value = client.V1NamespaceList(
        items=[_namespace("zeta", {"owner": "bob"}), _namespace("alpha")]
    )

    records = service.get_namespaces()

    assert [r.name for r in records] == ["zeta", "alpha"]
    assert records[1].annotations == {}


def test_delete_not_found(service, v1):
    v1.delete_namespace.side_effect = client.ApiException(status=404, reason="Not Found")

    with pytest.raises(GatewayNotFound):
        service.delete_namespace("demo")

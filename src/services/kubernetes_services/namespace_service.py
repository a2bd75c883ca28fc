from kubernetes import client
from urllib3.exceptions import HTTPError
from src.dto.namespace import NamespaceRecord
from src.services.protocol.kubernetes_services.namespace_service_protocol import NamespaceServiceProtocol
from src.util.errors import GatewayError, GatewayConflict, GatewayNotFound, GatewayTransport
from src.util.logger import log
from typing import Dict, List, Optional

TRANSPORT_STATUSES = {0, 401, 403, 429, 500, 502, 503, 504}

class NamespaceService(NamespaceServiceProtocol):
    def __init__(self, config: Optional[client.Configuration] = None, v1: Optional[client.CoreV1Api] = None):
        if v1 is None:
            api_client = client.ApiClient(configuration=config)
            v1 = client.CoreV1Api(api_client=api_client)
        self.v1 = v1

    # CRUD methods
    def create_namespace(self, name: str, annotations: Dict[str, str]) -> NamespaceRecord:
        namespace = client.V1Namespace(
            metadata=client.V1ObjectMeta(name=name, annotations=annotations)
        )
        try:
            created = self.v1.create_namespace(body=namespace)
        except (client.ApiException, HTTPError, OSError) as e:
            raise self._translate(e, f"Failed to create namespace {name}")
        log(f"Namespace {name} created")
        return self._to_record(created)

    def get_namespace(self, name: str) -> NamespaceRecord:
        try:
            return self._to_record(self.v1.read_namespace(name=name))
        except (client.ApiException, HTTPError, OSError) as e:
            raise self._translate(e, f"Failed to get namespace {name}")

    def get_namespaces(self) -> List[NamespaceRecord]:
        try:
            namespaces = self.v1.list_namespace()
        except (client.ApiException, HTTPError, OSError) as e:
            raise self._translate(e, "Failed to list namespaces")
        return [self._to_record(ns) for ns in namespaces.items]

    def delete_namespace(self, name: str) -> None:
        try:
            self.v1.delete_namespace(name=name)
        except (client.ApiException, HTTPError, OSError) as e:
            raise self._translate(e, f"Failed to delete namespace {name}")
        log(f"Namespace {name} deletion submitted")

    # Helper methods
    def _to_record(self, namespace: client.V1Namespace) -> NamespaceRecord:
        metadata = namespace.metadata
        return NamespaceRecord(
            name=metadata.name,
            annotations=dict(metadata.annotations or {}),
            created_at=metadata.creation_timestamp,
        )

    def _translate(self, error: Exception, context: str) -> GatewayError:
        if not isinstance(error, client.ApiException):
            return GatewayTransport(f"{context}: {error}")

        message = f"{context}: {error.reason}"
        if error.status == 409:
            return GatewayConflict(message, status=409)
        if error.status == 404:
            return GatewayNotFound(message, status=404)
        if error.status in TRANSPORT_STATUSES:
            return GatewayTransport(message, status=error.status)
        return GatewayError(message, status=error.status)

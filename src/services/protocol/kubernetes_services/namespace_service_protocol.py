from typing import Protocol, List, Dict
from src.dto.namespace import NamespaceRecord

class NamespaceServiceProtocol(Protocol):
    def create_namespace(self, name: str, annotations: Dict[str, str]) -> NamespaceRecord:
        """Create a namespace. Raises GatewayConflict if the name is taken."""
        ...

    def get_namespace(self, name: str) -> NamespaceRecord:
        """Retrieve a namespace by name. Raises GatewayNotFound if absent."""
        ...

    def get_namespaces(self) -> List[NamespaceRecord]:
        """List all namespaces in the order the control plane returns them."""
        ...

    def delete_namespace(self, name: str) -> None:
        """Submit deletion of a namespace. Returns once the request is accepted."""
        ...

"""Type aliases shared by the hygiene models and services."""
from typing import Any, Callable, Iterable, Mapping, Protocol

ProgressCallback = Callable[[int, int], None]
DeleteFunction = Callable[[str], Any]
CredentialRecord = Mapping[str, Any]


class CredentialStore(Protocol):
    """The decrypted view of the vault the engine reads from and deletes through."""

    def list_credentials(self) -> Iterable[Any]:
        ...

    def delete_credential(self, credential_id: str) -> Any:
        ...

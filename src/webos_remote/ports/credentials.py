from typing import Protocol


class CredentialStorePort(Protocol):
    def load(self, host: str) -> str | None: ...
    def save(self, host: str, client_key: str) -> None: ...
    def forget(self, host: str) -> bool: ...

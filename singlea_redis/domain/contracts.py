"""Contracts shared by feature-config persistence collaborators."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FeatureConfig(Protocol):
    """Opaque feature configuration.

    Структура известна только marshaller'у; store её не читает.
    """


class FeatureConfigMarshaller(Protocol):
    """Converts feature configs to bytes and back."""

    def supports(self, config: FeatureConfig | type | str) -> bool: ...

    def marshall(self, config: FeatureConfig) -> bytes: ...

    def unmarshall(self, value: bytes) -> FeatureConfig: ...


class FeatureConfigEncryptor(Protocol):
    """Symmetric encryption keyed by a caller-supplied secret."""

    def encrypt(self, value: bytes, secret: str) -> bytes: ...

    def decrypt(self, value: bytes | str, secret: str) -> bytes: ...


class SupportsDebug(Protocol):
    """Minimal logger capability used by the store."""

    def debug(self, msg: str, *fields: Any) -> None: ...


class FeatureConfigManager(Protocol):
    """Persistence manager for feature configs."""

    def supports(self, config: FeatureConfig | type | str) -> bool: ...

    def is_required(self) -> bool: ...

    def exists(self, id: str) -> bool: ...

    def persist(self, id: str, config: FeatureConfig, secret: str) -> None: ...

    def find(self, id: str, secret: str) -> FeatureConfig | None: ...

    def remove(self, *ids: str) -> int: ...

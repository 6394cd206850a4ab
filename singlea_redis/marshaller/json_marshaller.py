"""JSON marshaller for dataclass feature configs."""

import dataclasses
import json
import types
from typing import Any, Union, get_args, get_origin, get_type_hints

from singlea_redis.domain.contracts import FeatureConfig
from singlea_redis.domain.errors import MarshallingError


class JsonFeatureConfigMarshaller:
    """
    Marshals dataclass configs to ``{"type": ..., "data": {...}}`` JSON.

    Поддерживаются только зарегистрированные типы; имя типа (или alias)
    пишется в payload и используется при unmarshall.
    """

    def __init__(self, *config_types: type, aliases: dict[str, type] | None = None) -> None:
        """
        Initialize marshaller.

        Args:
            config_types: Dataclass types to support, registered by ``__name__``
            aliases: Extra names for registered or additional types
        """
        self._types: dict[str, type] = {}
        for config_type in config_types:
            self._register(config_type.__name__, config_type)
        for name, config_type in (aliases or {}).items():
            self._register(name, config_type)

    def _register(self, name: str, config_type: type) -> None:
        if not dataclasses.is_dataclass(config_type):
            raise TypeError(f"{config_type.__name__} is not a dataclass")
        self._types[name] = config_type

    def _name_of(self, config_type: type) -> str | None:
        # Предпочитаем __name__, если он зарегистрирован
        if self._types.get(config_type.__name__) is config_type:
            return config_type.__name__
        for name, registered in self._types.items():
            if registered is config_type:
                return name
        return None

    def supports(self, config: FeatureConfig | type | str) -> bool:
        if isinstance(config, str):
            return config in self._types
        if isinstance(config, type):
            return self._name_of(config) is not None
        return self._name_of(type(config)) is not None

    def marshall(self, config: FeatureConfig) -> bytes:
        name = self._name_of(type(config))
        if name is None:
            raise MarshallingError(f"Unsupported feature config: {type(config).__name__}")

        payload = {"type": name, "data": dataclasses.asdict(config)}  # type: ignore[call-overload]
        try:
            return json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise MarshallingError(f"Cannot marshall {name}: {e}") from e

    def unmarshall(self, value: bytes) -> FeatureConfig:
        try:
            payload: Any = json.loads(value)
        except (UnicodeDecodeError, ValueError) as e:
            raise MarshallingError(f"Invalid feature config payload: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            raise MarshallingError("Invalid feature config payload: missing type or data")

        config_type = self._types.get(payload.get("type"))  # type: ignore[arg-type]
        if config_type is None:
            raise MarshallingError(f"Unknown feature config type: {payload.get('type')!r}")

        try:
            return _build(config_type, payload["data"])  # type: ignore[no-any-return]
        except TypeError as e:
            raise MarshallingError(f"Cannot unmarshall {config_type.__name__}: {e}") from e


def _field_hints(config_type: type) -> dict[str, Any]:
    try:
        return get_type_hints(config_type)
    except (NameError, TypeError):
        # Неразрешимые forward-ссылки: берём только уже вычисленные аннотации
        return {
            f.name: f.type for f in dataclasses.fields(config_type) if not isinstance(f.type, str)
        }


def _build(config_type: type, data: dict[str, Any]) -> Any:
    """Instantiate a dataclass from JSON data, restoring fields by their type hints."""
    hints = _field_hints(config_type)
    skipped = {f.name for f in dataclasses.fields(config_type) if not f.init}

    kwargs = {}
    for name, value in data.items():
        if name in skipped:
            continue
        hint = hints.get(name)
        kwargs[name] = value if hint is None else _restore(value, hint)
    return config_type(**kwargs)


def _restore(value: Any, hint: Any) -> Any:
    """JSON loses tuples and nested dataclasses; rebuild them from the hint."""
    if value is None:
        return None

    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return _build(hint, value) if isinstance(value, dict) else value

    if hint is tuple:
        return tuple(value) if isinstance(value, list) else value

    origin = get_origin(hint)
    args = get_args(hint)

    if origin is tuple and isinstance(value, list):
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(_restore(item, args[0]) for item in value)
        if len(args) == len(value):
            return tuple(_restore(item, arg) for item, arg in zip(value, args))
        return tuple(value)

    if origin is list and isinstance(value, list) and args:
        return [_restore(item, args[0]) for item in value]

    if origin is dict and isinstance(value, dict) and len(args) == 2:
        return {key: _restore(item, args[1]) for key, item in value.items()}

    if origin is Union or origin is types.UnionType:
        for arg in args:
            if arg is type(None):
                continue
            restored = _restore(value, arg)
            if restored is not value:
                return restored

    return value

"""
Flink configuration container and typed option descriptors.

A ``FlinkConfiguration`` stores every value as a string, exactly as it
would appear in ``flink-conf.yaml``. Typed access goes through
``ConfigOption`` descriptors which know their key, default and type.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from flink_standalone.exceptions import ConfigurationError

LIST_SEPARATOR = ";"
MAP_ENTRY_SEPARATOR = ","
MAP_KEY_VALUE_SEPARATOR = ":"


@dataclass(frozen=True)
class ConfigOption:
    """
    Descriptor for a single Flink configuration option.

    Attributes:
        key: Configuration key
        default: Default value returned when the key is absent
        value_type: One of str, int, float, bool, list, dict, or
            "map_list" for ``;``-separated lists of ``k:v,k:v`` maps
        fallback_keys: Keys consulted, in order, when ``key`` is absent
    """
    key: str
    default: Any = None
    value_type: Any = str
    fallback_keys: Tuple[str, ...] = field(default_factory=tuple)


def _parse_map(raw: str, key: str) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for entry in raw.split(MAP_ENTRY_SEPARATOR):
        entry = entry.strip()
        if not entry:
            continue
        if MAP_KEY_VALUE_SEPARATOR not in entry:
            raise ConfigurationError(
                f"Invalid map entry '{entry}', expected 'key:value'", key=key
            )
        k, v = entry.split(MAP_KEY_VALUE_SEPARATOR, 1)
        result[k.strip()] = v.strip()
    return result


def _format_map(value: Dict[str, Any]) -> str:
    return MAP_ENTRY_SEPARATOR.join(
        f"{k}{MAP_KEY_VALUE_SEPARATOR}{v}" for k, v in value.items()
    )


def _convert(raw: str, option: ConfigOption) -> Any:
    value_type = option.value_type
    try:
        if value_type is bool:
            lowered = raw.strip().lower()
            if lowered not in ("true", "false"):
                raise ValueError(raw)
            return lowered == "true"
        if value_type is int:
            return int(raw.strip())
        if value_type is float:
            return float(raw.strip())
        if value_type is list:
            return [item.strip() for item in raw.split(LIST_SEPARATOR) if item.strip()]
        if value_type is dict:
            return _parse_map(raw, option.key)
        if value_type == "map_list":
            return [
                _parse_map(item, option.key)
                for item in raw.split(LIST_SEPARATOR) if item.strip()
            ]
        return raw
    except ValueError as e:
        raise ConfigurationError(
            f"Could not parse value '{raw}' as {getattr(value_type, '__name__', value_type)}",
            key=option.key,
        ) from e


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict):
        return _format_map(value)
    if isinstance(value, (list, tuple)):
        return LIST_SEPARATOR.join(
            _format_map(item) if isinstance(item, dict) else str(item)
            for item in value
        )
    return str(value)


class FlinkConfiguration:
    """String-valued Flink configuration with typed accessors."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, str] = {}
        for key, value in (values or {}).items():
            self.set(key, value)

    @staticmethod
    def _key(option: Union[ConfigOption, str]) -> str:
        return option.key if isinstance(option, ConfigOption) else option

    def get(self, option: ConfigOption) -> Any:
        """Return the typed value of ``option`` or its default."""
        value = self.get_optional(option)
        return option.default if value is None else value

    def get_optional(self, option: ConfigOption) -> Any:
        """Return the typed value of ``option``, or None if unset."""
        for key in (option.key,) + tuple(option.fallback_keys):
            if key in self._values:
                return _convert(self._values[key], option)
        return None

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def set(self, option: Union[ConfigOption, str], value: Any) -> "FlinkConfiguration":
        self._values[self._key(option)] = _stringify(value)
        return self

    def remove(self, option: Union[ConfigOption, str]) -> bool:
        return self._values.pop(self._key(option), None) is not None

    def contains(self, option: Union[ConfigOption, str]) -> bool:
        return self._key(option) in self._values

    def with_prefix(self, prefix: str) -> Dict[str, str]:
        """Return entries whose key starts with ``prefix``, prefix stripped."""
        return {
            key[len(prefix):]: value
            for key, value in sorted(self._values.items())
            if key.startswith(prefix)
        }

    def copy(self) -> "FlinkConfiguration":
        return FlinkConfiguration(dict(self._values))

    def to_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def keys(self) -> List[str]:
        return list(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlinkConfiguration):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"FlinkConfiguration({self._values!r})"

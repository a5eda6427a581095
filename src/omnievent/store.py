"""
Nested attribute store.

KeyStore is an ordered dict whose nested mappings are wrapped as KeyStores
(or a declared subtype) so that ``store.a.b.c`` works whatever shape the
values were supplied in. Supports:
- Attribute access: ``store.name`` / ``store.name = "x"`` (missing keys read as None)
- Dot notation for nested fields: ``store.get_path("location.city")``
- List indexing inside paths: ``"entry_points.0.uri"``
- Deep merge (pure ``deep_merge`` and in-place ``deep_update``)

Usage:
    from omnievent.store import KeyStore

    store = KeyStore({"location": {"city": "Perth"}})
    store.location.city            # "Perth"
    store.set_path("location.country", "AU")
"""

from collections.abc import Mapping
from typing import Any, ClassVar, Dict, Optional, Type

_MISSING = object()


def deep_merge(base: Mapping, overlay: Mapping) -> Dict[str, Any]:
    """
    Deep-merge ``overlay`` onto ``base`` without mutating either.

    Nested mappings are merged key by key; any other overlay value replaces
    the base value. Stores flagged ``merge_atomic`` (event records) always
    replace wholesale.

    Args:
        base: Mapping providing the defaults
        overlay: Mapping whose values win on conflict

    Returns:
        New dict; nested stores are copied, never shared with the inputs
    """
    merged = _copy_mapping(base)
    _merge_into(merged, overlay)
    return merged


def _merge_into(target: Dict[str, Any], overlay: Mapping) -> None:
    for key, value in overlay.items():
        existing = target.get(key)
        if _mergeable(value) and _mergeable(existing):
            nested = _copy_mapping(existing)
            _merge_into(nested, value)
            target[key] = nested
        else:
            target[key] = _copy_value(value)


def _mergeable(value: Any) -> bool:
    return isinstance(value, Mapping) and not getattr(value, "merge_atomic", False)


def _copy_mapping(value: Mapping) -> Dict[str, Any]:
    return {key: _copy_value(item) for key, item in value.items()}


def _copy_value(value: Any) -> Any:
    if isinstance(value, KeyStore):
        return value.deep_copy()
    if isinstance(value, Mapping):
        return _copy_mapping(value)
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    return value


def _plain(value: Any) -> Any:
    if isinstance(value, KeyStore):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


class KeyStore(dict):
    """
    Ordered string-keyed store with recursive mapping coercion.

    Subclasses steer coercion with two class attributes:
        - key_classes: maps a key to the store type its mapping value becomes
        - subkey_class: store type for every other nested mapping
          (defaults to the subclass itself)

    No key is ever rejected here; allow-listing belongs to the event schema.
    """

    subkey_class: ClassVar[Optional[Type["KeyStore"]]] = None
    key_classes: ClassVar[Dict[str, Type["KeyStore"]]] = {}
    merge_atomic: ClassVar[bool] = False

    def __init__(self, *args, **kwargs):
        super().__init__()
        self.update(*args, **kwargs)

    # ------------------------------------------------------------------
    # Coercion
    # ------------------------------------------------------------------

    def _subkey_class(self) -> Type["KeyStore"]:
        return self.subkey_class or type(self)

    def convert_value(self, key: str, value: Any) -> Any:
        """Wrap mappings (and mappings inside lists) in the declared store type."""
        target = self.key_classes.get(key)
        if target is not None and isinstance(value, Mapping):
            return value if isinstance(value, target) else target(value)
        return self._convert_item(value)

    def _convert_item(self, value: Any) -> Any:
        if isinstance(value, KeyStore):
            return value
        if isinstance(value, Mapping):
            return self._subkey_class()(value)
        if isinstance(value, list):
            # in place so that references handed out earlier stay live
            for index, item in enumerate(value):
                converted = self._convert_item(item)
                if converted is not item:
                    value[index] = converted
        return value

    # ------------------------------------------------------------------
    # dict protocol
    # ------------------------------------------------------------------

    def __setitem__(self, key: Any, value: Any) -> None:
        if not isinstance(key, str):
            key = str(key)
        if isinstance(value, list):
            value = list(value)
        super().__setitem__(key, self.convert_value(key, value))

    def __getitem__(self, key: Any) -> Any:
        value = super().__getitem__(key)
        converted = self.convert_value(key, value)
        if converted is not value:
            super().__setitem__(key, converted)
        return converted

    def get(self, key: Any, default: Any = None) -> Any:
        if key in self:
            return self[key]
        return default

    def setdefault(self, key: Any, default: Any = None) -> Any:
        if key not in self:
            self[key] = default
        return self[key]

    def update(self, *args, **kwargs) -> None:
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def copy(self) -> "KeyStore":
        return type(self)(self)

    def __copy__(self) -> "KeyStore":
        return self.copy()

    def __deepcopy__(self, memo: Dict[int, Any]) -> "KeyStore":
        return self.deep_copy()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict.__repr__(self)})"

    # ------------------------------------------------------------------
    # Attribute access
    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            super().__setattr__(name, value)
        else:
            self[name] = value

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            super().__delattr__(name)
            return
        try:
            del self[name]
        except KeyError:
            raise AttributeError(name) from None

    # ------------------------------------------------------------------
    # Paths and merging
    # ------------------------------------------------------------------

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Read a value using dot notation.

        Numeric segments index into lists: ``"entry_points.0.uri"``.

        Args:
            path: Dotted path, e.g. "associated_data.location.city"
            default: Returned when any segment is missing

        Returns:
            The value at the path, or default
        """
        current: Any = self
        for part in path.split("."):
            if isinstance(current, Mapping):
                current = current.get(part, _MISSING)
            elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
                current = current[int(part)]
            else:
                return default
            if current is _MISSING:
                return default
        return current

    def set_path(self, path: str, value: Any) -> None:
        """
        Assign a value using dot notation, creating intermediate stores.

        Intermediate values that are not stores are replaced.
        """
        *parents, leaf = path.split(".")
        current: KeyStore = self
        for part in parents:
            child = current.get(part)
            if not isinstance(child, KeyStore):
                current[part] = {}
                child = current[part]
            current = child
        current[leaf] = value

    def deep_merge(self, other: Mapping) -> "KeyStore":
        """Return a new store of the same type with ``other`` deep-merged in."""
        return type(self)(deep_merge(self, other))

    def deep_update(self, other: Mapping) -> "KeyStore":
        """Deep-merge ``other`` into this store in place and return it."""
        for key, value in other.items():
            existing = self.get(key)
            if _mergeable(value) and _mergeable(existing) and isinstance(existing, KeyStore):
                existing.deep_update(value)
            else:
                self[key] = _copy_value(value)
        return self

    def deep_copy(self) -> "KeyStore":
        """Independent copy; nested stores keep their types."""
        return type(self)({key: _copy_value(value) for key, value in self.items()})

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested dict/list representation."""
        return {key: _plain(value) for key, value in self.items()}

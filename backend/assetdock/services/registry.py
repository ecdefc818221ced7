"""
AssetDock Backend - Asset Registry
====================================

What:  Immutable, in-memory table from normalized key to asset bytes.
How:   Built exactly once from `(key, bytes)` pairs before the server starts
       accepting connections. The backing dict is wrapped in a read-only
       MappingProxyType and the class exposes no mutation methods.
Who:   Built by the bundle loader (or directly in tests); read by the
       resolution engine and the introspection route.

Concurrency:
    Every request reads the same registry without locking. No writer ever
    exists after construction, and `Asset.data` is handed out by reference.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from assetdock.exceptions import RegistryError


@dataclass(frozen=True)
class Asset:
    """A single bundled file. `length` always equals `len(data)`."""

    key: str
    data: bytes
    length: int

    @classmethod
    def from_bytes(cls, key: str, data: bytes) -> "Asset":
        return cls(key=key, data=data, length=len(data))


class AssetRegistry:
    """
    Read-only lookup over the bundled assets.

    Keys are case-sensitive and unique. A missing key is a normal empty
    result (None / False), never an error.
    """

    def __init__(self, entries: Iterable[Tuple[str, bytes]] = ()):
        assets: Dict[str, Asset] = {}
        for key, data in entries:
            if not key:
                raise RegistryError(message="Asset keys must not be empty", key=key)
            if key in assets:
                raise RegistryError(
                    message=f"Duplicate asset key '{key}'",
                    key=key,
                )
            assets[key] = Asset.from_bytes(key, bytes(data))
        self._assets: Mapping[str, Asset] = MappingProxyType(assets)

    @classmethod
    def empty(cls) -> "AssetRegistry":
        """Registry used when no bundle was found or it failed to load."""
        return cls(())

    def lookup(self, key: str) -> Optional[Asset]:
        return self._assets.get(key)

    def exists(self, key: str) -> bool:
        return key in self._assets

    def list_keys(self) -> List[str]:
        """Sorted keys, for the debug/introspection endpoint only."""
        return sorted(self._assets)

    def __contains__(self, key: object) -> bool:
        return key in self._assets

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[str]:
        return iter(self._assets)

    def __repr__(self) -> str:
        return f"AssetRegistry({len(self._assets)} assets)"

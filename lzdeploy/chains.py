import os
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from eth_typing import HexAddress
from eth_utils import is_hex_address, is_same_address

from lzdeploy.constants import CHAINS_FILEPATH, CHAINS_FILEPATH_ENVVAR, ZERO_ADDRESS
from lzdeploy.utils import _load_yaml

ChainId = int
LzChainId = int


class ChainEntry(NamedTuple):
    """Represents a single chain and its LayerZero endpoint."""

    name: str
    chain_id: ChainId
    lz_chain_id: LzChainId
    lz_endpoint: HexAddress
    aliases: Tuple[str, ...] = tuple()

    @property
    def labels(self) -> Tuple[str, ...]:
        """All names this chain can be looked up by."""
        return (self.name, *self.aliases)


class NetworkIdentity(NamedTuple):
    """The network a deployment targets, as reported by the provider."""

    name: str
    chain_id: Optional[ChainId] = None


def _normalize_name(name: str) -> str:
    return name.strip().casefold()


def _validate_positive_int(entry_name: str, field: str, value) -> None:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ChainRegistry.Invalid(
            f"Chain '{entry_name}' has an invalid {field} '{value}'; expected a positive integer."
        )


def _validate_entry(entry: ChainEntry) -> None:
    if not isinstance(entry.name, str) or not entry.name.strip():
        raise ChainRegistry.Invalid(f"Chain entry {entry} is missing a name.")
    _validate_positive_int(entry.name, "chain_id", entry.chain_id)
    _validate_positive_int(entry.name, "lz_chain_id", entry.lz_chain_id)
    if not isinstance(entry.lz_endpoint, str) or not is_hex_address(entry.lz_endpoint):
        raise ChainRegistry.Invalid(
            f"Chain '{entry.name}' has an invalid LayerZero endpoint '{entry.lz_endpoint}'."
        )
    if is_same_address(entry.lz_endpoint, ZERO_ADDRESS):
        raise ChainRegistry.Invalid(f"Chain '{entry.name}' has a zero LayerZero endpoint.")


class ChainRegistry:
    """
    Immutable table of chains queryable by name, chain id or LayerZero chain id.

    All indices are derived from the same entries when the registry is built,
    so a lookup by name and a lookup by chain id can never disagree.
    """

    class NotFound(LookupError):
        """Raised when no chain matches a lookup"""

    class Invalid(ValueError):
        """Raised when the chain table is malformed or has duplicate keys"""

    class Mismatch(ValueError):
        """Raised when a network name and chain id identify different chains"""

    def __init__(self, entries: Sequence[ChainEntry]):
        self._entries = tuple(entries)
        self._by_name: Dict[str, ChainEntry] = dict()
        self._by_chain_id: Dict[ChainId, ChainEntry] = dict()
        self._by_lz_chain_id: Dict[LzChainId, ChainEntry] = dict()

        for entry in self._entries:
            _validate_entry(entry)
            for label in entry.labels:
                self._index(self._by_name, _normalize_name(label), entry, "name", allow_same=True)
            self._index(self._by_chain_id, entry.chain_id, entry, "chain_id")
            self._index(self._by_lz_chain_id, entry.lz_chain_id, entry, "lz_chain_id")

    @classmethod
    def _index(
        cls, index: Dict, key, entry: ChainEntry, key_name: str, allow_same: bool = False
    ) -> None:
        existing = index.get(key)
        # a chain may list its own name as an alias
        if existing is not None and not (allow_same and existing is entry):
            raise cls.Invalid(
                f"Duplicate {key_name} '{key}' for chains '{existing.name}' and '{entry.name}'."
            )
        index[key] = entry

    @classmethod
    def from_yaml(cls, filepath: Path) -> "ChainRegistry":
        return cls(entries=read_chains(filepath=filepath))

    def __iter__(self) -> Iterator[ChainEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return isinstance(name, str) and _normalize_name(name) in self._by_name

    @property
    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]

    @property
    def chain_ids(self) -> List[ChainId]:
        return [entry.chain_id for entry in self._entries]

    def find_by_name(self, name: str) -> ChainEntry:
        """Returns the chain with the given name or alias (case-insensitive)."""
        try:
            return self._by_name[_normalize_name(name)]
        except (KeyError, AttributeError):
            raise self.NotFound(f"Network {name} missing LayerZero settings")

    def find_by_chain_id(self, chain_id: ChainId) -> ChainEntry:
        try:
            return self._by_chain_id[chain_id]
        except (KeyError, TypeError):
            raise self.NotFound(f"Chain ID {chain_id} missing LayerZero settings")

    def find_by_lz_chain_id(self, lz_chain_id: LzChainId) -> ChainEntry:
        try:
            return self._by_lz_chain_id[lz_chain_id]
        except (KeyError, TypeError):
            raise self.NotFound(f"LayerZero chain ID {lz_chain_id} not found")

    def find(self, name: Optional[str] = None, chain_id: Optional[ChainId] = None) -> ChainEntry:
        """
        Looks up a chain by name and/or chain id.
        When both are given they must identify the same chain.
        """
        if name is None and chain_id is None:
            raise ValueError("Provide a network name, a chain id, or both.")
        if chain_id is None:
            return self.find_by_name(name)
        entry = self.find_by_chain_id(chain_id)
        if name is not None and self.find_by_name(name) != entry:
            raise self.Mismatch(
                f"Network '{name}' does not match chain ID {chain_id} ({entry.name})."
            )
        return entry


def read_chains(filepath: Path) -> List[ChainEntry]:
    """Reads the chain table from a YAML file."""
    data = _load_yaml(filepath) or dict()
    chains = data.get("chains")
    if not chains:
        raise ChainRegistry.Invalid(f"Chains file {filepath} missing 'chains' field.")

    entries = list()
    for chain in chains:
        try:
            entry = ChainEntry(
                name=chain["name"],
                chain_id=chain["chain_id"],
                lz_chain_id=chain["lz_chain_id"],
                lz_endpoint=chain["lz_endpoint"],
                aliases=tuple(chain.get("aliases") or ()),
            )
        except (AttributeError, KeyError, TypeError) as e:
            raise ChainRegistry.Invalid(f"Malformed chain entry in {filepath}: {chain}") from e
        entries.append(entry)
    return entries


def load_chain_registry(filepath: Optional[Path] = None) -> ChainRegistry:
    """
    Builds the chain registry from an explicit filepath, the
    LZDEPLOY_CHAINS_FILEPATH environment variable, or the packaged chain table.
    """
    if filepath is None:
        filepath = Path(os.environ.get(CHAINS_FILEPATH_ENVVAR, CHAINS_FILEPATH))
    return ChainRegistry.from_yaml(filepath=filepath)

"""
Persistence access port

The abstract contract the query layer talks to. Records cross this boundary
as plain dicts keyed by the external field names (camelCase). Owner scoping
is applied by the implementation from the caller's identity; no method here
takes an owner argument.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

Record = Dict[str, Any]


class AuthMode(str, Enum):
    """Access mode used for a model"""
    API_KEY = "apiKey"       # public catalog, no per-user credentials
    USER_POOL = "userPool"   # authenticated owner identity


CATALOG_ENTITIES = frozenset({"Character"})
OWNER_SCOPED_ENTITIES = frozenset({"Category", "UserCharacterSetting", "MemoItem", "MemoContent"})


def auth_mode_for(entity: str) -> AuthMode:
    """The only access mode valid for an entity type"""
    if entity in CATALOG_ENTITIES:
        return AuthMode.API_KEY
    if entity in OWNER_SCOPED_ENTITIES:
        return AuthMode.USER_POOL
    raise KeyError(entity)


@dataclass(frozen=True)
class IndexSpec:
    """Secondary index: partition attribute plus optional sort attribute"""
    name: str
    entity: str
    partition: str
    sort: Optional[str] = None

    @property
    def owner_partitioned(self) -> bool:
        return self.partition == "owner"


INDEXES: Dict[str, IndexSpec] = {
    spec.name: spec
    for spec in (
        IndexSpec("categoriesByOwner", "Category", "owner", "order"),
        IndexSpec("settingsByOwnerCharacter", "UserCharacterSetting", "owner", "characterId"),
        IndexSpec("memoItemsByOwner", "MemoItem", "owner", "order"),
        IndexSpec("memoContentsByOwnerCharacter", "MemoContent", "owner", "characterIdMemoItemId"),
        IndexSpec("memoContentsByMemoItem", "MemoContent", "memoItemId", "characterIdMemoItemId"),
    )
}


@dataclass(frozen=True)
class KeyCondition:
    """Condition on an index sort key"""
    op: str
    value: Any
    upper: Any = None

    @classmethod
    def eq(cls, value: Any) -> "KeyCondition":
        return cls("eq", value)

    @classmethod
    def begins_with(cls, prefix: str) -> "KeyCondition":
        return cls("begins_with", prefix)

    @classmethod
    def between(cls, lower: Any, upper: Any) -> "KeyCondition":
        return cls("between", lower, upper)


@dataclass(frozen=True)
class FieldFilter:
    """Post-index predicate on a single field (eq, between, contains)"""
    field: str
    op: str
    value: Any
    upper: Any = None


class ModelPort(ABC):
    """CRUD and indexed list operations for one entity type"""

    entity: str
    auth_mode: AuthMode

    @abstractmethod
    async def get(self, record_id: str) -> Optional[Record]:
        """Fetch one record; None when it does not exist for this caller"""

    @abstractmethod
    async def list(self, filters: Sequence[FieldFilter] = (), limit: Optional[int] = None) -> List[Record]:
        """Scan all records visible to the caller, unordered"""

    @abstractmethod
    async def list_by_index(
        self,
        index_name: str,
        key: Any = None,
        sort_key: Optional[KeyCondition] = None,
        filters: Sequence[FieldFilter] = (),
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Record]:
        """Query a declared index, ordered by its sort key

        Owner-partitioned indexes take no key; the caller's identity is the
        partition.
        """

    @abstractmethod
    async def create(self, fields: Record) -> Record:
        """Insert a record; raises ConflictError on a natural duplicate"""

    @abstractmethod
    async def update(self, record_id: str, fields: Record, expected_version: int) -> Record:
        """Update if the stored version matches; raises VersionConflictError or NotFoundError"""

    @abstractmethod
    async def delete(self, record_id: str, expected_version: int) -> Record:
        """Delete if the stored version matches; returns the deleted record"""


class DataClient(ABC):
    """Entry point handed to the query layer"""

    @abstractmethod
    def model(self, entity: str, auth_mode: AuthMode) -> ModelPort:
        """Port for one entity type under the given access mode"""

    @property
    @abstractmethod
    def is_authenticated(self) -> bool:
        """True when an owner identity is attached"""

    @abstractmethod
    def with_owner(self, owner: Optional[str]) -> "DataClient":
        """Same store, bound to another caller identity"""


COMPOSITE_KEY_SEPARATOR = "#"


def composite_key(character_id: str, memo_item_id: str = "") -> str:
    """characterId#memoItemId sort key; an empty memo_item_id gives the character prefix"""
    return f"{character_id}{COMPOSITE_KEY_SEPARATOR}{memo_item_id}"

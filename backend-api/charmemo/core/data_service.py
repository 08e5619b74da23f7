"""
SQLAlchemy-backed data service implementing the persistence port

Every call opens its own AsyncSession. Owner-scoped entities are filtered
by the identity the client was built with; version checks are folded into
the UPDATE/DELETE statement so a stale write cannot slip between read and
write.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Type
import logging

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from charmemo.core.errors import (
    ConflictError,
    MemoError,
    NotFoundError,
    TransportError,
    ValidationError,
    VersionConflictError,
)
from charmemo.core.port import (
    INDEXES,
    OWNER_SCOPED_ENTITIES,
    AuthMode,
    DataClient,
    FieldFilter,
    KeyCondition,
    ModelPort,
    Record,
    auth_mode_for,
    composite_key,
)
from charmemo.models import Category, Character, MemoContent, MemoItem, UserCharacterSetting

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityMapping:
    """External field name -> model attribute, plus which fields a write may set"""
    model: Type[Any]
    fields: Dict[str, str]
    creatable: frozenset
    mutable: frozenset


ENTITY_MAPPINGS: Dict[str, EntityMapping] = {
    "Character": EntityMapping(
        model=Character,
        fields={
            "id": "id", "name": "name", "nameEn": "name_en", "nameZh": "name_zh",
            "icon": "icon", "order": "order", "version": "version",
            "createdAt": "created_at", "updatedAt": "updated_at",
        },
        creatable=frozenset(),
        mutable=frozenset(),
    ),
    "Category": EntityMapping(
        model=Category,
        fields={
            "id": "id", "name": "name", "color": "color", "order": "order", "owner": "owner",
            "version": "version", "createdAt": "created_at", "updatedAt": "updated_at",
        },
        creatable=frozenset({"id", "name", "color", "order"}),
        mutable=frozenset({"name", "color", "order"}),
    ),
    "UserCharacterSetting": EntityMapping(
        model=UserCharacterSetting,
        fields={
            "id": "id", "characterId": "character_id", "categoryId": "category_id",
            "customOrder": "custom_order", "owner": "owner", "version": "version",
            "createdAt": "created_at", "updatedAt": "updated_at",
        },
        creatable=frozenset({"id", "characterId", "categoryId", "customOrder"}),
        mutable=frozenset({"categoryId", "customOrder"}),
    ),
    "MemoItem": EntityMapping(
        model=MemoItem,
        fields={
            "id": "id", "name": "name", "order": "order", "visible": "visible", "owner": "owner",
            "version": "version", "createdAt": "created_at", "updatedAt": "updated_at",
        },
        creatable=frozenset({"id", "name", "order", "visible"}),
        mutable=frozenset({"name", "order", "visible"}),
    ),
    "MemoContent": EntityMapping(
        model=MemoContent,
        fields={
            "id": "id", "characterId": "character_id", "memoItemId": "memo_item_id",
            "characterIdMemoItemId": "character_id_memo_item_id", "content": "content",
            "owner": "owner", "version": "version",
            "createdAt": "created_at", "updatedAt": "updated_at",
        },
        creatable=frozenset({"id", "characterId", "memoItemId", "content"}),
        mutable=frozenset({"content"}),
    ),
}


def _isoformat(value):
    return value.isoformat() if value is not None else None


class SqlModelPort(ModelPort):
    """ModelPort over one SQLAlchemy model"""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        entity: str,
        auth_mode: AuthMode,
        owner: Optional[str],
    ):
        self.entity = entity
        self.auth_mode = auth_mode
        self._session_factory = session_factory
        self._mapping = ENTITY_MAPPINGS[entity]
        self._model = self._mapping.model
        self._owner = owner
        self._owner_scoped = entity in OWNER_SCOPED_ENTITIES

    # ── access & scoping ──────────────────────────────────────

    def _authorize(self, write: bool) -> None:
        if self.auth_mode != auth_mode_for(self.entity):
            raise TransportError(
                f"{self.entity} is not accessible with {self.auth_mode.value}",
                entity=self.entity,
                detail="unauthorized",
            )
        if self.auth_mode == AuthMode.API_KEY and write:
            raise TransportError(f"{self.entity} is read-only", entity=self.entity, detail="unauthorized")
        if self.auth_mode == AuthMode.USER_POOL and not self._owner:
            raise TransportError("owner identity required", entity=self.entity, detail="unauthorized")

    def _scoped(self, stmt):
        if self._owner_scoped:
            stmt = stmt.where(self._model.owner == self._owner)
        return stmt

    def _column(self, field: str):
        attr = self._mapping.fields.get(field)
        if attr is None:
            raise ValidationError(f"unknown field {field!r}", field=field, entity=self.entity)
        return getattr(self._model, attr)

    def _to_record(self, obj) -> Record:
        record: Record = {}
        for field, attr in self._mapping.fields.items():
            value = getattr(obj, attr)
            if attr in ("created_at", "updated_at"):
                value = _isoformat(value)
            record[field] = value
        return record

    def _to_values(self, fields: Record, allowed: frozenset) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for field, value in fields.items():
            if field not in allowed:
                raise ValidationError(
                    f"{field!r} cannot be written on {self.entity}", field=field, entity=self.entity
                )
            values[self._mapping.fields[field]] = value
        return values

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
            except MemoError:
                await session.rollback()
                raise
            except IntegrityError as e:
                await session.rollback()
                raise ConflictError(f"{self.entity} already exists", entity=self.entity) from e
            except (SQLAlchemyError, OSError) as e:
                await session.rollback()
                logger.error(f"[data_service] {self.entity} store failure: {e}")
                raise TransportError(f"{self.entity} store failure", entity=self.entity) from e

    # ── reads ─────────────────────────────────────────────────

    async def get(self, record_id: str) -> Optional[Record]:
        self._authorize(write=False)
        async with self._session() as session:
            result = await session.execute(self._scoped(select(self._model).where(self._model.id == record_id)))
            obj = result.scalar_one_or_none()
            return self._to_record(obj) if obj is not None else None

    def _apply_filters(self, stmt, filters: Sequence[FieldFilter]):
        for f in filters:
            col = self._column(f.field)
            if f.op == "eq":
                stmt = stmt.where(col == f.value)
            elif f.op == "between":
                stmt = stmt.where(col.between(f.value, f.upper))
            elif f.op == "contains":
                stmt = stmt.where(col.contains(f.value, autoescape=True))
            else:
                raise ValidationError(f"unsupported filter op {f.op!r}", field=f.field, entity=self.entity)
        return stmt

    async def list(self, filters: Sequence[FieldFilter] = (), limit: Optional[int] = None) -> List[Record]:
        self._authorize(write=False)
        stmt = self._apply_filters(self._scoped(select(self._model)), filters)
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._session() as session:
            result = await session.execute(stmt)
            return [self._to_record(obj) for obj in result.scalars().all()]

    async def list_by_index(
        self,
        index_name: str,
        key: Any = None,
        sort_key: Optional[KeyCondition] = None,
        filters: Sequence[FieldFilter] = (),
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Record]:
        self._authorize(write=False)
        index = INDEXES.get(index_name)
        if index is None or index.entity != self.entity:
            raise ValidationError(f"no index {index_name!r} on {self.entity}", entity=self.entity)

        stmt = self._scoped(select(self._model))
        if index.owner_partitioned:
            if key is not None:
                raise ValidationError("owner partition is implied by the caller identity", entity=self.entity)
        else:
            if key is None:
                raise ValidationError(f"{index.partition} is required for {index_name}", field=index.partition)
            stmt = stmt.where(self._column(index.partition) == key)

        order_cols = []
        if index.sort is not None:
            sort_col = self._column(index.sort)
            if sort_key is not None:
                if sort_key.op == "eq":
                    stmt = stmt.where(sort_col == sort_key.value)
                elif sort_key.op == "begins_with":
                    stmt = stmt.where(sort_col.startswith(sort_key.value, autoescape=True))
                elif sort_key.op == "between":
                    stmt = stmt.where(sort_col.between(sort_key.value, sort_key.upper))
                else:
                    raise ValidationError(f"unsupported key condition {sort_key.op!r}", entity=self.entity)
            order_cols.append(sort_col.desc() if descending else sort_col.asc())
        order_cols.append(self._model.id.desc() if descending else self._model.id.asc())

        stmt = self._apply_filters(stmt, filters).order_by(*order_cols)
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._session() as session:
            result = await session.execute(stmt)
            return [self._to_record(obj) for obj in result.scalars().all()]

    # ── writes ────────────────────────────────────────────────

    async def create(self, fields: Record) -> Record:
        self._authorize(write=True)
        values = self._to_values(fields, self._mapping.creatable)
        if self._model is MemoContent:
            values["character_id_memo_item_id"] = composite_key(values["character_id"], values["memo_item_id"])
        if self._owner_scoped:
            values["owner"] = self._owner
        async with self._session() as session:
            obj = self._model(**values)
            session.add(obj)
            await session.commit()
            await session.refresh(obj)
            logger.info(f"[data_service] created {self.entity} {obj.id}")
            return self._to_record(obj)

    async def _current_version(self, session: AsyncSession, record_id: str) -> Optional[int]:
        result = await session.execute(
            self._scoped(select(self._model.version).where(self._model.id == record_id))
        )
        return result.scalar_one_or_none()

    async def _reject(self, session: AsyncSession, record_id: str, expected_version: int):
        actual = await self._current_version(session, record_id)
        await session.rollback()
        if actual is None:
            raise NotFoundError(f"{self.entity} {record_id} not found", entity=self.entity, record_id=record_id)
        raise VersionConflictError(
            f"{self.entity} {record_id} is at version {actual}, not {expected_version}",
            entity=self.entity,
            record_id=record_id,
            expected_version=expected_version,
            actual_version=actual,
        )

    async def update(self, record_id: str, fields: Record, expected_version: int) -> Record:
        self._authorize(write=True)
        values = self._to_values(fields, self._mapping.mutable)
        async with self._session() as session:
            stmt = (
                self._scoped(update(self._model))
                .where(self._model.id == record_id, self._model.version == expected_version)
                .values(**values, version=self._model.version + 1)
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                await self._reject(session, record_id, expected_version)
            await session.commit()

            fresh = await session.execute(
                select(self._model)
                .where(self._model.id == record_id)
                .execution_options(populate_existing=True)
            )
            return self._to_record(fresh.scalar_one())

    async def delete(self, record_id: str, expected_version: int) -> Record:
        self._authorize(write=True)
        async with self._session() as session:
            found = await session.execute(self._scoped(select(self._model).where(self._model.id == record_id)))
            obj = found.scalar_one_or_none()
            if obj is None:
                raise NotFoundError(f"{self.entity} {record_id} not found", entity=self.entity, record_id=record_id)
            snapshot = self._to_record(obj)

            stmt = (
                self._scoped(delete(self._model))
                .where(self._model.id == record_id, self._model.version == expected_version)
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                await self._reject(session, record_id, expected_version)
            await session.commit()
            logger.info(f"[data_service] deleted {self.entity} {record_id}")
            return snapshot


class SqlDataClient(DataClient):
    """DataClient backed by an async_sessionmaker, bound to one caller identity"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], owner: Optional[str] = None):
        self._session_factory = session_factory
        self._owner = owner

    @property
    def is_authenticated(self) -> bool:
        return bool(self._owner)

    def with_owner(self, owner: Optional[str]) -> "SqlDataClient":
        return SqlDataClient(self._session_factory, owner)

    def model(self, entity: str, auth_mode: AuthMode) -> SqlModelPort:
        if entity not in ENTITY_MAPPINGS:
            raise ValidationError(f"unknown entity {entity!r}")
        owner = self._owner if auth_mode == AuthMode.USER_POOL else None
        return SqlModelPort(self._session_factory, entity, auth_mode, owner)

"""Entity service: CRUD with filter/sort/populate over named collections."""

import logging
from typing import Any, AsyncContextManager, Callable, Optional

from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_session
from ..exceptions import EntityValidationError, InvalidFilterError
from ..models import resolve_collection
from .filters import coerce_value, compile_filters
from .query import PopulateSpec, SortSpec, apply_sort, loader_options, normalize_populate, serialize

logger = logging.getLogger("entity_service")

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]


class EntityService:
    """Repository over every registered collection.

    Results are plain dicts (see ``serialize``); relations appear only when
    populated.
    """

    def __init__(self, session_scope: SessionScope = get_session):
        self._session_scope = session_scope

    @staticmethod
    def _primary_key(model: type):
        return getattr(model, inspect(model).primary_key[0].key)

    def _coerce_id(self, model: type, entity_id: Any) -> Any:
        return coerce_value(self._primary_key(model), entity_id)

    async def find_many(
        self,
        collection: str,
        filters: Optional[dict] = None,
        sort: SortSpec = None,
        populate: PopulateSpec = None,
        start: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Find entities matching filters."""
        model = resolve_collection(collection)
        tree = normalize_populate(model, populate)

        stmt = select(model)
        where = compile_filters(model, filters)
        if where is not None:
            stmt = stmt.where(where)
        stmt = apply_sort(stmt, model, sort)
        if start:
            stmt = stmt.offset(start)
        if limit is not None:
            stmt = stmt.limit(limit)
        stmt = stmt.options(*loader_options(model, tree))

        logger.debug("find_many %s filters=%s sort=%s", collection, filters, sort)
        async with self._session_scope() as session:
            result = await session.execute(stmt)
            return [serialize(obj, tree) for obj in result.scalars().unique()]

    async def find_one(
        self,
        collection: str,
        entity_id: Any,
        populate: PopulateSpec = None,
    ) -> Optional[dict[str, Any]]:
        """Find an entity by id."""
        model = resolve_collection(collection)
        tree = normalize_populate(model, populate)

        async with self._session_scope() as session:
            obj = await self._load(session, model, entity_id, tree)
            return serialize(obj, tree) if obj is not None else None

    async def count(self, collection: str, filters: Optional[dict] = None) -> int:
        """Count entities matching filters."""
        model = resolve_collection(collection)
        stmt = select(func.count()).select_from(model)
        where = compile_filters(model, filters)
        if where is not None:
            stmt = stmt.where(where)

        async with self._session_scope() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def create(
        self,
        collection: str,
        data: dict[str, Any],
        populate: PopulateSpec = None,
    ) -> dict[str, Any]:
        """Create an entity and return it with the requested relations."""
        model = resolve_collection(collection)
        tree = normalize_populate(model, populate)

        async with self._session_scope() as session:
            obj = model()
            # Related lookups must not flush a half-built row
            with session.no_autoflush:
                await self._assign(session, model, obj, data)
            session.add(obj)
            await session.flush()

            created = await self._load(session, model, self._primary_key_value(obj), tree, refresh=True)
            logger.info("Created %s %s", collection, self._primary_key_value(obj))
            return serialize(created, tree)

    async def update(
        self,
        collection: str,
        entity_id: Any,
        data: dict[str, Any],
        populate: PopulateSpec = None,
    ) -> Optional[dict[str, Any]]:
        """Update an entity. Returns None when it does not exist."""
        model = resolve_collection(collection)
        tree = normalize_populate(model, populate)
        mapper = inspect(model)

        # To-many collections are replaced, so they must be loaded first
        to_many = {
            key: {} for key in data
            if key in mapper.relationships and mapper.relationships[key].uselist
        }

        async with self._session_scope() as session:
            obj = await self._load(session, model, entity_id, to_many)
            if obj is None:
                return None
            with session.no_autoflush:
                await self._assign(session, model, obj, data)
            await session.flush()

            updated = await self._load(session, model, self._primary_key_value(obj), tree, refresh=True)
            logger.info("Updated %s %s", collection, entity_id)
            return serialize(updated, tree)

    async def delete(
        self,
        collection: str,
        entity_id: Any,
        populate: PopulateSpec = None,
    ) -> Optional[dict[str, Any]]:
        """Delete an entity, returning it as it was before deletion."""
        model = resolve_collection(collection)
        tree = normalize_populate(model, populate)

        # Cascades walk to-many collections, load them up front
        load_tree = dict(tree)
        for key, rel in inspect(model).relationships.items():
            if rel.uselist:
                load_tree.setdefault(key, {})

        async with self._session_scope() as session:
            obj = await self._load(session, model, entity_id, load_tree)
            if obj is None:
                return None
            deleted = serialize(obj, tree)
            await session.delete(obj)
            await session.flush()

            logger.info("Deleted %s %s", collection, entity_id)
            return deleted

    def _primary_key_value(self, obj: Any) -> Any:
        return inspect(obj).identity[0]

    async def _load(
        self,
        session: AsyncSession,
        model: type,
        entity_id: Any,
        tree: dict,
        refresh: bool = False,
    ) -> Any:
        pk_value = self._coerce_id(model, entity_id)
        stmt = (
            select(model)
            .where(self._primary_key(model) == pk_value)
            .options(*loader_options(model, tree))
        )
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def _assign(self, session: AsyncSession, model: type, obj: Any, data: dict[str, Any]) -> None:
        """Apply a write payload: columns by value, relations by id."""
        mapper = inspect(model)
        for key, value in data.items():
            if key in mapper.relationships:
                rel = mapper.relationships[key]
                target = rel.mapper.class_
                if rel.uselist:
                    setattr(obj, key, await self._fetch_related(session, target, value or [], key))
                elif value is None:
                    setattr(obj, key, None)
                else:
                    related = await self._fetch_related(session, target, [value], key)
                    setattr(obj, key, related[0])
            elif key in mapper.column_attrs:
                column = getattr(model, key)
                try:
                    setattr(obj, key, coerce_value(column, value))
                except InvalidFilterError as exc:
                    raise EntityValidationError(exc.message, exc.details) from exc
            else:
                raise EntityValidationError(
                    f"Unknown field '{key}' on {model.__name__}",
                    {"field": key, "model": model.__name__},
                )

    async def _fetch_related(self, session: AsyncSession, target: type, ids: Any, key: str) -> list:
        if not isinstance(ids, (list, tuple, set)):
            ids = [ids]
        pk = self._primary_key(target)
        wanted = [
            coerce_value(pk, item["id"] if isinstance(item, dict) else item)
            for item in ids
        ]
        if not wanted:
            return []

        result = await session.execute(select(target).where(pk.in_(wanted)))
        found = {self._primary_key_value(o): o for o in result.scalars()}
        missing = [i for i in wanted if i not in found]
        if missing:
            raise EntityValidationError(
                f"Related {target.__name__} not found for '{key}': {missing}",
                {"field": key, "missing": missing},
            )
        return [found[i] for i in wanted]


__all__ = ["EntityService", "SessionScope"]

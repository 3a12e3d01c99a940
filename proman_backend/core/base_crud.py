"""
Base CRUD operations for consistent data access patterns across all modules.

This is the persistence gateway every manager talks to: fetch rows matching a
filter, insert rows and return the generated identifier, update or delete rows
matching a filter.
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, and_, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

# Generic type variables for type safety
ModelType = TypeVar("ModelType")


class BaseCRUD(Generic[ModelType]):
    """
    Base CRUD class providing common database operations.

    Attributes:
        model: SQLAlchemy model class
        search_fields: Fields to search in for text-based queries
        default_relationships: Default relationships to load
        default_order_by: Default ordering field
    """

    # Configuration attributes that can be overridden by subclasses
    search_fields: list[str] = []
    default_relationships: list[str] = []
    default_order_by: str = "created_at"
    default_order_desc: bool = True

    def __init__(self, model: type[ModelType]):
        """Initialize CRUD operations for a specific model."""
        self.model = model

    def _where(self, query: Select, conditions: Sequence[ColumnElement[bool]]) -> Select:
        if conditions:
            query = query.where(and_(*conditions))
        return query

    def search_condition(self, search_query: str | None) -> ColumnElement[bool] | None:
        """Substring match across configured search fields, OR-ed together."""
        if not search_query or not self.search_fields:
            return None
        pattern = f"%{search_query}%"
        clauses = [
            getattr(self.model, name).ilike(pattern)
            for name in self.search_fields
            if hasattr(self.model, name)
        ]
        if not clauses:
            return None
        condition = clauses[0]
        for clause in clauses[1:]:
            condition = condition | clause
        return condition

    def _apply_relationships(
        self, query: Select, load_relationships: list[str] | None = None
    ) -> Select:
        """Apply relationship loading."""
        relationships = (
            self.default_relationships
            if load_relationships is None
            else load_relationships
        )
        for relationship_name in relationships:
            if hasattr(self.model, relationship_name):
                relationship = getattr(self.model, relationship_name)
                query = query.options(selectinload(relationship))
        return query

    def _apply_ordering(self, query: Select, order_by: str | None = None) -> Select:
        """Apply ordering to query."""
        order_field = order_by or self.default_order_by
        if hasattr(self.model, order_field):
            field = getattr(self.model, order_field)
            if self.default_order_desc:
                query = query.order_by(field.desc(), self.model.id.desc())
            else:
                query = query.order_by(field, self.model.id)
        return query

    async def get(
        self,
        db: AsyncSession,
        id: int,
        load_relationships: list[str] | None = None,
    ) -> ModelType | None:
        """
        Get a single record by primary key, always re-read from the store.

        Args:
            db: Database session
            id: Record ID
            load_relationships: Relationships to eager load

        Returns:
            The model instance or None if not found
        """
        query = select(self.model).where(self.model.id == id)
        query = self._apply_relationships(query, load_relationships)
        query = query.execution_options(populate_existing=True)

        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def select(
        self,
        db: AsyncSession,
        conditions: Sequence[ColumnElement[bool]] = (),
        order_by: Sequence[Any] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        load_relationships: list[str] | None = None,
    ) -> list[ModelType]:
        """
        Fetch rows matching all ``conditions``.

        Args:
            db: Database session
            conditions: Predicates combined with AND
            order_by: Explicit ordering; defaults to ``default_order_by``
            limit: Maximum number of rows
            offset: Number of rows to skip
            load_relationships: Relationships to eager load

        Returns:
            Matching rows in order
        """
        query = self._where(select(self.model), conditions)
        query = self._apply_relationships(query, load_relationships)
        if order_by is None:
            query = self._apply_ordering(query)
        else:
            query = query.order_by(*order_by)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        query = query.execution_options(populate_existing=True)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def count(
        self, db: AsyncSession, conditions: Sequence[ColumnElement[bool]] = ()
    ) -> int:
        """Count rows matching all ``conditions``."""
        query = self._where(select(func.count(self.model.id)), conditions)
        result = await db.execute(query)
        return result.scalar() or 0

    async def exists(self, db: AsyncSession, **filters: Any) -> bool:
        """
        Check if a record exists with the given equality filters.

        Args:
            db: Database session
            **filters: Field filters to check

        Returns:
            True if record exists, False otherwise
        """
        conditions = [
            getattr(self.model, field_name) == value
            for field_name, value in filters.items()
        ]
        query = self._where(select(self.model.id), conditions).limit(1)
        result = await db.execute(query)
        return result.first() is not None

    async def insert(self, db: AsyncSession, obj_in: dict[str, Any]) -> int:
        """
        Insert a row and return its generated identifier.

        The row is flushed, not committed; the caller owns the commit.
        """
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        await db.flush()
        return db_obj.id

    async def insert_many(
        self, db: AsyncSession, rows: Sequence[dict[str, Any]]
    ) -> list[int]:
        """Insert several rows in one flush and return their identifiers."""
        db_objs = [self.model(**row) for row in rows]
        db.add_all(db_objs)
        await db.flush()
        return [db_obj.id for db_obj in db_objs]

    async def update(
        self, db: AsyncSession, id: int, values: dict[str, Any]
    ) -> None:
        """Apply a partial column update to the row with the given id."""
        if not values:
            return
        await db.execute(
            update(self.model)
            .where(self.model.id == id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    async def soft_delete(self, db: AsyncSession, id: int) -> None:
        """Mark the row inactive instead of removing it."""
        await self.update(db, id, {"is_active": False})

    async def delete(self, db: AsyncSession, id: int) -> None:
        """Remove the row with the given id."""
        await db.execute(
            delete(self.model)
            .where(self.model.id == id)
            .execution_options(synchronize_session=False)
        )

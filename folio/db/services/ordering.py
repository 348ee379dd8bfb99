"""Ordered sibling collections with atomic reordering.

An :class:`OrderedCollection` manages rows that share one integer ordering
column within a scope (all hero slides, the images of one album, the
children of one menu entry). Order values are unique per scope, need not be
contiguous, and only ever change inside a single transaction:

* ``append`` places a new row at ``max(order) + 1`` (``1`` when empty).
* ``move_adjacent`` swaps a row with its nearest sibling above or below.
  Moving the first row up or the last row down does nothing.
* ``remove`` deletes a row without renumbering the others.
* ``reconcile`` applies a client-submitted final ordering, removals and
  per-row edits in one go.

Each public operation commits on its own and then fires the
``collection_changed`` action so cached views of the scope are dropped.
The ``stage_*`` variants do the same work without committing or
notifying, for services that need to write more rows (audit entries,
related records) in the same transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Generic, Literal, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from folio.db.base import Base
from folio.db.transaction import atomic
from folio.lib.exceptions import NotFound, ValidationError
from folio.lib.hooks import COLLECTION_CHANGED, HookRegistry, hooks
from folio.lib.observability import span

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

Direction = Literal["up", "down"]
DIRECTIONS: tuple[str, ...] = ("up", "down")

# Temporary order for a row being swapped; keeps unique constraints satisfied
# between the individual UPDATE statements. Orders start at 0 or above.
PARKED_ORDER = -1


class OrderedCollection(Generic[ModelT]):
    """Ordering operations for one model.

    Args:
        model: Mapped class holding the rows
        name: Collection name reported to ``collection_changed`` listeners
        label: Human readable item name used in error messages
        order_field: Integer column defining display order
        scope_fields: Columns partitioning rows into independent sequences
        visibility_field: Boolean column toggled by ``set_visibility``
        cache_tags: Maps a scope to the cache tags of views built from it
        registry: Hook registry notified after each mutation
    """

    def __init__(
        self,
        model: type[ModelT],
        *,
        name: str,
        label: str = "Item",
        order_field: str = "order",
        scope_fields: Iterable[str] = (),
        visibility_field: str | None = None,
        cache_tags: Callable[[Mapping[str, Any]], Iterable[str]] | None = None,
        registry: HookRegistry = hooks,
    ) -> None:
        self.model = model
        self.name = name
        self.label = label
        self.order_field = order_field
        self.scope_fields = tuple(scope_fields)
        self.visibility_field = visibility_field
        self._cache_tags = cache_tags
        self._registry = registry

    @property
    def order_column(self):
        return getattr(self.model, self.order_field)

    # --- Scopes ---

    def scope_of(self, item: ModelT) -> dict[str, Any]:
        """Return the scope values of an existing row."""
        return {field: getattr(item, field) for field in self.scope_fields}

    def normalize_scope(self, scope: Mapping[str, Any] | None) -> dict[str, Any]:
        scope = dict(scope or {})
        if set(scope) != set(self.scope_fields):
            raise ValueError(
                f"{self.name} scope must provide exactly {self.scope_fields!r}, got {tuple(scope)!r}"
            )
        return scope

    def _scope_filter(self, scope: Mapping[str, Any]) -> list:
        clauses = []
        for field in self.scope_fields:
            column = getattr(self.model, field)
            value = scope[field]
            clauses.append(column.is_(None) if value is None else column == value)
        return clauses

    def tags_for(self, scope: Mapping[str, Any]) -> list[str]:
        if self._cache_tags is None:
            return [self.name]
        return list(self._cache_tags(scope))

    # --- Reads ---

    async def get(self, db_session: AsyncSession, item_id: UUID, for_update: bool = False) -> ModelT | None:
        query = select(self.model).where(self.model.id == item_id)
        if for_update:
            query = query.with_for_update()
        result = await db_session.execute(query)
        return result.scalar_one_or_none()

    async def get_or_raise(self, db_session: AsyncSession, item_id: UUID, for_update: bool = False) -> ModelT:
        item = await self.get(db_session, item_id, for_update=for_update)
        if item is None:
            raise NotFound(f"{self.label} not found.")
        return item

    async def list(
        self,
        db_session: AsyncSession,
        scope: Mapping[str, Any] | None = None,
        visible_only: bool = False,
        for_update: bool = False,
    ) -> list[ModelT]:
        """List the rows of a scope in ascending order."""
        scope = self.normalize_scope(scope)
        query = select(self.model).where(*self._scope_filter(scope))
        if visible_only and self.visibility_field:
            query = query.where(getattr(self.model, self.visibility_field) == True)  # noqa: E712
        query = query.order_by(self.order_column.asc())
        if for_update:
            query = query.with_for_update()
        result = await db_session.execute(query)
        return list(result.scalars().all())

    async def next_order(self, db_session: AsyncSession, scope: Mapping[str, Any]) -> int:
        result = await db_session.execute(
            select(func.max(self.order_column)).where(*self._scope_filter(scope))
        )
        current = result.scalar()
        return 1 if current is None else current + 1

    async def _neighbor(self, db_session: AsyncSession, item: ModelT, direction: Direction) -> ModelT | None:
        current = getattr(item, self.order_field)
        column = self.order_column
        query = select(self.model).where(*self._scope_filter(self.scope_of(item)))
        if direction == "up":
            query = query.where(column < current).order_by(column.desc())
        else:
            query = query.where(column > current).order_by(column.asc())
        result = await db_session.execute(query.limit(1).with_for_update())
        return result.scalars().first()

    # --- Staged mutations (caller commits) ---

    async def stage_append(self, db_session: AsyncSession, scope: Mapping[str, Any] | None, **fields: Any) -> ModelT:
        scope = self.normalize_scope(scope)
        if self.order_field in fields or set(fields) & set(self.scope_fields):
            raise ValueError("Order and scope are assigned by the collection")

        item = self.model(**fields, **scope)
        setattr(item, self.order_field, await self.next_order(db_session, scope))
        db_session.add(item)
        await db_session.flush()
        return item

    async def stage_move(self, db_session: AsyncSession, item_id: UUID, direction: str) -> tuple[ModelT, bool]:
        """Swap a row with its adjacent sibling. Returns ``(item, moved)``."""
        if direction not in DIRECTIONS:
            raise ValidationError.for_field("direction", "Direction must be 'up' or 'down'.")

        item = await self.get_or_raise(db_session, item_id, for_update=True)
        neighbor = await self._neighbor(db_session, item, direction)
        if neighbor is None:
            return item, False

        item_order = getattr(item, self.order_field)
        neighbor_order = getattr(neighbor, self.order_field)

        setattr(item, self.order_field, PARKED_ORDER)
        await db_session.flush()
        setattr(neighbor, self.order_field, item_order)
        await db_session.flush()
        setattr(item, self.order_field, neighbor_order)
        await db_session.flush()

        logger.debug(
            "Swapped %s %s (%s -> %s) with %s", self.name, item.id, item_order, neighbor_order, neighbor.id
        )
        return item, True

    async def stage_remove(self, db_session: AsyncSession, item_id: UUID) -> ModelT:
        item = await self.get_or_raise(db_session, item_id, for_update=True)
        await db_session.delete(item)
        await db_session.flush()
        return item

    async def stage_set_visibility(self, db_session: AsyncSession, item_id: UUID, is_visible: bool) -> ModelT:
        if self.visibility_field is None:
            raise TypeError(f"{self.name} has no visibility column")
        item = await self.get_or_raise(db_session, item_id)
        setattr(item, self.visibility_field, bool(is_visible))
        await db_session.flush()
        return item

    async def stage_reconcile(
        self,
        db_session: AsyncSession,
        scope: Mapping[str, Any] | None,
        ordered_ids: Iterable[UUID],
        removed_ids: Iterable[UUID] = (),
        field_updates: Mapping[UUID, Mapping[str, Any]] | None = None,
        updates_field: str = "updates",
    ) -> list[ModelT]:
        """Delete ``removed_ids``, order the rest as listed, then apply edits.

        Surviving rows take their 0-based index in ``ordered_ids`` as order.
        ``updates_field`` names the input field blamed for edits that target
        removed or unknown rows.
        """
        scope = self.normalize_scope(scope)
        ordered_ids = list(ordered_ids)
        removed_ids = list(removed_ids)
        field_updates = dict(field_updates or {})

        errors: dict[str, str] = {}
        if len(set(ordered_ids)) != len(ordered_ids):
            errors["ordered_ids"] = "Each item may appear only once."
        if len(set(removed_ids)) != len(removed_ids):
            errors["removed_ids"] = "Each item may be removed only once."
        elif set(ordered_ids) & set(removed_ids):
            errors["removed_ids"] = "Removed items cannot also be ordered."
        if set(field_updates) - set(ordered_ids):
            errors[updates_field] = "Only remaining items can be edited."
        if errors:
            raise ValidationError(None, errors)

        items = {item.id: item for item in await self.list(db_session, scope, for_update=True)}

        if set(removed_ids) - items.keys():
            raise ValidationError.for_field("removed_ids", f"Some removed items are not part of this {self.label.lower()} list.")
        if set(ordered_ids) - items.keys():
            raise ValidationError.for_field("ordered_ids", f"Some items are not part of this {self.label.lower()} list.")
        if set(ordered_ids) != items.keys() - set(removed_ids):
            raise ValidationError.for_field("ordered_ids", "The new order must list every remaining item.")

        for item_id in removed_ids:
            await db_session.delete(items[item_id])
        await db_session.flush()

        # Park every survivor on a distinct negative order first so the final
        # assignment never collides with a not-yet-updated sibling.
        for index, item_id in enumerate(ordered_ids):
            setattr(items[item_id], self.order_field, PARKED_ORDER - index)
        await db_session.flush()

        for index, item_id in enumerate(ordered_ids):
            setattr(items[item_id], self.order_field, index)
        for item_id, changes in field_updates.items():
            for field, value in changes.items():
                setattr(items[item_id], field, value)
        await db_session.flush()

        return [items[item_id] for item_id in ordered_ids]

    # --- Notifications ---

    async def notify(self, scope: Mapping[str, Any], operation: str) -> None:
        """Tell listeners that a scope changed.

        Listener failures are logged and never undo or fail the mutation,
        which has already been committed.
        """
        tags = self.tags_for(scope)
        try:
            await self._registry.do_action(COLLECTION_CHANGED, self.name, tags, operation)
        except Exception:
            logger.warning("Change notification failed for %s %s", self.name, tags, exc_info=True)

    # --- Committed operations ---

    async def append(self, db_session: AsyncSession, scope: Mapping[str, Any] | None = None, **fields: Any) -> ModelT:
        scope = self.normalize_scope(scope)
        with span("ordering.append", collection=self.name):
            async with atomic(db_session, f"append to {self.name}"):
                item = await self.stage_append(db_session, scope, **fields)
        await self.notify(scope, "append")
        return item

    async def move_adjacent(self, db_session: AsyncSession, item_id: UUID, direction: str) -> bool:
        """Move a row one step up or down. Returns False at either end."""
        with span("ordering.move", collection=self.name, direction=direction):
            async with atomic(db_session, f"move in {self.name}"):
                item, moved = await self.stage_move(db_session, item_id, direction)
                scope = self.scope_of(item)
        if moved:
            await self.notify(scope, "move")
        return moved

    async def remove(self, db_session: AsyncSession, item_id: UUID) -> ModelT:
        """Delete a row. A missing row raises NotFound."""
        with span("ordering.remove", collection=self.name):
            async with atomic(db_session, f"remove from {self.name}"):
                item = await self.stage_remove(db_session, item_id)
                scope = self.scope_of(item)
        await self.notify(scope, "remove")
        return item

    async def set_visibility(self, db_session: AsyncSession, item_id: UUID, is_visible: bool) -> ModelT:
        with span("ordering.visibility", collection=self.name):
            async with atomic(db_session, f"toggle visibility in {self.name}"):
                item = await self.stage_set_visibility(db_session, item_id, is_visible)
                scope = self.scope_of(item)
        await self.notify(scope, "visibility")
        return item

    async def reconcile(
        self,
        db_session: AsyncSession,
        scope: Mapping[str, Any] | None,
        ordered_ids: Iterable[UUID],
        removed_ids: Iterable[UUID] = (),
        field_updates: Mapping[UUID, Mapping[str, Any]] | None = None,
    ) -> list[ModelT]:
        scope = self.normalize_scope(scope)
        with span("ordering.reconcile", collection=self.name):
            async with atomic(db_session, f"reconcile {self.name}"):
                items = await self.stage_reconcile(db_session, scope, ordered_ids, removed_ids, field_updates)
        await self.notify(scope, "reconcile")
        return items

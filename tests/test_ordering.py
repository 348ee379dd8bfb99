"""Tests for OrderedCollection: append, adjacent swaps, removal and reconcile."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from folio.db.models import HeroSlide
from folio.db.services.hero_slide_service import hero_slides
from folio.db.services.menu_service import menu_items
from folio.lib.exceptions import NotFound, StorageError, ValidationError
from folio.lib.hooks import COLLECTION_CHANGED, hooks

MAIN = {"menu": "main", "parent_id": None}
FOOTER = {"menu": "footer", "parent_id": None}


async def _titles(session_maker) -> list[str]:
    async with session_maker() as session:
        return [slide.title for slide in await hero_slides.list(session)]


async def _orders(session_maker) -> dict[str, int]:
    async with session_maker() as session:
        return {slide.title: slide.order for slide in await hero_slides.list(session)}


@pytest.fixture
async def abc(db_session):
    """Three slides A, B, C appended in that order."""
    return [await hero_slides.append(db_session, None, title=title) for title in ("A", "B", "C")]


class TestAppend:
    @pytest.mark.asyncio
    async def test_empty_scope_starts_at_one(self, db_session):
        first = await hero_slides.append(db_session, None, title="First")
        second = await hero_slides.append(db_session, None, title="Second")

        assert first.order == 1
        assert second.order == 2

    @pytest.mark.asyncio
    async def test_appends_after_highest_order_with_gaps(self, db_session, abc):
        await hero_slides.remove(db_session, abc[2].id)

        slide = await hero_slides.append(db_session, None, title="D")

        assert slide.order == 3

    @pytest.mark.asyncio
    async def test_scopes_are_numbered_independently(self, db_session):
        main_first = await menu_items.append(db_session, MAIN, title="Home", url="/")
        footer_first = await menu_items.append(db_session, FOOTER, title="Imprint", url="/imprint")
        main_second = await menu_items.append(db_session, MAIN, title="Blog", url="/blog")

        assert (main_first.order, main_second.order) == (1, 2)
        assert footer_first.order == 1

    @pytest.mark.asyncio
    async def test_rejects_explicit_order(self, db_session):
        with pytest.raises(ValueError):
            await hero_slides.append(db_session, None, title="Sneaky", order=7)

    @pytest.mark.asyncio
    async def test_rejects_incomplete_scope(self, db_session):
        with pytest.raises(ValueError):
            await menu_items.append(db_session, {"menu": "main"}, title="Home", url="/")


class TestMoveAdjacent:
    @pytest.mark.asyncio
    async def test_move_last_up_swaps_with_middle(self, db_session, session_maker, abc):
        moved = await hero_slides.move_adjacent(db_session, abc[2].id, "up")

        assert moved is True
        assert await _titles(session_maker) == ["A", "C", "B"]
        assert await _orders(session_maker) == {"A": 1, "C": 2, "B": 3}

    @pytest.mark.asyncio
    async def test_move_first_down(self, db_session, session_maker, abc):
        assert await hero_slides.move_adjacent(db_session, abc[0].id, "down") is True
        assert await _titles(session_maker) == ["B", "A", "C"]

    @pytest.mark.asyncio
    async def test_first_up_is_noop(self, db_session, session_maker, abc):
        assert await hero_slides.move_adjacent(db_session, abc[0].id, "up") is False
        assert await _orders(session_maker) == {"A": 1, "B": 2, "C": 3}

    @pytest.mark.asyncio
    async def test_last_down_is_noop(self, db_session, session_maker, abc):
        assert await hero_slides.move_adjacent(db_session, abc[2].id, "down") is False
        assert await _orders(session_maker) == {"A": 1, "B": 2, "C": 3}

    @pytest.mark.asyncio
    async def test_down_then_up_restores_order(self, db_session, session_maker, abc):
        await hero_slides.move_adjacent(db_session, abc[1].id, "down")
        await hero_slides.move_adjacent(db_session, abc[1].id, "up")

        assert await _orders(session_maker) == {"A": 1, "B": 2, "C": 3}

    @pytest.mark.asyncio
    async def test_swaps_across_gaps(self, db_session, session_maker, abc):
        await hero_slides.remove(db_session, abc[1].id)

        await hero_slides.move_adjacent(db_session, abc[2].id, "up")

        assert await _orders(session_maker) == {"C": 1, "A": 3}

    @pytest.mark.asyncio
    async def test_orders_stay_unique_after_many_moves(self, db_session, session_maker, abc):
        for slide, direction in [(abc[0], "down"), (abc[0], "down"), (abc[2], "down"), (abc[1], "up")]:
            await hero_slides.move_adjacent(db_session, slide.id, direction)

        orders = list((await _orders(session_maker)).values())
        assert len(orders) == len(set(orders)) == 3

    @pytest.mark.asyncio
    async def test_only_siblings_in_scope_are_swapped(self, db_session):
        home = await menu_items.append(db_session, MAIN, title="Home", url="/")
        await menu_items.append(db_session, FOOTER, title="Imprint", url="/imprint")

        assert await menu_items.move_adjacent(db_session, home.id, "down") is False

    @pytest.mark.asyncio
    async def test_unknown_item_raises_not_found(self, db_session, abc):
        from uuid import uuid4

        with pytest.raises(NotFound):
            await hero_slides.move_adjacent(db_session, uuid4(), "up")

    @pytest.mark.asyncio
    async def test_invalid_direction(self, db_session, abc):
        with pytest.raises(ValidationError) as exc_info:
            await hero_slides.move_adjacent(db_session, abc[0].id, "sideways")

        assert "direction" in exc_info.value.field_errors

    @pytest.mark.asyncio
    async def test_failed_flush_mid_swap_leaves_order_intact(self, db_session, session_maker, abc):
        real_flush = db_session.flush
        calls = 0

        async def flaky_flush(*args, **kwargs):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise OperationalError("UPDATE hero_slides", {}, Exception("disk I/O error"))
            return await real_flush(*args, **kwargs)

        with patch.object(db_session, "flush", flaky_flush):
            with pytest.raises(StorageError) as exc_info:
                await hero_slides.move_adjacent(db_session, abc[2].id, "up")

        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert await _orders(session_maker) == {"A": 1, "B": 2, "C": 3}


class TestRemove:
    @pytest.mark.asyncio
    async def test_remove_keeps_other_orders(self, db_session, session_maker, abc):
        removed = await hero_slides.remove(db_session, abc[1].id)

        assert removed.title == "B"
        assert await _orders(session_maker) == {"A": 1, "C": 3}

    @pytest.mark.asyncio
    async def test_remove_missing_raises_not_found(self, db_session, abc):
        await hero_slides.remove(db_session, abc[0].id)

        with pytest.raises(NotFound, match="Slide not found"):
            await hero_slides.remove(db_session, abc[0].id)


class TestSetVisibility:
    @pytest.mark.asyncio
    async def test_toggles_flag_without_moving(self, db_session, session_maker, abc):
        slide = await hero_slides.set_visibility(db_session, abc[1].id, False)

        assert slide.is_active is False
        assert slide.order == 2
        async with session_maker() as session:
            visible = await hero_slides.list(session, visible_only=True)
        assert [s.title for s in visible] == ["A", "C"]

    @pytest.mark.asyncio
    async def test_collection_without_visibility_column(self, db_session):
        from folio.db.services.album_service import album_images

        with pytest.raises(TypeError):
            await album_images.set_visibility(db_session, None, True)


class TestReconcile:
    @pytest.mark.asyncio
    async def test_removes_and_reorders(self, db_session, session_maker, abc):
        a, b, c = abc

        result = await hero_slides.reconcile(db_session, None, [c.id, a.id], [b.id])

        assert [slide.title for slide in result] == ["C", "A"]
        assert await _orders(session_maker) == {"C": 0, "A": 1}

    @pytest.mark.asyncio
    async def test_is_idempotent(self, db_session, session_maker, abc):
        ordered = [abc[1].id, abc[2].id, abc[0].id]

        await hero_slides.reconcile(db_session, None, ordered)
        first = await _orders(session_maker)
        await hero_slides.reconcile(db_session, None, ordered)

        assert await _orders(session_maker) == first == {"B": 0, "C": 1, "A": 2}

    @pytest.mark.asyncio
    async def test_applies_field_updates(self, db_session, session_maker, abc):
        a, b, c = abc

        await hero_slides.reconcile(db_session, None, [a.id, b.id, c.id], field_updates={b.id: {"title": "Bee"}})

        assert await _titles(session_maker) == ["A", "Bee", "C"]

    @pytest.mark.asyncio
    async def test_rejects_duplicates(self, db_session, abc):
        a, b, c = abc
        with pytest.raises(ValidationError) as exc_info:
            await hero_slides.reconcile(db_session, None, [a.id, a.id, b.id, c.id])
        assert "ordered_ids" in exc_info.value.field_errors

    @pytest.mark.asyncio
    async def test_rejects_items_both_ordered_and_removed(self, db_session, abc):
        a, b, c = abc
        with pytest.raises(ValidationError) as exc_info:
            await hero_slides.reconcile(db_session, None, [a.id, b.id, c.id], [c.id])
        assert "removed_ids" in exc_info.value.field_errors

    @pytest.mark.asyncio
    async def test_rejects_incomplete_order(self, db_session, session_maker, abc):
        a, b, _ = abc
        with pytest.raises(ValidationError) as exc_info:
            await hero_slides.reconcile(db_session, None, [b.id, a.id])

        assert exc_info.value.field_errors["ordered_ids"] == "The new order must list every remaining item."
        assert await _orders(session_maker) == {"A": 1, "B": 2, "C": 3}

    @pytest.mark.asyncio
    async def test_rejects_unknown_ids(self, db_session, abc):
        from uuid import uuid4

        # The failed reconcile rolls back and expires the loaded rows
        ids = [slide.id for slide in abc]
        with pytest.raises(ValidationError) as exc_info:
            await hero_slides.reconcile(db_session, None, [*ids, uuid4()])
        assert "ordered_ids" in exc_info.value.field_errors

        with pytest.raises(ValidationError) as exc_info:
            await hero_slides.reconcile(db_session, None, ids, [uuid4()])
        assert "removed_ids" in exc_info.value.field_errors

    @pytest.mark.asyncio
    async def test_rejects_updates_for_removed_items(self, db_session, abc):
        a, b, c = abc
        with pytest.raises(ValidationError) as exc_info:
            await hero_slides.reconcile(db_session, None, [a.id, b.id], [c.id], {c.id: {"title": "Gone"}})
        assert "updates" in exc_info.value.field_errors


class TestNotifications:
    @pytest.mark.asyncio
    async def test_move_fires_collection_changed(self, db_session, abc):
        listener = AsyncMock()
        hooks.add_action(COLLECTION_CHANGED, listener)

        await hero_slides.move_adjacent(db_session, abc[1].id, "up")

        listener.assert_awaited_once_with("hero_slides", ["hero-slides"], "move")

    @pytest.mark.asyncio
    async def test_noop_move_does_not_notify(self, db_session, abc):
        listener = AsyncMock()
        hooks.add_action(COLLECTION_CHANGED, listener)

        await hero_slides.move_adjacent(db_session, abc[0].id, "up")

        listener.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_scope_tags_reach_listeners(self, db_session):
        listener = AsyncMock()
        hooks.add_action(COLLECTION_CHANGED, listener)

        await menu_items.append(db_session, FOOTER, title="Imprint", url="/imprint")

        listener.assert_awaited_once_with("menu_items", ["menu:footer"], "append")

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_fail_mutation(self, db_session, session_maker):
        hooks.add_action(COLLECTION_CHANGED, AsyncMock(side_effect=RuntimeError("cache down")))

        slide = await hero_slides.append(db_session, None, title="Still saved")

        assert slide.order == 1
        async with session_maker() as session:
            assert await session.get(HeroSlide, slide.id) is not None

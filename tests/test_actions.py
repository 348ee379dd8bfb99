"""Tests for the dashboard action boundary."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from folio.admin.actions import ActionResult, run_action
from folio.auth.guards import ANONYMOUS, Actor
from folio.db.services import hero_slide_service
from folio.lib.exceptions import NotFound, StorageError, ValidationError
from folio.schemas import HeroSlideInput

MANAGERS = ["admin", "editor"]
EDITOR = Actor(user_id="u-1", role="editor")


class TestPermissionGate:
    @pytest.mark.asyncio
    async def test_author_is_denied_before_operation_runs(self):
        operation = AsyncMock()

        result = await run_action(Actor(user_id="u-2", role="author"), MANAGERS, operation)

        assert result.success is False
        assert result.status_code == 403
        operation.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_anonymous_is_denied(self):
        result = await run_action(ANONYMOUS, MANAGERS, AsyncMock())
        assert result.status_code == 403

    @pytest.mark.asyncio
    async def test_denied_action_never_touches_the_session(self):
        db_session = MagicMock()
        data = HeroSlideInput(title="A slide that never lands")

        result = await run_action(
            Actor(user_id="u-2", role="author"),
            MANAGERS,
            lambda: hero_slide_service.create_hero_slide(db_session, data),
        )

        assert result.status_code == 403
        assert db_session.mock_calls == []


class TestResults:
    @pytest.mark.asyncio
    async def test_success_carries_data(self):
        result = await run_action(EDITOR, MANAGERS, AsyncMock(return_value={"moved": True}))

        assert result == ActionResult(success=True, data={"moved": True})
        assert result.to_dict() == {"success": True, "error": None, "field_errors": {}, "data": {"moved": True}}

    @pytest.mark.asyncio
    async def test_validation_error(self):
        exc = ValidationError.for_field("direction", "Direction must be 'up' or 'down'.")

        result = await run_action(EDITOR, MANAGERS, AsyncMock(side_effect=exc))

        assert result.status_code == 400
        assert result.field_errors == {"direction": "Direction must be 'up' or 'down'."}

    @pytest.mark.asyncio
    async def test_not_found(self):
        result = await run_action(EDITOR, MANAGERS, AsyncMock(side_effect=NotFound("Slide not found.")))

        assert result.status_code == 404
        assert result.error == "Slide not found."

    @pytest.mark.asyncio
    async def test_storage_error_is_logged_with_generic_message(self):
        with patch("folio.admin.actions.log_unexpected") as mock_log:
            result = await run_action(EDITOR, MANAGERS, AsyncMock(side_effect=StorageError()))

        assert result.status_code == 500
        assert result.error == StorageError.default_message
        mock_log.assert_called_once()

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self):
        with pytest.raises(RuntimeError):
            await run_action(EDITOR, MANAGERS, AsyncMock(side_effect=RuntimeError("bug")))

    def test_to_response_uses_status_code(self):
        response = ActionResult.from_error(NotFound()).to_response()
        assert response.status_code == 404

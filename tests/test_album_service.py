"""Tests for albums and album image ordering."""

from uuid import uuid4

import pytest

from folio.db.models import AlbumStatus
from folio.db.services import album_service
from folio.lib.exceptions import NotFound, ValidationError
from folio.schemas import AlbumImageInput, AlbumImagesReconcileInput, AlbumInput


@pytest.fixture
async def album(db_session):
    return await album_service.create_album(db_session, AlbumInput(title="Lisbon 2026"), user_id="u-1")


@pytest.fixture
async def album_with_images(db_session, album, make_media):
    media = await make_media(3)
    images = await album_service.add_album_images(
        db_session,
        album.id,
        [AlbumImageInput(media_id=m.id, caption=f"Photo {i}") for i, m in enumerate(media)],
    )
    return album, images


async def _captions(session_maker, album_id) -> list[str | None]:
    async with session_maker() as session:
        return [image.caption for image in await album_service.list_album_images(session, album_id)]


class TestAlbums:
    @pytest.mark.asyncio
    async def test_slug_defaults_to_title(self, album):
        assert album.slug == "lisbon-2026"
        assert album.status == AlbumStatus.DRAFT.value

    @pytest.mark.asyncio
    async def test_duplicate_slug_rejected(self, db_session, album):
        with pytest.raises(ValidationError) as exc_info:
            await album_service.create_album(db_session, AlbumInput(title="Lisbon 2026"))
        assert "slug" in exc_info.value.field_errors

    @pytest.mark.asyncio
    async def test_published_only_hides_drafts(self, db_session, album):
        assert await album_service.get_album(db_session, album.id, published_only=True) is None

        await album_service.update_album(
            db_session, album.id, AlbumInput(title="Lisbon 2026", status=AlbumStatus.PUBLISHED)
        )

        published = await album_service.get_album(db_session, album.id, published_only=True)
        assert published is not None

    @pytest.mark.asyncio
    async def test_delete_album_removes_images(self, db_session, session_maker, album_with_images):
        album, _ = album_with_images

        async with session_maker() as session:
            await album_service.delete_album(session, album.id)

        async with session_maker() as session:
            assert await album_service.get_album(session, album.id) is None
            assert await album_service.list_album_images(session, album.id) == []


class TestAlbumImages:
    @pytest.mark.asyncio
    async def test_images_append_in_given_order(self, album_with_images):
        _, images = album_with_images
        assert [image.position for image in images] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_unknown_media_rejected(self, db_session, album):
        with pytest.raises(ValidationError) as exc_info:
            await album_service.add_album_images(db_session, album.id, [AlbumImageInput(media_id=uuid4())])
        assert "images" in exc_info.value.field_errors

    @pytest.mark.asyncio
    async def test_missing_album(self, db_session, make_media):
        [media] = await make_media(1)
        with pytest.raises(NotFound):
            await album_service.add_album_images(db_session, uuid4(), [AlbumImageInput(media_id=media.id)])

    @pytest.mark.asyncio
    async def test_move_and_remove(self, db_session, session_maker, album_with_images):
        album, images = album_with_images

        assert await album_service.move_album_image(db_session, images[0].id, "down") is True
        await album_service.remove_album_image(db_session, images[2].id)

        assert await _captions(session_maker, album.id) == ["Photo 1", "Photo 0"]

    @pytest.mark.asyncio
    async def test_gallery_pairs_images_with_media_urls(self, db_session, album_with_images):
        album, _ = album_with_images

        gallery = await album_service.list_album_gallery(db_session, album.id)

        assert [url for _, url in gallery] == [f"https://cdn.example.com/photo-{i}.jpg" for i in range(3)]


class TestReconcileAlbumImages:
    @pytest.mark.asyncio
    async def test_reorders_removes_and_recaptions(self, db_session, session_maker, album_with_images):
        album, (first, second, third) = album_with_images
        data = AlbumImagesReconcileInput(
            ordered_ids=[third.id, first.id],
            removed_ids=[second.id],
            captions={first.id: "  Tram 28 ", third.id: ""},
        )

        await album_service.reconcile_album_images(db_session, album.id, data, user_id="u-1")

        async with session_maker() as session:
            images = await album_service.list_album_images(session, album.id)
        assert [image.id for image in images] == [third.id, first.id]
        assert [image.position for image in images] == [0, 1]
        assert [image.caption for image in images] == [None, "Tram 28"]

    @pytest.mark.asyncio
    async def test_caption_for_removed_image_blames_captions(self, db_session, album_with_images):
        album, (first, second, third) = album_with_images
        data = AlbumImagesReconcileInput(
            ordered_ids=[first.id, third.id],
            removed_ids=[second.id],
            captions={second.id: "gone"},
        )

        with pytest.raises(ValidationError) as exc_info:
            await album_service.reconcile_album_images(db_session, album.id, data)
        assert "captions" in exc_info.value.field_errors

    @pytest.mark.asyncio
    async def test_images_of_other_albums_rejected(self, db_session, album_with_images, make_media):
        album, images = album_with_images
        other = await album_service.create_album(db_session, AlbumInput(title="Porto"))
        [media] = await make_media(1)
        [foreign] = await album_service.add_album_images(db_session, other.id, [AlbumImageInput(media_id=media.id)])

        data = AlbumImagesReconcileInput(ordered_ids=[*(image.id for image in images), foreign.id])
        with pytest.raises(ValidationError) as exc_info:
            await album_service.reconcile_album_images(db_session, album.id, data)
        assert "ordered_ids" in exc_info.value.field_errors

"""
Tests for image set reconciliation.

Tests cover:
- Primary selection (explicit index, carried primary, fallback to first)
- Deletion requests by id, blob name or URL
- Empty result rejection
- Inputs left untouched
- Thumbnail derivation
"""

import pytest

from app.collections.car_models import CarImage
from app.database.blob_storage import StoredBlob
from app.utils.exception_utils import EmptyImageSetException
from app.utils.image_utils import count_surviving, reconcile_images, thumbnail_for


def image(name, primary=False):
    return CarImage(
        url=f"https://blobs.test/cars/{name}.jpg",
        filename=f"cars/{name}.jpg",
        is_primary=primary,
    )


def blob(name):
    return StoredBlob(
        reference=f"https://blobs.test/cars/{name}.png",
        stored_name=f"cars/{name}.png",
        size_bytes=10,
        content_type="image/png",
        original_name=f"{name}.png",
    )


def primaries(images):
    return [img.filename for img in images if img.is_primary]


class TestPrimarySelection:
    """Exactly one image is primary after reconciliation."""

    def test_surviving_primary_is_carried(self):
        current = [image("a"), image("b", primary=True)]
        images, removed = reconcile_images(current, [], [])
        assert primaries(images) == ["cars/b.jpg"]
        assert removed == []

    def test_primary_index_points_into_resulting_list(self):
        current = [image("a", primary=True), image("b")]
        images, _ = reconcile_images(current, [], [blob("n1")], primary_index=2)
        assert [img.filename for img in images] == ["cars/a.jpg", "cars/b.jpg", "cars/n1.png"]
        assert primaries(images) == ["cars/n1.png"]

    def test_out_of_range_primary_index_is_ignored(self):
        current = [image("a"), image("b", primary=True)]
        images, _ = reconcile_images(current, [], [], primary_index=9)
        assert primaries(images) == ["cars/b.jpg"]

    def test_deleting_primary_promotes_first_survivor(self):
        current = [image("a", primary=True), image("b"), image("c")]
        images, removed = reconcile_images(current, [current[0].id], [])
        assert primaries(images) == ["cars/b.jpg"]
        assert [img.filename for img in removed] == ["cars/a.jpg"]

    def test_several_flagged_survivors_fall_back_to_first(self):
        current = [image("a"), image("b", primary=True), image("c", primary=True)]
        images, _ = reconcile_images(current, [], [])
        assert primaries(images) == ["cars/a.jpg"]

    def test_new_uploads_on_empty_listing(self):
        images, _ = reconcile_images([], [], [blob("n1"), blob("n2")], alt_text="BMW X5")
        assert primaries(images) == ["cars/n1.png"]
        assert all(img.alt_text == "BMW X5" for img in images)
        assert images[1].mime_type == "image/png"


class TestDeletionRequests:
    """Images can be referenced by id, blob name or URL."""

    def test_matches_filename_and_url(self):
        current = [image("a", primary=True), image("b"), image("c")]
        images, removed = reconcile_images(
            current, ["cars/b.jpg", "https://blobs.test/cars/c.jpg"], []
        )
        assert [img.filename for img in images] == ["cars/a.jpg"]
        assert len(removed) == 2

    def test_unknown_identifiers_are_ignored(self):
        current = [image("a", primary=True)]
        images, removed = reconcile_images(current, ["nope"], [])
        assert len(images) == 1
        assert removed == []

    def test_removing_everything_without_uploads_fails(self):
        current = [image("a", primary=True)]
        with pytest.raises(EmptyImageSetException):
            reconcile_images(current, [current[0].id], [])

    def test_removing_everything_with_upload_keeps_new_image(self):
        current = [image("a", primary=True)]
        images, removed = reconcile_images(current, [current[0].id], [blob("n1")])
        assert [img.filename for img in images] == ["cars/n1.png"]
        assert images[0].is_primary
        assert len(removed) == 1

    def test_count_surviving(self):
        current = [image("a"), image("b")]
        assert count_surviving(current, ["cars/a.jpg"]) == 1
        assert count_surviving(current, []) == 2


class TestPurity:
    """Reconciliation never mutates its inputs."""

    def test_inputs_are_not_mutated(self):
        current = [image("a", primary=True), image("b")]
        deletions = [current[0].id]
        reconcile_images(current, deletions, [blob("n1")], primary_index=2)
        assert current[0].is_primary is True
        assert current[1].is_primary is False
        assert deletions == [current[0].id]


class TestThumbnail:
    """Thumbnail snapshot follows the primary image."""

    def test_thumbnail_is_primary_image(self):
        images, _ = reconcile_images([image("a"), image("b", primary=True)], [], [])
        thumb = thumbnail_for(images)
        assert thumb.filename == "cars/b.jpg"
        assert thumb.url == "https://blobs.test/cars/b.jpg"

    def test_thumbnail_of_no_images_is_empty(self):
        thumb = thumbnail_for([])
        assert thumb.url == "" and thumb.filename == ""

"""
Tests for local media storage.
"""

import io

import pytest
from fastapi import UploadFile

from noisewatch.core.exceptions import ValidationException
from noisewatch.services.media import LocalMediaStore


@pytest.fixture
def media_dir(tmp_path):
    return tmp_path / "media"


def upload(contents: bytes, filename: str = "Clip.MP3") -> UploadFile:
    return UploadFile(file=io.BytesIO(contents), filename=filename)


class TestSave:

    async def test_upload_is_written_under_generated_name(self, media_dir, sample_media_bytes):
        store = LocalMediaStore(media_dir, "/media/")

        url = await store.save(upload(sample_media_bytes))

        assert url.startswith("/media/")
        assert url.endswith(".mp3")
        stored = media_dir / url.rsplit("/", 1)[-1]
        assert stored.read_bytes() == sample_media_bytes

    async def test_upload_at_the_limit_is_accepted(self, media_dir):
        store = LocalMediaStore(media_dir, "/media", max_bytes=4)

        url = await store.save(upload(b"1234"))

        assert (media_dir / url.rsplit("/", 1)[-1]).read_bytes() == b"1234"

    async def test_oversized_upload_is_rejected_without_leftovers(self, media_dir):
        store = LocalMediaStore(media_dir, "/media", max_bytes=4)

        with pytest.raises(ValidationException) as exc_info:
            await store.save(upload(b"12345"))

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Media file exceeds the 4 byte limit."
        assert list(media_dir.iterdir()) == []


class TestDelete:

    async def test_saved_file_is_removed(self, media_dir, sample_media_bytes):
        store = LocalMediaStore(media_dir, "/media")
        url = await store.save(upload(sample_media_bytes))

        await store.delete(url)

        assert list(media_dir.iterdir()) == []

    async def test_missing_file_is_ignored(self, media_dir):
        store = LocalMediaStore(media_dir, "/media")
        store.ensure_directory()

        await store.delete("/media/does-not-exist.mp3")

    async def test_urls_outside_the_directory_are_ignored(self, tmp_path, media_dir):
        store = LocalMediaStore(media_dir, "/media")
        store.ensure_directory()
        outside = tmp_path / "keep.txt"
        outside.write_text("keep")

        await store.delete("/media/../keep.txt")
        await store.delete("https://elsewhere.test/keep.txt")

        assert outside.exists()

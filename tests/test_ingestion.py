"""
Tests for the report ingestion service.
"""

import io
import json

import pytest
from fastapi import UploadFile

from noisewatch.core.exceptions import StorageException, ValidationException
from noisewatch.models.report import MediaType
from noisewatch.services.ingestion import ReportIngestionService, ReportSubmission


@pytest.fixture
def service(store, media_store) -> ReportIngestionService:
    return ReportIngestionService(store, media_store)


@pytest.fixture
def upload(sample_media_bytes) -> UploadFile:
    return UploadFile(file=io.BytesIO(sample_media_bytes), filename="clip.mp3")


def submission(**overrides) -> ReportSubmission:
    fields = {
        "user_id": "u1",
        "reason": "loud music",
        "media_type": "audio",
        "location": json.dumps({"latitude": 12.9, "longitude": 77.6}),
    }
    fields.update(overrides)
    return ReportSubmission(**fields)


class TestSubmit:

    async def test_valid_submission_is_stored(self, service, store, media_store, upload):
        report = await service.submit(submission(comment="every night"), upload)

        assert report.user_id == "u1"
        assert report.media_type is MediaType.AUDIO
        assert report.media_url == "https://media.example.test/clip.mp3"
        assert report.comment == "every night"
        assert report.geo_location == {"type": "Point", "coordinates": [77.6, 12.9]}
        assert media_store.saved == ["clip.mp3"]
        assert [r.id for r in await store.list_all()] == [report.id]

    async def test_location_is_optional(self, service, upload):
        report = await service.submit(submission(location=None), upload)

        assert report.location is None
        assert report.geo_location is None

    async def test_comment_defaults_to_empty(self, service, upload):
        report = await service.submit(submission(comment=None), upload)

        assert report.comment == ""

    async def test_long_user_id_is_stored(self, service, store, upload):
        user_id = "auth0|" + "x" * 200

        report = await service.submit(submission(user_id=user_id), upload)

        assert [r.id for r in await store.list_by_user(user_id)] == [report.id]


class TestStorageFailure:

    async def test_saved_media_is_deleted_when_store_fails(self, broken_store, media_store, upload):
        service = ReportIngestionService(broken_store, media_store)

        with pytest.raises(StorageException):
            await service.submit(submission(), upload)

        assert media_store.saved == ["clip.mp3"]
        assert media_store.deleted == ["https://media.example.test/clip.mp3"]


class TestValidation:
    """Rejected submissions touch neither the media store nor the report store."""

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"user_id": None}, "User ID is required."),
            ({"user_id": ""}, "User ID is required."),
            ({"reason": None}, "Media and reason are required."),
            ({"media_type": None}, "Media type must be one of: audio, video."),
            ({"media_type": "image"}, "Media type must be one of: audio, video."),
        ],
    )
    async def test_missing_fields_are_rejected(
        self, service, store, media_store, upload, overrides, message
    ):
        with pytest.raises(ValidationException) as exc_info:
            await service.submit(submission(**overrides), upload)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == message
        assert media_store.saved == []
        assert await store.list_all() == []

    async def test_missing_media_is_rejected(self, service, store):
        with pytest.raises(ValidationException) as exc_info:
            await service.submit(submission(), None)

        assert exc_info.value.message == "Media and reason are required."
        assert await store.list_all() == []

    async def test_location_missing_longitude_is_rejected(self, service, store, media_store, upload):
        with pytest.raises(ValidationException) as exc_info:
            await service.submit(submission(location=json.dumps({"latitude": 12.9})), upload)

        assert exc_info.value.details == {"error": "missing_coordinate"}
        assert media_store.saved == []
        assert await store.list_all() == []

    async def test_unparseable_location_is_rejected(self, service, upload):
        with pytest.raises(ValidationException) as exc_info:
            await service.submit(submission(location="not json"), upload)

        assert exc_info.value.details == {"error": "malformed"}

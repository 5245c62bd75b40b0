"""Noise report ingestion.

Validates a submission, derives the point geometry from its location,
stores the media and persists the report. Every check runs before the
media upload and before the store is touched, so a rejected submission
leaves no trace.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile
from loguru import logger

from noisewatch.core.exceptions import StorageException, ValidationException
from noisewatch.models.report import MediaType, NoiseReport
from noisewatch.schemas.report import NoiseReportCreate
from noisewatch.services.geo import normalize_location
from noisewatch.services.media import MediaStore
from noisewatch.services.report_store import ReportStore

MEDIA_TYPES = ", ".join(member.value for member in MediaType)


@dataclass
class ReportSubmission:
    """Form fields of a report submission, as received."""

    user_id: Optional[str] = None
    reason: Optional[str] = None
    media_type: Optional[str] = None
    comment: Optional[str] = None
    location: Optional[str] = None


class ReportIngestionService:
    """Turns submissions into stored reports.

    Args:
        store: Report store the reports are written to.
        media_store: Storage for the attached media.
    """

    def __init__(self, store: ReportStore, media_store: MediaStore) -> None:
        self.store = store
        self.media_store = media_store

    def validate(
        self,
        submission: ReportSubmission,
        media: Optional[UploadFile],
    ) -> NoiseReportCreate:
        """Check a submission and build the report to store.

        The media URL is left empty; it is filled in once the upload has
        been saved.

        Args:
            submission: Submitted form fields.
            media: Uploaded media part, if any.

        Returns:
            Report data with location and point geometry resolved.

        Raises:
            ValidationException: If a required field is missing or the
                location is malformed.
        """
        if not submission.user_id:
            raise ValidationException("User ID is required.")
        if media is None or not submission.reason:
            raise ValidationException("Media and reason are required.")

        try:
            media_type = MediaType(submission.media_type)
        except ValueError:
            raise ValidationException(f"Media type must be one of: {MEDIA_TYPES}.") from None

        result = normalize_location(submission.location)
        if not result.ok:
            raise ValidationException(
                result.error.message,
                details={"error": result.error.value},
            )

        return NoiseReportCreate(
            user_id=submission.user_id,
            media_url="",
            media_type=media_type,
            reason=submission.reason,
            comment=submission.comment or "",
            location=result.location,
            geo_location=result.geo_location,
        )

    async def submit(
        self,
        submission: ReportSubmission,
        media: Optional[UploadFile],
    ) -> NoiseReport:
        """Validate, store the media and persist a new report.

        Args:
            submission: Submitted form fields.
            media: Uploaded media part.

        Returns:
            The stored report with its generated id and timestamp.

        Raises:
            ValidationException: If the submission is invalid or the media
                is too large.
            StorageException: If the report cannot be persisted; the saved
                media is deleted first.
        """
        report = self.validate(submission, media)
        report.media_url = await self.media_store.save(media)

        try:
            stored = await self.store.create(report)
        except StorageException:
            await self.media_store.delete(report.media_url)
            raise

        logger.info(
            "Accepted {} report {} from user {}",
            stored.media_type.value,
            stored.id,
            stored.user_id,
        )
        return stored

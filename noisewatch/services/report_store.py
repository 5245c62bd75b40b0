"""Persistence and queries for noise reports.

The store is append-only: reports are inserted once and read many
times. Every operation runs in its own session and wraps driver
failures in ``StorageException``.
"""

from typing import List

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from noisewatch.core.exceptions import StorageException
from noisewatch.models.report import NoiseReport
from noisewatch.schemas.report import CoordinateCluster, NoiseReportCreate
from noisewatch.services.database import Database

# Most recent first; id breaks timestamp ties so repeated reads agree
RECENCY_ORDER = (NoiseReport.created_at.desc(), NoiseReport.id.desc())


class ReportStore:
    """Report Store backed by SQLAlchemy.

    Args:
        database: Database handle providing sessions.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def create(self, report: NoiseReportCreate) -> NoiseReport:
        """Insert one report in a single transaction.

        The ``id`` and ``created_at`` values are assigned on insert. If the
        commit fails the transaction is rolled back and nothing is stored.

        Args:
            report: Validated report data.

        Returns:
            The stored report.

        Raises:
            StorageException: If the insert fails.
        """
        location = report.location
        record = NoiseReport(
            user_id=report.user_id,
            media_url=report.media_url,
            media_type=report.media_type,
            reason=report.reason,
            comment=report.comment,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            address=location.address if location else None,
            geo_location=(
                report.geo_location.model_dump(mode="json") if report.geo_location else None
            ),
        )

        try:
            async with self._database.session() as session:
                session.add(record)
                await session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Failed to store noise report for user {}", report.user_id)
            raise StorageException(details={"error": str(exc)}) from exc

        logger.info("Stored noise report {} for user {}", record.id, record.user_id)
        return record

    async def list_all(self) -> List[NoiseReport]:
        """Return every report, most recent first.

        Raises:
            StorageException: If the query fails.
        """
        return await self._fetch(select(NoiseReport).order_by(*RECENCY_ORDER))

    async def list_by_user(self, user_id: str) -> List[NoiseReport]:
        """Return the reports submitted by one user, most recent first.

        Args:
            user_id: Reference of the submitting user.

        Returns:
            Matching reports; empty when the user has none.

        Raises:
            StorageException: If the query fails.
        """
        query = (
            select(NoiseReport)
            .where(NoiseReport.user_id == user_id)
            .order_by(*RECENCY_ORDER)
        )
        return await self._fetch(query)

    async def aggregate_by_coordinate(self) -> List[CoordinateCluster]:
        """Count reports per exact (latitude, longitude) pair.

        Reports without a location are left out. Two reports fall in the
        same group only when both coordinates are exactly equal; no
        distance-based clustering is applied.

        Returns:
            One cluster per distinct coordinate pair, ordered by latitude
            then longitude.

        Raises:
            StorageException: If the query fails.
        """
        query = (
            select(
                NoiseReport.latitude,
                NoiseReport.longitude,
                func.count().label("report_count"),
            )
            .where(
                NoiseReport.latitude.is_not(None),
                NoiseReport.longitude.is_not(None),
            )
            .group_by(NoiseReport.latitude, NoiseReport.longitude)
            .order_by(NoiseReport.latitude, NoiseReport.longitude)
        )
        try:
            async with self._database.session() as session:
                rows = (await session.execute(query)).all()
        except SQLAlchemyError as exc:
            logger.exception("Failed to aggregate noise reports by coordinate")
            raise StorageException(details={"error": str(exc)}) from exc

        return [
            CoordinateCluster(coordinates=(row.longitude, row.latitude), count=row.report_count)
            for row in rows
        ]

    async def _fetch(self, query) -> List[NoiseReport]:
        try:
            async with self._database.session() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            logger.exception("Failed to query noise reports")
            raise StorageException(details={"error": str(exc)}) from exc

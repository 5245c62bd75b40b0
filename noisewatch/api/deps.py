"""Dependency injection utilities for API endpoints.

The services are built once by the application factory and kept on
``app.state``; these dependencies hand them to the route handlers.
"""

from typing import Annotated

from fastapi import Depends, Request

from noisewatch.services.database import Database
from noisewatch.services.ingestion import ReportIngestionService
from noisewatch.services.report_store import ReportStore


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_report_store(request: Request) -> ReportStore:
    return request.app.state.report_store


def get_ingestion_service(request: Request) -> ReportIngestionService:
    return request.app.state.ingestion_service


# Type aliases for the injected services
DatabaseDep = Annotated[Database, Depends(get_database)]
ReportStoreDep = Annotated[ReportStore, Depends(get_report_store)]
IngestionServiceDep = Annotated[ReportIngestionService, Depends(get_ingestion_service)]

"""
FastAPI routes for the per-domain read APIs (Food, Sleep).
"""

import logging
from contextlib import contextmanager
from http import HTTPStatus
from typing import Annotated, Any, Iterator

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from biotrackr.core.errors import (
    DocumentNotFoundError,
    InvalidArgumentError,
    PersistenceError,
    UpstreamError,
)
from biotrackr.dependencies import get_document_store, get_health_check
from biotrackr.models import DOCUMENT_MODELS
from biotrackr.schemas import HealthStatus, PaginationResponse
from biotrackr.services import DocumentQueryService

logger = logging.getLogger(__name__)

health_router = APIRouter()


@contextmanager
def _http_errors() -> Iterator[None]:
    """Map service errors onto status codes without leaking their detail."""
    try:
        yield
    except InvalidArgumentError as exc:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST, detail=HTTPStatus.BAD_REQUEST.phrase
        ) from exc
    except DocumentNotFoundError as exc:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND, detail=HTTPStatus.NOT_FOUND.phrase
        ) from exc
    except PersistenceError as exc:
        logger.error("Document store failure", extra={"error": str(exc)})
        raise HTTPException(
            status_code=HTTPStatus.SERVICE_UNAVAILABLE,
            detail=HTTPStatus.SERVICE_UNAVAILABLE.phrase,
        ) from exc
    except UpstreamError as exc:
        logger.error("Upstream failure", extra={"error": str(exc)})
        raise HTTPException(
            status_code=HTTPStatus.BAD_GATEWAY, detail=HTTPStatus.BAD_GATEWAY.phrase
        ) from exc


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Answer unparsable path or query values with a bare 400."""
    logger.info("Rejected malformed request", extra={"path": request.url.path})
    return JSONResponse(
        status_code=HTTPStatus.BAD_REQUEST,
        content={"detail": HTTPStatus.BAD_REQUEST.phrase},
    )


@health_router.get("/healthz/liveness")
async def liveness(
    health_check: Annotated[Any, Depends(get_health_check)],
) -> JSONResponse:
    """200 while healthy or degraded, 503 when the document store is unreachable."""
    report = await health_check.check()
    status_code = (
        HTTPStatus.SERVICE_UNAVAILABLE
        if report.status is HealthStatus.UNHEALTHY
        else HTTPStatus.OK
    )
    return JSONResponse(
        status_code=status_code, content=report.model_dump(mode="json")
    )


def build_document_router(document_type: str) -> APIRouter:
    """Create the read endpoints for one document type."""
    model = DOCUMENT_MODELS[document_type]
    page_model = PaginationResponse[model]  # type: ignore[valid-type]
    router = APIRouter(tags=[document_type])

    def get_service(
        document_store: Annotated[Any, Depends(get_document_store)],
    ) -> DocumentQueryService:
        return DocumentQueryService(document_store, document_type)

    @router.get("/", response_model=page_model, status_code=HTTPStatus.OK)
    async def get_all_documents(
        service: Annotated[DocumentQueryService, Depends(get_service)],
        page_number: int | None = Query(default=None, alias="pageNumber"),
        page_size: int | None = Query(default=None, alias="pageSize"),
    ) -> Any:
        """Return documents newest first, one page at a time."""
        with _http_errors():
            return await service.get_all(page_number, page_size)

    @router.get(
        "/range/{start_date}/{end_date}",
        response_model=page_model,
        status_code=HTTPStatus.OK,
    )
    async def get_documents_by_date_range(
        start_date: str,
        end_date: str,
        service: Annotated[DocumentQueryService, Depends(get_service)],
        page_number: int | None = Query(default=None, alias="pageNumber"),
        page_size: int | None = Query(default=None, alias="pageSize"),
    ) -> Any:
        """Return documents dated within the inclusive range, oldest first."""
        with _http_errors():
            return await service.get_by_date_range(
                start_date, end_date, page_number, page_size
            )

    @router.get("/{date}", response_model=model, status_code=HTTPStatus.OK)
    async def get_document_by_date(
        date: str,
        service: Annotated[DocumentQueryService, Depends(get_service)],
    ) -> Any:
        """Return the document for a single day."""
        with _http_errors():
            return await service.get_by_date(date)

    return router


__all__ = ["build_document_router", "health_router", "request_validation_handler"]

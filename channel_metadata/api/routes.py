from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse, Response
from structlog.contextvars import bind_contextvars, reset_contextvars

from channel_metadata.dependencies import get_metadata_service
from channel_metadata.models.metadata_contracts import MetadataFetchRequest, ResultSet
from channel_metadata.services.catalog_client import (
    AuthenticationError,
    CatalogServiceError,
    InvalidFetchOptionsError,
    NotFoundError,
    NothingToExportError,
    RemoteApiError,
)
from channel_metadata.services.credentials import resolve_credential
from channel_metadata.services.export_service import (
    example_result_set,
    export_filename,
    render_export_json,
)
from channel_metadata.services.metadata_service import ChannelMetadataService
from channel_metadata.services.metadata_session import MetadataSession

router = APIRouter(prefix="/metadata", tags=["metadata"])


def _bearer_token(authorization: str | None) -> str | None:
    if authorization is None:
        return None
    scheme, _, value = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        raise HTTPException(status_code=401, detail="Authorization header must be a bearer token.")
    return value.strip()


def _to_http_exception(exc: CatalogServiceError) -> HTTPException:
    if isinstance(exc, AuthenticationError):
        return HTTPException(status_code=401, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidFetchOptionsError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NothingToExportError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, RemoteApiError):
        return HTTPException(
            status_code=502,
            detail={"status": exc.status, "message": exc.message},
        )
    return HTTPException(status_code=500, detail=str(exc))


def _fetch_result_set(
    request: MetadataFetchRequest,
    authorization: str | None,
    service: ChannelMetadataService,
) -> ResultSet:
    context_tokens = bind_contextvars(
        fetch_playlists=request.options.fetch_playlists,
        fetch_videos=request.options.fetch_videos,
    )
    try:
        credential = resolve_credential(
            api_key=request.api_key,
            channel_id=request.channel_id,
            access_token=_bearer_token(authorization),
        )
        session = MetadataSession(service, credential)
        return session.fetch(request.options)
    except CatalogServiceError as exc:
        raise _to_http_exception(exc) from exc
    finally:
        reset_contextvars(**context_tokens)


@router.post(
    "/fetch",
    response_model=ResultSet,
    operation_id="metadata_fetch",
)
def fetch_metadata(
    request: MetadataFetchRequest,
    service: Annotated[ChannelMetadataService, Depends(get_metadata_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> Response:
    result_set = _fetch_result_set(request, authorization, service)
    return JSONResponse(content=result_set.to_export_dict())


@router.post(
    "/export",
    operation_id="metadata_export",
    responses={200: {"content": {"application/json": {}}}},
)
def export_metadata(
    request: MetadataFetchRequest,
    service: Annotated[ChannelMetadataService, Depends(get_metadata_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> Response:
    result_set = _fetch_result_set(request, authorization, service)
    return Response(
        content=render_export_json(result_set),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.get(
    "/examples",
    response_model=ResultSet,
    operation_id="metadata_examples",
)
def metadata_examples() -> Response:
    return JSONResponse(content=example_result_set().to_export_dict())

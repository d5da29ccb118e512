from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger

from core.annotation.lookup import fetch_json, image_url, list_cases, store_tracking
from core.annotation.progress import annotator_progress
from core.annotation.selector import select_random_case
from core.annotation.upload import upload_annotation
from core.settings import LayoutSettings
from core.storage import ObjectStorage
from services.api.schemas import (
    CaseFilesResponse,
    ImageUrlResponse,
    MessageResponse,
    ProgressResponse,
    TrackingUploadRequest,
    UploadResponse,
)
from services.api.utils import get_layout, get_signed_url_ttl, get_storage


router = APIRouter()


@router.get("/", response_class=PlainTextResponse, tags=["meta"])
async def root() -> str:
    return "Server is running!"


@router.get("/data/random/{annotator_id}", response_model=CaseFilesResponse, tags=["cases"])
async def random_case(
    annotator_id: str,
    storage: ObjectStorage = Depends(get_storage),
    layout: LayoutSettings = Depends(get_layout),
) -> CaseFilesResponse:
    """Next unannotated case for the annotator."""
    assignment = await asyncio.to_thread(select_random_case, storage, layout, annotator_id)
    return CaseFilesResponse(jsonFiles=[assignment.json_path], imageFiles=[assignment.image_path])


@router.get("/data", response_model=CaseFilesResponse, tags=["cases"])
async def all_cases(
    storage: ObjectStorage = Depends(get_storage),
    layout: LayoutSettings = Depends(get_layout),
) -> CaseFilesResponse:
    listing = await asyncio.to_thread(list_cases, storage, layout)
    return CaseFilesResponse(jsonFiles=listing.json_files, imageFiles=listing.image_files)


@router.get("/json/{filename}", tags=["cases"])
async def case_json(
    filename: str,
    storage: ObjectStorage = Depends(get_storage),
    layout: LayoutSettings = Depends(get_layout),
) -> JSONResponse:
    document: Any = await asyncio.to_thread(fetch_json, storage, layout, filename)
    return JSONResponse(content=document)


@router.get("/image/{filename}", response_model=ImageUrlResponse, tags=["cases"])
async def case_image(
    filename: str,
    storage: ObjectStorage = Depends(get_storage),
    layout: LayoutSettings = Depends(get_layout),
    ttl_seconds: int = Depends(get_signed_url_ttl),
) -> ImageUrlResponse:
    url = await asyncio.to_thread(image_url, storage, layout, filename, expires=ttl_seconds)
    return ImageUrlResponse(imageUrl=url)


@router.put("/upload/{filename}", response_model=UploadResponse, tags=["annotations"])
async def upload(
    filename: str,
    request: Request,
    annotator_id: str | None = Query(None, alias="annotatorId"),
    storage: ObjectStorage = Depends(get_storage),
    layout: LayoutSettings = Depends(get_layout),
) -> UploadResponse:
    """Store an annotated JSON document and record it in the annotator's ledger."""
    body = await request.body()
    result = await asyncio.to_thread(upload_annotation, storage, layout, filename, annotator_id, body)
    if not result.ledger_updated:
        logger.warning("Upload of {path} succeeded without a ledger update", path=result.path)
    return UploadResponse(path=result.path)


@router.get("/annotator/progress/{annotator_id}", response_model=ProgressResponse, tags=["annotations"])
async def progress(
    annotator_id: str,
    storage: ObjectStorage = Depends(get_storage),
    layout: LayoutSettings = Depends(get_layout),
) -> ProgressResponse:
    report = await asyncio.to_thread(annotator_progress, storage, layout, annotator_id)
    return ProgressResponse(
        annotated=report.annotated,
        total=report.total,
        remaining=report.remaining,
        completionPercentage=report.completion_percentage,
    )


@router.post("/upload-tracking", response_model=MessageResponse, tags=["tracking"])
async def upload_tracking(
    payload: TrackingUploadRequest,
    storage: ObjectStorage = Depends(get_storage),
    layout: LayoutSettings = Depends(get_layout),
) -> MessageResponse:
    await asyncio.to_thread(store_tracking, storage, layout, payload.filename, payload.csv)
    return MessageResponse(message="Tracking data uploaded successfully!")


__all__ = ["router"]

from __future__ import annotations

import math

from pydantic import BaseModel, Field, field_validator


class CaseFilesResponse(BaseModel):
    jsonFiles: list[str]
    imageFiles: list[str]


class ImageUrlResponse(BaseModel):
    imageUrl: str


class UploadResponse(BaseModel):
    message: str = "JSON uploaded successfully!"
    path: str


class ProgressResponse(BaseModel):
    annotated: int
    total: int
    remaining: int
    completionPercentage: float | None = None

    @field_validator("completionPercentage", mode="before")
    @classmethod
    def _non_finite_as_null(cls, value: float | None) -> float | None:
        # JSON has no NaN/Infinity; encoders emit null for them
        if value is None or not math.isfinite(value):
            return None
        return value


class TrackingUploadRequest(BaseModel):
    filename: str = Field(..., min_length=1)
    csv: str


class MessageResponse(BaseModel):
    message: str


__all__ = [
    "CaseFilesResponse",
    "ImageUrlResponse",
    "MessageResponse",
    "ProgressResponse",
    "TrackingUploadRequest",
    "UploadResponse",
]

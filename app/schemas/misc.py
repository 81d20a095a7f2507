from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ── Notifications ─────────────────────────────────────────────
class NotificationIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=2000)


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    body: str
    created_at: datetime


class PushResult(BaseModel):
    id: Optional[str] = None
    token: str


class NotificationSentOut(BaseModel):
    message: str
    results: List[PushResult]


class DeviceTokenIn(BaseModel):
    token: str = Field(..., min_length=1, max_length=255)


# ── Locations ─────────────────────────────────────────────────
class LocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    image_url: Optional[str] = None


# ── Mini games ────────────────────────────────────────────────
class MiniGameIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    value: str = Field(..., min_length=1, max_length=200)
    type: Optional[str] = Field(default=None, max_length=64)


class MiniGameOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    value: str
    type: Optional[str] = None


# ── Images ────────────────────────────────────────────────────
class ImageOut(BaseModel):
    name: str
    url: str


class ImagesUploadedOut(BaseModel):
    message: str
    image_urls: List[str]

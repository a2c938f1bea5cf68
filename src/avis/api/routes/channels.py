"""Channel endpoints."""

from datetime import datetime
from uuid import UUID

import asyncpg
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from avis.core.dependencies import CurrentUserDep, DbDep

router = APIRouter()


class Channel(BaseModel):
    id: UUID
    name: str
    created_at: datetime


class ChannelListResponse(BaseModel):
    channels: list[Channel]


class ChannelResponse(BaseModel):
    channel: Channel


class CreateChannelRequest(BaseModel):
    name: str | None = None


def _channel(row: asyncpg.Record) -> Channel:
    return Channel(id=row["id"], name=row["name"], created_at=row["created_at"])


@router.get("", response_model=ChannelListResponse)
async def list_channels(db: DbDep) -> ChannelListResponse:
    rows = await db.list_channels()
    return ChannelListResponse(channels=[_channel(r) for r in rows])


@router.post("", response_model=ChannelResponse, status_code=201)
async def create_channel(
    body: CreateChannelRequest, db: DbDep, _: CurrentUserDep
) -> ChannelResponse:
    name = (body.name or "").strip()
    if not name:
        raise HTTPException(400, detail="Channel name is required")
    row = await db.create_channel(name)
    if row is None:
        raise HTTPException(400, detail="Channel already exists")
    return ChannelResponse(channel=_channel(row))


@router.get("/{channel_id}", response_model=ChannelResponse)
async def get_channel(channel_id: UUID, db: DbDep) -> ChannelResponse:
    row = await db.get_channel(channel_id)
    if row is None:
        raise HTTPException(404, detail="Channel not found")
    return ChannelResponse(channel=_channel(row))

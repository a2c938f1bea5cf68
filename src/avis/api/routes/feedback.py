"""Feedback submission, listing, search and deletion endpoints.

Every submitted item is scored with the French sentiment scorer and the score
is stored alongside the text.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

import asyncpg
from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import BaseModel, Field

from avis.core.dependencies import CurrentUserDep, DbDep
from avis.core.logging import get_logger
from avis.sentiment import score_sentiment

logger = get_logger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class FeedbackCreate(BaseModel):
    # Optional so that a missing field gets the 400 below instead of a 422
    channel: str | None = Field(default=None, description="Channel name, created on first use")
    text: str | None = Field(default=None, description="Feedback text")


class FeedbackResponse(BaseModel):
    id: UUID
    date: datetime
    channel: str
    text: str
    sentiment: float
    user_id: UUID | None = None
    user: str | None = None


class MessageResponse(BaseModel):
    message: str


class DeleteAllResponse(BaseModel):
    message: str
    count: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_response(row: asyncpg.Record, *, with_user: bool = False) -> FeedbackResponse:
    return FeedbackResponse(
        id=row["id"],
        date=row["created_at"],
        channel=row["channel"],
        text=row["text"],
        sentiment=row["sentiment"],
        user_id=row["user_id"],
        user=(row["user_name"] or "anonymous") if with_user else None,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=FeedbackResponse | list[FeedbackResponse],
    response_model_exclude_none=True,
    status_code=201,
)
async def add_feedback(
    body: Annotated[FeedbackCreate | list[FeedbackCreate], Body()],
    db: DbDep,
    user: CurrentUserDep,
) -> FeedbackResponse | list[FeedbackResponse]:
    """Submit one feedback object or a list of them."""
    items = body if isinstance(body, list) else [body]
    if not items:
        raise HTTPException(400, detail="No feedback data provided")

    # Validate the whole batch before writing anything
    entries: list[tuple[str, str]] = []
    for item in items:
        if not item.channel or not item.channel.strip() or not item.text:
            raise HTTPException(400, detail="Channel and text are required for each feedback")
        entries.append((item.channel.strip(), item.text))

    created: list[FeedbackResponse] = []
    for channel_name, text in entries:
        channel = await db.get_or_create_channel(channel_name)
        sentiment = score_sentiment(text)
        row = await db.insert_feedback(channel["id"], text, user["id"], sentiment)
        created.append(
            FeedbackResponse(
                id=row["id"],
                date=row["created_at"],
                channel=channel["name"],
                text=row["text"],
                sentiment=row["sentiment"],
                user_id=row["user_id"],
            )
        )

    logger.info("Feedback submitted", user_id=str(user["id"]), count=len(created))
    return created if isinstance(body, list) else created[0]


@router.get("", response_model=list[FeedbackResponse], response_model_exclude_none=True)
async def list_my_feedback(db: DbDep, user: CurrentUserDep) -> list[FeedbackResponse]:
    rows = await db.list_feedback(user_id=user["id"])
    return [_to_response(r) for r in rows]


@router.get("/all", response_model=list[FeedbackResponse], response_model_exclude_none=True)
async def list_all_feedback(db: DbDep, _: CurrentUserDep) -> list[FeedbackResponse]:
    rows = await db.list_feedback()
    return [_to_response(r, with_user=True) for r in rows]


@router.get("/search", response_model=list[FeedbackResponse], response_model_exclude_none=True)
async def search_feedback(
    db: DbDep,
    _: CurrentUserDep,
    text: str | None = Query(default=None, description="Substring to look for"),
) -> list[FeedbackResponse]:
    if not text or not text.strip():
        raise HTTPException(400, detail="Search text is required")
    rows = await db.search_feedback(text.strip())
    return [_to_response(r) for r in rows]


@router.get(
    "/channel/{channel_name}",
    response_model=list[FeedbackResponse],
    response_model_exclude_none=True,
)
async def list_channel_feedback(
    channel_name: str, db: DbDep, _: CurrentUserDep
) -> list[FeedbackResponse]:
    channel = await db.get_channel_by_name(channel_name)
    if channel is None:
        raise HTTPException(404, detail="Channel not found")
    rows = await db.list_feedback_by_channel(channel["id"])
    return [_to_response(r) for r in rows]


@router.post("/delete/{feedback_id}", response_model=MessageResponse)
async def delete_own_feedback(
    feedback_id: UUID, db: DbDep, user: CurrentUserDep
) -> MessageResponse:
    """Delete a feedback item owned by the caller."""
    if not await db.delete_user_feedback(feedback_id, user["id"]):
        raise HTTPException(404, detail="Feedback not found")
    return MessageResponse(message="Feedback deleted")


@router.delete("/{feedback_id}", response_model=MessageResponse)
async def delete_feedback(feedback_id: UUID, db: DbDep, _: CurrentUserDep) -> MessageResponse:
    if not await db.delete_feedback(feedback_id):
        raise HTTPException(404, detail="Feedback not found")
    return MessageResponse(message="Feedback deleted")


@router.delete("", response_model=DeleteAllResponse)
async def delete_all_feedback(db: DbDep, user: CurrentUserDep) -> DeleteAllResponse:
    count = await db.delete_all_feedback()
    logger.warning("Feedback purged", user_id=str(user["id"]), count=count)
    return DeleteAllResponse(message=f"{count} feedback deleted", count=count)

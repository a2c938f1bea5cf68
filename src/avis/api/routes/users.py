"""User administration endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from avis.core.dependencies import CurrentUserDep, DbDep

router = APIRouter()


class UserResponse(BaseModel):
    id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


@router.get("", response_model=list[UserResponse])
async def list_users(db: DbDep, _: CurrentUserDep) -> list[UserResponse]:
    rows = await db.list_users()
    return [UserResponse(**dict(row)) for row in rows]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: DbDep, _: CurrentUserDep) -> UserResponse:
    row = await db.get_user_by_id(user_id)
    if row is None:
        raise HTTPException(404, detail="User not found")
    return UserResponse(**dict(row))


@router.delete("/{user_id}")
async def delete_user(user_id: UUID, db: DbDep, _: CurrentUserDep) -> dict[str, str]:
    if not await db.delete_user(user_id):
        raise HTTPException(404, detail="User not found")
    return {"message": "User deleted successfully"}

"""Registration, login and current-user endpoints."""

from uuid import UUID

import asyncpg
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel
from slowapi import Limiter
from slowapi.util import get_remote_address

from avis.config import get_settings
from avis.core.dependencies import CurrentUserDep, DbDep, SettingsDep
from avis.core.logging import get_logger
from avis.core.security import (
    create_access_token,
    hash_password,
    password_too_long,
    verify_password,
)

logger = get_logger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


def _auth_rate_limit() -> str:
    return get_settings().auth_rate_limit


class RegisterRequest(BaseModel):
    # Optional so that missing fields get a 400 with a readable message
    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UserPublic(BaseModel):
    id: UUID
    name: str
    email: str


class AuthResponse(BaseModel):
    user: UserPublic
    token: str


class MeResponse(BaseModel):
    user: UserPublic


def _public(row: asyncpg.Record) -> UserPublic:
    return UserPublic(id=row["id"], name=row["name"], email=row["email"])


@router.get("/health")
async def auth_health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(_auth_rate_limit)
async def register(
    request: Request, body: RegisterRequest, db: DbDep, settings: SettingsDep
) -> AuthResponse:
    if not body.name or not body.email or not body.password:
        raise HTTPException(400, detail="All fields are required")
    if password_too_long(body.password):
        raise HTTPException(400, detail="Password is too long")

    email = body.email.strip().lower()
    if await db.get_user_by_email(email) is not None:
        raise HTTPException(400, detail="Email already in use")

    password_hash = await hash_password(body.password, settings.bcrypt_rounds)
    try:
        user = await db.create_user(body.name.strip(), email, password_hash)
    except asyncpg.UniqueViolationError:
        # Lost a race with a concurrent registration
        raise HTTPException(400, detail="Email already in use")

    token = create_access_token(user["id"], settings)
    return AuthResponse(user=_public(user), token=token)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(_auth_rate_limit)
async def login(
    request: Request, body: LoginRequest, db: DbDep, settings: SettingsDep
) -> AuthResponse:
    if not body.email or not body.password:
        raise HTTPException(400, detail="All fields are required")

    user = await db.get_user_by_email(body.email.strip().lower())
    if user is None or not await verify_password(body.password, user["password"]):
        logger.info("Login failed", email=body.email)
        raise HTTPException(401, detail="Invalid credentials")

    token = create_access_token(user["id"], settings)
    return AuthResponse(user=_public(user), token=token)


@router.get("/me", response_model=MeResponse)
async def me(user: CurrentUserDep) -> MeResponse:
    # get_current_user already 401s for unknown ids
    return MeResponse(user=_public(user))

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, Field

from cartola_proxy.models import LeagueSummary


class AttemptResponse(BaseModel):
    route: str
    path: str
    status: int | None
    ok: bool


class LeagueDebugResponse(BaseModel):
    ok: bool = True
    identifier: str
    route: str
    attempts: List[AttemptResponse]
    keys: List[str]
    participant_count: int
    league: LeagueSummary


class TokenDebugResponse(BaseModel):
    has_token: bool


class ErrorResponse(BaseModel):
    error: str
    message: str
    upstream_status: int | None = None
    upstream_body: Any = None
    hint: str | None = None
    attempts: List[AttemptResponse] = Field(default_factory=list)

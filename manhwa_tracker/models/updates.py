from pydantic import BaseModel, Field
from typing import List


class UpdateOut(BaseModel):
    title: str
    slug: str
    chapter: str
    time: str
    isUpcoming: bool


class UpdatesResponse(BaseModel):
    ok: bool = True
    fetchedAt: str = Field(..., description="ISO-8601 time of the origin fetch that produced the batch")
    count: int
    updates: List[UpdateOut] = []


class CompactItem(BaseModel):
    t: str = Field(..., description="Title, max 22 chars")
    c: str = Field(..., description="Chapter label, max 20 chars")
    tm: str = Field(..., description="Relative time text")
    u: int = Field(..., description="Upcoming code: 1 upcoming; 0 otherwise (binary) or 2 recent / 0 older (tristate)")


class CompactResponse(BaseModel):
    ok: int = 1
    n: int
    d: List[CompactItem] = []


class ErrorOut(BaseModel):
    ok: bool = False
    error: str


class CompactErrorOut(BaseModel):
    ok: int = 0
    e: str


class StatusOut(BaseModel):
    status: str

from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from backend.api.admin import router as admin_router
from deskview.config import load_config
from deskview.core.submissions import SubmissionStore
from deskview.exceptions import SubmissionError

app = FastAPI(title="Desk Gallery API", version="0.1.0")

logger = logging.getLogger("backend.api.index")
app.include_router(admin_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


class PlacementModel(BaseModel):
    width: str
    height: str
    x: str
    y: str
    img: str | None = None
    firstPhoto: str | None = None


class SocialModel(BaseModel):
    facebook: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    website: str | None = None


class DeskResponse(BaseModel):
    id: int | str
    name: str
    title: str
    location: str
    profile: str | None = None
    decor: str | None = None
    monitor: PlacementModel
    screen: PlacementModel
    photos: List[str] = Field(default_factory=list)
    social: SocialModel = Field(default_factory=SocialModel)
    slug: str
    status: str


class SubmitDeskRequest(BaseModel):
    # optional here so missing fields produce the 400 message below instead of a 422
    name: str | None = None
    title: str | None = None
    location: str | None = None
    profileImageUrl: str | None = None
    photoUrls: List[str] = Field(default_factory=list)
    social: SocialModel = Field(default_factory=SocialModel)


class SubmitDeskResponse(BaseModel):
    success: bool
    deskId: int
    message: str


def get_store() -> SubmissionStore:
    cfg = load_config()
    return SubmissionStore(cfg["submissions_file"])


def _approved_desks() -> List[DeskResponse]:
    records = get_store().approved_records()
    return [DeskResponse(**record.to_dict()) for record in records]


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


@app.get("/api/routes")
def list_routes() -> List[str]:
    # the schema lists paths from included routers with their prefixes applied
    return sorted(app.openapi()["paths"])


@app.get("/api/desks", response_model=List[DeskResponse])
def list_desks() -> List[DeskResponse]:
    return _approved_desks()


@app.get("/api/desks/{slug}", response_model=DeskResponse)
def get_desk(slug: str) -> DeskResponse:
    for desk in _approved_desks():
        if desk.slug == slug:
            return desk
    raise HTTPException(status_code=404, detail="Desk not found")


@app.post("/api/submit-desk", response_model=SubmitDeskResponse)
def submit_desk(request_data: SubmitDeskRequest) -> SubmitDeskResponse:
    payload: Dict[str, object] = request_data.model_dump()
    try:
        row = get_store().submit(payload)
    except SubmissionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return SubmitDeskResponse(
        success=True,
        deskId=int(row["id"]),
        message="Desk submitted successfully! We'll review it and get back to you.",
    )

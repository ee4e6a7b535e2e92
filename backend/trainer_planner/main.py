"""FastAPI 애플리케이션 진입점. 미들웨어와 API 라우터를 등록합니다."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from trainer_planner.config import settings
from trainer_planner.database import Base, engine
import trainer_planner.models  # noqa: F401 - 모델 import로 metadata 등록
from trainer_planner.routers import (
    auth, profile, clients, rate_plans, staff_trainers, sessions, payments,
    notes, scheduling_templates, expenses, forms, billing, functions,
)
from trainer_planner.utils.schema_sync import sync_missing_schema_objects

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Tennis Trainer Planner",
    description="개인 트레이너를 위한 고객/세션/정산/청구서 관리 시스템",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(clients.router)
app.include_router(rate_plans.router)
app.include_router(staff_trainers.router)
app.include_router(sessions.router)
app.include_router(payments.router)
app.include_router(notes.router)
app.include_router(scheduling_templates.router)
app.include_router(expenses.router)
app.include_router(forms.router)
app.include_router(billing.router)
app.include_router(functions.router)


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블/컬럼/인덱스를 자동 생성합니다.
    Base.metadata.create_all(bind=engine)
    sync_missing_schema_objects(engine, Base.metadata)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Tennis Trainer Planner"}

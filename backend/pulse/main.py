# main.py
"""
Point d'entrée de l'API Pulse.
Enregistre tous les modules via leurs routers.

Architecture : modules verticaux quasi-autonomes + engine transversal.
"""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pulse.core.config import settings
from pulse.core.database import engine
from pulse.core.logging import configure_logging

from pulse.modules.auth.router     import router as auth_router
from pulse.modules.team.router     import router as team_router
from pulse.modules.vibe.router     import router as vibe_router
from pulse.modules.wow.router      import router as wow_router
from pulse.modules.feedback.router import router as feedback_router
from pulse.modules.billing.router  import router as billing_router
from pulse.modules.coach.router    import router as coach_router
from pulse.modules.backlog.router  import router as backlog_router

VERSION = "1.0.0"

configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("api_started", project=settings.PROJECT_NAME, version=VERSION, debug=settings.DEBUG)
    yield
    await engine.dispose()
    logger.info("api_stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEBUG else [settings.APP_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(team_router)
app.include_router(vibe_router)
app.include_router(wow_router)
app.include_router(feedback_router)
app.include_router(billing_router)
app.include_router(coach_router)
app.include_router(backlog_router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": VERSION}

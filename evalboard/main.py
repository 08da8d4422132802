import structlog
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from evalboard.config import settings
from evalboard.core.error_handlers import register_exception_handlers
from evalboard.core.logging import configure_logging

# IMPORT ROUTERS
from evalboard.routers.health import router as health_router
from evalboard.routers.submissions import router as submissions_router
from evalboard.routers.evaluations import router as evaluations_router
from evalboard.routers.evaluators import router as evaluators_router
from evalboard.routers.teams import router as teams_router
from evalboard.routers.leaderboard import router as leaderboard_router
from evalboard.routers.admin import router as admin_router

configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
logger = structlog.get_logger(__name__)


# SWAGGER UI - tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Submissions"},
    {"name": "Evaluations"},
    {"name": "Evaluators"},
    {"name": "Teams"},
    {"name": "Leaderboard"},
    {"name": "Admin"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# REGISTER EXCEPTION HANDLERS
register_exception_handlers(app)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)       # Health
app.include_router(submissions_router)  # Submissions + assignment
app.include_router(evaluations_router)  # Evaluations
app.include_router(evaluators_router)   # Evaluators
app.include_router(teams_router)        # Teams
app.include_router(leaderboard_router)  # Public leaderboard + criteria
app.include_router(admin_router)        # Admin


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# STARTUP EVENT
@app.on_event("startup")
async def startup_event():
    logger.info(
        "api_starting",
        app=settings.APP_NAME,
        env=settings.APP_ENV,
        min_feedback_length=settings.MIN_FEEDBACK_LENGTH,
    )


# SHUTDOWN EVENT
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("api_stopping", app=settings.APP_NAME)


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "evalboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )

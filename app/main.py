import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.errors import envelope
from app.database import init_db

# Routers
from app.routers import (
    counter_router,
    person_router,
    user_router,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


# -----------------------
# DATABASE TABLES
# -----------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s started (env=%s)", settings.PROJECT_NAME, settings.ENV)
    yield


# -----------------------
# CREATE APP
# -----------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Backend API for the kinship mini-program: a per-user registry of relatives.",
    version="1.0.0",
    lifespan=lifespan,
)

# -----------------------
# CORS
# -----------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------
# ERROR ENVELOPE
# -----------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    else:
        logger.debug("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(code=exc.status_code, message=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        if err.get("type") == "json_invalid":
            # loc holds the decode offset, not a field
            loc = ""
        else:
            loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))

    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, problems)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=envelope(
            code=status.HTTP_400_BAD_REQUEST,
            message="请求参数无效: " + "; ".join(problems),
        ),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=envelope(code=status.HTTP_500_INTERNAL_SERVER_ERROR, message=str(exc)),
    )


# -----------------------
# ROUTES
# -----------------------
app.include_router(counter_router.router)
app.include_router(user_router.router)
app.include_router(person_router.router)


# -----------------------
# LANDING PAGE
# -----------------------
@app.get("/", include_in_schema=False)
def root():
    return FileResponse(STATIC_DIR / "index.html")


# -----------------------
# HEALTH CHECK
# -----------------------
@app.get("/health")
def health():
    return envelope(data={"status": "ok"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)

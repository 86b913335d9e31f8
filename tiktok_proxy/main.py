import uuid
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from tiktok_proxy.api import health, info, download
from tiktok_proxy.config.settings import config
from tiktok_proxy.core.errors import ExtractorErrorKind
from tiktok_proxy.core.logging import setup_logging, log_warning
from tiktok_proxy.core.state import state
from tiktok_proxy.infra.redis import init_redis, close_redis
from tiktok_proxy.services.ytdlp import detect_ytdlp_version

API_PREFIX = "/api/tiktok"

setup_logging(config.logging)

app = FastAPI(
    title=config.api.title,
    description=config.api.description,
    version=config.api.version,
    docs_url="/docs" if config.api.debug else None,
    redoc_url=None
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-ID"],
)

@app.middleware("http")
async def assign_request_id(request: Request, call_next):
    request.state.request_id = uuid.uuid4().hex[:12]
    response = await call_next(request)
    response.headers["X-Request-ID"] = request.state.request_id
    return response

# Every error leaves the API as {"message": ...}
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    log_warning(request, f"Rejected request: {message}", error_kind=ExtractorErrorKind.VALIDATION.value)
    return JSONResponse(status_code=400, content={"message": message})

# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(info.router, prefix=API_PREFIX, tags=["Info"])
app.include_router(download.router, prefix=API_PREFIX, tags=["Download"])

@app.on_event("startup")
async def startup_event():
    await init_redis()
    state.ytdlp_version = await detect_ytdlp_version()

@app.on_event("shutdown")
async def shutdown_event():
    await close_redis()

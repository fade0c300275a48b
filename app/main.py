import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.config import get_settings
from app.routers import vendor_promotions, vlogger_posts
from app.services.errors import WorkflowError
from app.services.media_storage import media_upload_dir
from app.services.promotion_sweeper import promotion_expiry_sweeper

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    media_upload_dir().mkdir(parents=True, exist_ok=True)
    task = None
    if settings.promotion_sweep_interval_seconds > 0:
        task = asyncio.create_task(promotion_expiry_sweeper(settings.promotion_sweep_interval_seconds))
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


app = FastAPI(title="Vendor & Vlogger Marketplace API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or mistyped request bodies are a 400 like any other bad input."""
    problems = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        msg = error.get("msg", "Invalid value")
        problems.append(f"{loc}: {msg}" if loc else msg)
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, problems)
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "; ".join(problems) or "Invalid request"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "message": "Server error"})


app.include_router(vendor_promotions.router)
app.include_router(vlogger_posts.router)

app.mount(settings.media_public_prefix, StaticFiles(directory=media_upload_dir(), check_dir=False), name="media")


@app.get("/")
def root():
    return {"message": "Vendor & Vlogger Marketplace API", "docs": "/docs"}

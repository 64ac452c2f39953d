import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.cache import cache
from app.exceptions import MaysError
from app.middleware import TimingMiddleware
from app.routers import comments, likes, metrics
from app.config import settings

logger = logging.getLogger(__name__)

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="[%(levelname)s] %(asctime)s %(name)s - %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup; the API keeps working without Redis.
    await cache.connect()
    yield
    # Shutdown
    await cache.disconnect()

app = FastAPI(
    title="Mays API",
    description="Comments and likes for the Mays content-sharing platform",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(MaysError)
async def mays_error_handler(request: Request, exc: MaysError):
    logger.debug("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

# Routers
app.include_router(comments.router)
app.include_router(likes.router)
app.include_router(metrics.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}

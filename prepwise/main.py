import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from mangum import Mangum

# Import routers
from prepwise.routers import interviews, structures, profiles
from prepwise.core.config import get_settings
from prepwise.core.exceptions import PrepwiseError
from prepwise.core.firebase import close_firestore_client, initialize_firebase
from prepwise.core.logging import setup_logging
from prepwise.models.common import ErrorResponse

# Initialize settings
settings = get_settings()
setup_logging(settings.LOG_LEVEL)

# Initialize FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.DESCRIPTION,
    version=settings.VERSION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f} ms)")
    return response

@app.exception_handler(PrepwiseError)
async def prepwise_error_handler(request: Request, exc: PrepwiseError):
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    body = ErrorResponse(error=exc.message, detail=type(exc).__name__)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))

# Initialize Firebase on startup
@app.on_event("startup")
async def startup_event():
    initialize_firebase()

@app.on_event("shutdown")
async def shutdown_event():
    close_firestore_client()

# Include routers
app.include_router(interviews.router, prefix="/api/interviews", tags=["Interviews"])
app.include_router(structures.router, prefix="/api/structures", tags=["Interview Structures"])
app.include_router(profiles.router, prefix="/api/profiles", tags=["Profiles"])

@app.get("/")
async def root():
    return {
        "message": "Welcome to PrepWise API",
        "version": settings.VERSION,
        "description": settings.DESCRIPTION,
        "endpoints": {
            "interviews": "/api/interviews",
            "structures": "/api/structures",
            "profiles": "/api/profiles",
            "docs": "/docs",
            "health": "/health"
        }
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION,
        "debug": settings.DEBUG
    }

handler = Mangum(app)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

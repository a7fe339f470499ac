from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from shorturl_app.api import pages, shorturl
from shorturl_app.config import settings
from shorturl_app.database.connection import initialize_store
from shorturl_app.exceptions import StoreUnavailable
from shorturl_app.logging_config import setup_logging

logger = setup_logging(level=settings.log_level, log_file=settings.log_file)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A store that is down at startup is logged, not fatal
    app.state.store_ready = initialize_store()
    logger.info("Listening on port %s", settings.port)
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener microservice built with FastAPI",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    """Store failures raised while building request dependencies."""
    logger.error("Store unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": shorturl.CREATE_ERROR},
    )


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(shorturl.router)
app.include_router(pages.router)
app.mount("/public", StaticFiles(directory=settings.public_dir, check_dir=False), name="public")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port)

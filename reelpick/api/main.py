"""
FastAPI application entry point for the ReelPick API.

Run: uvicorn reelpick.api.main:app --host 0.0.0.0 --port 8000
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reelpick.api.config import get_api_host, get_api_port, get_log_level
from reelpick.api.routers import movies, suggest, system
from reelpick.utils.logging_config import configure_api_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_api_logging(level=get_log_level())
    yield


app = FastAPI(
    title="ReelPick API",
    description="Movie suggestions driven by liked/disliked feedback",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# suggest routes first so /api/movies/suggest/... never hits /api/movies/{tconst}
app.include_router(suggest.router)
app.include_router(movies.router)
app.include_router(system.router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "ReelPick API",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=get_api_host(), port=get_api_port())

from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Environment must be loaded before lightsync.config reads it
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lightsync import __version__
from lightsync.api.auth import router as auth_router
from lightsync.api.v1 import router as v1_router
from lightsync.config import config
from lightsync.schemas import HealthResponse
from lightsync.services.govee import GoveeClient
from lightsync.services.session import SyncSession
from lightsync.services.spotify import SpotifyClient
from lightsync.services.sync import TrackWatcher
from lightsync.utils.logging import configure_logging, get_logger

configure_logging()
logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Server running on http://127.0.0.1:8080")
    logger.info("Open  http://127.0.0.1:8080/login  to authorize Spotify.")
    if not config.spotify_configured():
        logger.warning("SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET not set")
    if not config.govee_configured():
        logger.warning("GOVEE_API_KEY / GOVEE_DEVICE / GOVEE_MODEL not set")
    yield
    await app.state.watcher.stop()


app = FastAPI(
    title="LightSync",
    description="Album-art accent colors for Govee lights, driven by Spotify playback",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://127.0.0.1:8080", "http://localhost:8080"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# One session per process, shared by every collaborator
session = SyncSession()
app.state.session = session
app.state.spotify = SpotifyClient(session)
app.state.govee = GoveeClient(session)
app.state.watcher = TrackWatcher(session, app.state.spotify, app.state.govee)

app.include_router(auth_router)
app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(ok=True, version=__version__, service="lightsync")


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "LightSync API",
        "version": __version__,
        "login": "/login",
        "docs": "/docs"
    }

"""
LightSync API Schemas
Pydantic models for accent extraction and sync status responses.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class ColorEntry(BaseModel):
    """A single color in hex and RGB form."""
    hex: str = Field(..., pattern="^#[0-9A-F]{6}$", description="Uppercase hex color")
    rgb: List[int] = Field(..., min_length=3, max_length=3, description="[r, g, b], 0-255")


class PaletteEntry(ColorEntry):
    """Palette color with its share of sampled pixels."""
    ratio: float = Field(..., ge=0.0, le=1.0, description="Fraction of sampled pixels")


class CandidateScore(ColorEntry):
    """Scoring terms for one palette candidate."""
    saturation: float
    lightness: float
    mid_lightness_bonus: float
    penalty: float
    score: float


class AccentResponse(BaseModel):
    """Accent color computed from an uploaded image."""
    hex: str = Field(..., description="Normalized accent color")
    rgb: List[int] = Field(..., min_length=3, max_length=3)
    candidate: ColorEntry = Field(..., description="Chosen palette color before normalization")
    palette: List[PaletteEntry] = Field(default_factory=list)
    scores: List[CandidateScore] = Field(default_factory=list)
    fallback: Optional[str] = Field(None, description="Reason a fallback color was used")
    clipped: bool = Field(False, description="Whether normalization clipped a channel")
    duration_ms: float = Field(..., ge=0.0)


class SyncStatusResponse(BaseModel):
    """Current state of the Spotify -> light sync."""
    authorized: bool
    polling: bool
    last_track_id: Optional[str] = None
    last_color: Optional[ColorEntry] = None
    backoff_remaining_s: float = Field(0.0, ge=0.0)


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("lightsync", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")

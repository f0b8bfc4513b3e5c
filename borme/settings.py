"""
borme.settings
==============

Configuration settings for the BORME extraction engine.

This module provides centralized configuration options that can be used across
the package, the CLI and the HTTP layer.  It includes default values that can
be overridden via environment variables (``BORME_`` prefix) or a ``.env`` file.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Bundled vocabulary (officer positions + top-level categories)
PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_VOCABULARY_FILE = PACKAGE_DIR / "data" / "terms.json"

# Database settings
# ---------------------------------------------------------------------------
DB_FILE = os.environ.get("BORME_DB_FILE", BASE_DIR / "borme.db")
DB_URL = f"sqlite:///{DB_FILE}"
DB_ECHO = os.environ.get("BORME_DB_ECHO", "False").lower() == "true"

# API settings
# ---------------------------------------------------------------------------
API_DEBUG = os.environ.get("BORME_API_DEBUG", "False").lower() == "true"


# ---------------------------------------------------------------------------
# Pydantic settings model for the extraction engine
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Pydantic model for engine settings, loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BORME_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Vocabulary table
    vocabulary_path: Path = Field(
        default=DEFAULT_VOCABULARY_FILE,
        description="JSON file with 'officersPositions' and 'alwaysTopLevel' lists",
    )

    # Persistence
    db_url: str = Field(default=DB_URL, description="SQLAlchemy URL of the entry store")
    db_echo: bool = Field(default=DB_ECHO, description="Echo SQL statements")

    # Extraction tuning
    dissolution_window: int = Field(
        150, description="Characters scanned after 'Disolución' to find its subtype"
    )
    name_similarity_threshold: float = Field(
        0.5, description="Jaccard threshold used by the identity matcher"
    )
    max_name_length: int = Field(50, description="Longest string accepted as a person name")
    business_text_max_length: int = Field(
        100, description="Text longer than this is treated as a business description"
    )
    undated_sentinel: str = Field(
        "1900-01-01", description="Date used to sort undated officer events first"
    )

    # Logging
    log_level: str = Field("INFO", description="Root log level for CLI and API entry points")


# Initialize settings
settings = Settings()

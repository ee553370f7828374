"""
Configuration module for chatbond
Loads environment variables and provides default settings
"""

import os
from pathlib import Path
from typing import Dict, Any, List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

# Parser Settings
DATE_SCAN_LINES = int(os.getenv("DATE_SCAN_LINES", "50"))
DEFAULT_DATE_FORMAT = os.getenv("DEFAULT_DATE_FORMAT", "DMY")  # DMY | MDY

# Behavioral Analytics
SILENCE_THRESHOLD_DAYS = int(os.getenv("SILENCE_THRESHOLD_DAYS", "3"))
RESPONSE_WINDOW_MINUTES = int(os.getenv("RESPONSE_WINDOW_MINUTES", "1440"))
STREAK_ACTIVE_HOURS = int(os.getenv("STREAK_ACTIVE_HOURS", "48"))
TIMELINE_PERIOD = os.getenv("TIMELINE_PERIOD", "day")  # day | week

# Classification worker
USE_WORKER = os.getenv("USE_WORKER", "False").lower() == "true"
WORKER_TIMEOUT_SECONDS = float(os.getenv("WORKER_TIMEOUT_SECONDS", "180"))

# Enrichment (optional generative-text collaborator)
USE_ENRICHMENT = os.getenv("USE_ENRICHMENT", "False").lower() == "true"
ENRICHMENT_API_KEY = os.getenv("ENRICHMENT_API_KEY", "")
ENRICHMENT_API_BASE = os.getenv(
    "ENRICHMENT_API_BASE", "https://generativelanguage.googleapis.com/v1beta/models"
)
ENRICHMENT_MODELS: List[str] = [
    m.strip()
    for m in os.getenv(
        "ENRICHMENT_MODELS", "gemini-2.5-flash,gemini-2.0-flash,gemini-2.5-pro"
    ).split(",")
    if m.strip()
]
ENRICHMENT_SAMPLE_SIZE = int(os.getenv("ENRICHMENT_SAMPLE_SIZE", "30"))
ENRICHMENT_CONVERSATION_SAMPLE = int(os.getenv("ENRICHMENT_CONVERSATION_SAMPLE", "15"))
ENRICHMENT_DELAY = float(os.getenv("ENRICHMENT_DELAY", "0.2"))
ENRICHMENT_TIMEOUT = int(os.getenv("ENRICHMENT_TIMEOUT", "30"))
ENRICHMENT_MAX_RETRIES = int(os.getenv("ENRICHMENT_MAX_RETRIES", "3"))

# Privacy Settings
ENRICH_PSEUDONYMIZE = os.getenv("ENRICH_PSEUDONYMIZE", "True").lower() == "true"

# Weights for relationship level (must sum to ~1.0)
LEVEL_WEIGHTS: Dict[str, float] = {
    "frequency": 0.25,
    "positivity": 0.30,
    "engagement": 0.25,
    "conflict": 0.20,
}

# Weights for the blended alignment health value
ALIGN_COMPATIBILITY_WEIGHT = float(os.getenv("ALIGN_COMPATIBILITY_WEIGHT", "0.6"))
ALIGN_LEVEL_WEIGHT = float(os.getenv("ALIGN_LEVEL_WEIGHT", "0.4"))


def get_config_summary() -> Dict[str, Any]:
    """Return a summary of current configuration."""
    return {
        "parser": {
            "date_scan_lines": DATE_SCAN_LINES,
            "default_date_format": DEFAULT_DATE_FORMAT,
        },
        "analytics": {
            "silence_threshold_days": SILENCE_THRESHOLD_DAYS,
            "response_window_minutes": RESPONSE_WINDOW_MINUTES,
            "streak_active_hours": STREAK_ACTIVE_HOURS,
            "timeline_period": TIMELINE_PERIOD,
        },
        "worker": {
            "enabled": USE_WORKER,
            "timeout_seconds": WORKER_TIMEOUT_SECONDS,
        },
        "enrichment": {
            "enabled": USE_ENRICHMENT,
            "api_key_set": bool(ENRICHMENT_API_KEY),
            "models": ENRICHMENT_MODELS,
            "sample_size": ENRICHMENT_SAMPLE_SIZE,
            "delay": ENRICHMENT_DELAY,
            "pseudonymize": ENRICH_PSEUDONYMIZE,
        },
        "scoring": {
            "level_weights": LEVEL_WEIGHTS,
            "align_compatibility_weight": ALIGN_COMPATIBILITY_WEIGHT,
            "align_level_weight": ALIGN_LEVEL_WEIGHT,
        },
    }


def validate_config() -> tuple[bool, str]:
    """Validate configuration. Returns (is_valid, message)."""
    if USE_ENRICHMENT and not ENRICHMENT_API_KEY:
        return False, "ENRICHMENT_API_KEY not set in .env file (required when USE_ENRICHMENT=True)"

    if USE_ENRICHMENT and not ENRICHMENT_MODELS:
        return False, "ENRICHMENT_MODELS is empty"

    if DEFAULT_DATE_FORMAT not in ("DMY", "MDY"):
        return False, f"DEFAULT_DATE_FORMAT must be DMY or MDY, got {DEFAULT_DATE_FORMAT}"

    if SILENCE_THRESHOLD_DAYS < 1:
        return False, "SILENCE_THRESHOLD_DAYS must be >= 1"

    total_weight = sum(LEVEL_WEIGHTS.values())
    if abs(total_weight - 1.0) > 0.01:
        return False, f"Level weights sum to {total_weight:.2f}, should be ~1.0"

    if abs(ALIGN_COMPATIBILITY_WEIGHT + ALIGN_LEVEL_WEIGHT - 1.0) > 0.01:
        return False, "Alignment weights should sum to ~1.0"

    return True, "Configuration valid"


if __name__ == "__main__":
    # Print config summary for debugging
    import json
    print("chatbond configuration:")
    print(json.dumps(get_config_summary(), indent=2))
    print()
    valid, msg = validate_config()
    print(f"Validation: {msg}")

"""
Configuration constants for the application.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).resolve().parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

# Languages the level catalog knows about. Order is the display order.
SUPPORTED_LANGUAGES = ("html", "css", "javascript")

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()

ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

# Default number of rows returned by GET /api/leaderboard
LEADERBOARD_LIMIT = int(os.getenv("LEADERBOARD_LIMIT", "10"))
LEADERBOARD_MAX_LIMIT = 100

ENABLE_DEBUG_ROUTES = os.getenv("ENABLE_DEBUG_ROUTES", "0") == "1"

SEED_LEVELS_ON_STARTUP = os.getenv("SEED_LEVELS_ON_STARTUP", "1") == "1"

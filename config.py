"""
Application configuration.

Values are read from the environment (a local .env file is loaded first) and
exposed as module-level constants.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Database
MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DATABASE_NAME: str = os.getenv("DATABASE_NAME", "devcamper")
DB_TIMEOUT_MS: int = int(os.getenv("DB_TIMEOUT_MS", "5000"))

# Auth
SECRET_KEY = os.getenv("SECRET_KEY", "supersecretkey")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(30 * 24 * 60)))

# Geocoder
GEOCODER_URL: str = os.getenv("GEOCODER_URL", "https://www.mapquestapi.com/geocoding/v1/address")
GEOCODER_API_KEY: str = os.getenv("GEOCODER_API_KEY", "")
GEOCODER_TIMEOUT_SECONDS: float = float(os.getenv("GEOCODER_TIMEOUT_SECONDS", "5"))

# Earth radius per distance unit, used for radius search
EARTH_RADIUS = {"mi": 3963.0, "km": 6378.0}

# File uploads
FILE_UPLOAD_PATH: str = os.getenv("FILE_UPLOAD_PATH", "./public/uploads")
MAX_FILE_UPLOAD: int = int(os.getenv("MAX_FILE_UPLOAD", "1000000"))

# Listing
DEFAULT_PAGE_LIMIT = 25
MAX_PAGE_LIMIT = 100

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "text")

"""Server-wide constants shared by the application factory and routers."""

PROJECT_NAME = "Travel Buddy"
SERVICE_NAME = "travel-buddy-backend"
API_V1_STR = "/api/v1"

API_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"

# Where uploaded files are exposed to clients
UPLOADS_URL_PATH = "/uploads"

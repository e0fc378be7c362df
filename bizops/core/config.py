import os
from dotenv import load_dotenv

load_dotenv()

# Database Configuration
# DATABASE_URL overrides the DB_* settings (e.g. sqlite://:memory: for local runs)
DATABASE_URL = os.getenv("DATABASE_URL")

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", 3306))
DB_USER = os.getenv("DB_USER", "root")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_DATABASE = os.getenv("DB_DATABASE", os.getenv("DB_NAME", "bizops"))
DB_SSL_CA = os.getenv("DB_SSL_CA", "ca.pem") # Empty string disables TLS

DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", 30))
DB_POOL_MIN = int(os.getenv("DB_POOL_MIN", 1))
DB_POOL_MAX = int(os.getenv("DB_POOL_MAX", 10))
DB_GENERATE_SCHEMAS = os.getenv("DB_GENERATE_SCHEMAS", "true").lower() == "true"

# Connection Supervisor Configuration
DB_RETRY_DELAY = float(os.getenv("DB_RETRY_DELAY", 5)) # First backoff delay, doubled on each failure
DB_RETRY_MAX_DELAY = float(os.getenv("DB_RETRY_MAX_DELAY", 60))
DB_MAX_ATTEMPTS = int(os.getenv("DB_MAX_ATTEMPTS", 10)) # Attempts per connect round
DB_HEALTH_INTERVAL = float(os.getenv("DB_HEALTH_INTERVAL", 15)) # Seconds between pings

# Order Placement
ORDER_TIMEOUT = float(os.getenv("ORDER_TIMEOUT", 10))

# Application Metadata
PROJECT_NAME = "BizOps Backend"
VERSION = "1.0.0"
API_PREFIX = os.getenv("API_PREFIX", "")
PORT = int(os.getenv("PORT", 3000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

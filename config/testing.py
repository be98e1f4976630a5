import os

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"
TOKEN_EXPIRE_HOURS = 4

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "internship_test_db"),
}

LATE_CUTOFF = "08:00"

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ADMIN_IDENTIFIER = "admin"
ADMIN_PASSWORD = "admin123"

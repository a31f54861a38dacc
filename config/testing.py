import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "canteen_test"),
    "connect_timeout": 2,
    "lock_wait_timeout": 2,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ADMISSION_LOCK_TIMEOUT_SECONDS = 2.0
STUDENTS_PER_PAGE = 10

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

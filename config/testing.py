import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_admin_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

MAX_UPLOAD_MB = 1

DEFAULT_IMPORT_PASSWORD = "123456"
SCHEDULE_IMPORT_CREATE_SUBJECTS = True
SCHEDULE_IMPORT_CREATE_TEACHERS = False
USER_IMPORT_CREATE_SUBJECTS = False

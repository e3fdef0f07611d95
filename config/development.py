import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_admin"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "5"))

# Spreadsheet imports
DEFAULT_IMPORT_PASSWORD = os.getenv("DEFAULT_IMPORT_PASSWORD", "123456")
SCHEDULE_IMPORT_CREATE_SUBJECTS = bool(int(os.getenv("SCHEDULE_IMPORT_CREATE_SUBJECTS", "1")))
SCHEDULE_IMPORT_CREATE_TEACHERS = bool(int(os.getenv("SCHEDULE_IMPORT_CREATE_TEACHERS", "0")))
USER_IMPORT_CREATE_SUBJECTS = bool(int(os.getenv("USER_IMPORT_CREATE_SUBJECTS", "0")))

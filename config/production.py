import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_admin"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "5"))

DEFAULT_IMPORT_PASSWORD = os.getenv("DEFAULT_IMPORT_PASSWORD", "123456")
SCHEDULE_IMPORT_CREATE_SUBJECTS = bool(int(os.getenv("SCHEDULE_IMPORT_CREATE_SUBJECTS", "1")))
SCHEDULE_IMPORT_CREATE_TEACHERS = bool(int(os.getenv("SCHEDULE_IMPORT_CREATE_TEACHERS", "0")))
USER_IMPORT_CREATE_SUBJECTS = bool(int(os.getenv("USER_IMPORT_CREATE_SUBJECTS", "0")))

import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Count a repeated scan of the same token by the same student only once
DEDUPE_CHECKINS = bool(int(os.getenv("DEDUPE_CHECKINS", "1")))

# Load the sample accounts (teacher1, student1, admin, ...) on startup
SEED_DEMO_DATA = bool(int(os.getenv("SEED_DEMO_DATA", "1")))

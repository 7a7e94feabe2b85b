import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEDUPE_CHECKINS = bool(int(os.getenv("DEDUPE_CHECKINS", "1")))
SEED_DEMO_DATA = bool(int(os.getenv("SEED_DEMO_DATA", "0")))

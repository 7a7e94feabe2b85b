SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DEDUPE_CHECKINS = True
SEED_DEMO_DATA = True

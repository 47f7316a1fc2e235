import os

# Keep tests independent of a developer's .env or shell settings
os.environ.setdefault("BACKEND_URL", "http://test")
os.environ.setdefault("POLL_INTERVAL_MS", "3000")
os.environ.setdefault("LOG_JSON", "true")

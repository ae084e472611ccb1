import os

# Test defaults; must be in place before api.main builds its settings
os.environ.setdefault("AUTH_ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("AUTH_REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("RATE_LIMIT_MAX", "100000")

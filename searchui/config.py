import os

# API port inside the container (external mapping controlled by compose)
PORT = int(os.getenv("PORT", "8000"))

# Uvicorn/Gunicorn worker count
WORKERS = int(os.getenv("WORKERS", "2"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Solr core the proxy forwards to; select handler is appended
SOLR_URL = os.getenv("SOLR_URL", "http://localhost:8983/solr/nutch").rstrip("/")
SOLR_SELECT_URL = os.getenv("SOLR_SELECT_URL", f"{SOLR_URL}/select")

# Outbound timeout in seconds; empty means wait for the transport's own limits
_solr_timeout = os.getenv("SOLR_TIMEOUT", "")
SOLR_TIMEOUT = float(_solr_timeout) if _solr_timeout else None

# Page size and card text budget
PAGE_SIZE = int(os.getenv("PAGE_SIZE", "20"))
CONTENT_MAX_LENGTH = int(os.getenv("CONTENT_MAX_LENGTH", "300"))

# Keystroke coalescing delay for interactive sessions (seconds)
DEBOUNCE_SECONDS = float(os.getenv("DEBOUNCE_SECONDS", "0.5"))

# Where interactive clients reach the proxy endpoint
PROXY_URL = os.getenv("PROXY_URL", f"http://localhost:{PORT}/api/solr")

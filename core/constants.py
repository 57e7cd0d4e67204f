"""
Core Module - Constants.

============================================================
RESPONSIBILITY
============================================================
Defines service-wide constants.

- Single source of truth for provider limits and cache policy
- Values here are defaults; core.config may override them
- No business logic here

============================================================
"""

import re

# ============================================================
# SYSTEM CONSTANTS
# ============================================================

SYSTEM_NAME = "stock-insights"
SYSTEM_VERSION = "1.0.0"

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600

# ============================================================
# PROVIDER CONSTANTS
# ============================================================

ALPHA_VANTAGE_BASE_URL = "https://www.alphavantage.co/query"

# Free tier: 5 calls/minute, 500 calls/day
PROVIDER_CALLS_PER_MINUTE = 5
MIN_REQUEST_INTERVAL_SECONDS = SECONDS_PER_MINUTE / PROVIDER_CALLS_PER_MINUTE

DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0

# ============================================================
# CACHE CONSTANTS
# ============================================================

CACHE_TTL_HOURS = 24

# ============================================================
# SYMBOL CONSTANTS
# ============================================================

SYMBOL_MAX_LENGTH = 10
SYMBOL_PATTERN = re.compile(r"^[A-Z0-9.]{1,10}$")

# ============================================================
# SEARCH CONSTANTS
# ============================================================

SEARCH_DEBOUNCE_SECONDS = 0.3

"""
Application-wide constants for the Steam Market Manager.

Centralizes magic numbers and configuration values to improve maintainability.
"""

# =============================================================================
# Upstream Endpoints
# =============================================================================

# Steam Community Market
STEAM_MARKET_BASE_URL = "http://steamcommunity.com/"
STEAM_PRICE_OVERVIEW_URI = "/market/priceoverview/"

# backpack.tf bulk pricing
BACKPACK_TF_BASE_URL = "http://backpack.tf/"
BACKPACK_TF_PRICES_URI = "/api/IGetMarketPrices/v1/"

# Output formats accepted by IGetMarketPrices
BACKPACK_TF_FORMATS = ("json", "vdf", "jsonp", "pretty")

# backpack.tf reports values in US cents
BACKPACK_TF_VALUE_DECIMALS = 2

# Default User-Agent sent to both upstreams
DEFAULT_USER_AGENT = "SteamMarketManager/1.0"


# =============================================================================
# Network Timeouts (seconds)
# =============================================================================

# Connect timeout for upstream requests
API_TIMEOUT_CONNECT = 10

# Read timeout for upstream requests (bulk price lists can be large)
API_TIMEOUT_READ = 30


# =============================================================================
# Caching
# =============================================================================

# Default cache file name (relative to the working directory)
CACHE_FILE_DEFAULT = "cache.json"

# Default cache TTL (seconds); 0 disables caching
CACHE_TTL_DEFAULT = 0

# Upper bound for the cache TTL - 7 days
CACHE_TTL_MAX = 604800


# =============================================================================
# Rate Limiting
# =============================================================================

# backpack.tf allows one IGetMarketPrices call per 300 seconds
BACKPACK_TF_REFRESH_INTERVAL = 300


# =============================================================================
# Connection Pool Configuration
# =============================================================================

# Number of connection pools to cache
POOL_CONNECTIONS = 10

# Maximum connections per pool
POOL_MAXSIZE = 20


# =============================================================================
# Web API
# =============================================================================

WEB_API_HOST_DEFAULT = "127.0.0.1"
WEB_API_PORT_DEFAULT = 1337

# Separator between item names in GET /items/{names}
WEB_API_SEPARATOR_DEFAULT = "!N!"

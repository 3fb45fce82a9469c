"""Rate limiting configuration."""
import os
from slowapi import Limiter
from slowapi.util import get_remote_address


def get_client_ip(request):
    """Get client IP for rate limiting, considering proxies."""
    # Check X-Forwarded-For header (from reverse proxies)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded.split(",")[0].strip()

    # Fall back to direct connection IP
    return get_remote_address(request)


# Create rate limiter instance
# Uses Redis if REDIS_URL is set, falls back to memory for a single process
limiter = Limiter(
    key_func=get_client_ip,
    default_limits=["200/minute"],  # Global default
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window"
)

# Rate limit definitions for different endpoint categories
# Voting links are shared in group chats, so a burst of voters behind one
# NAT must still get through
RATE_LIMITS = {
    "create_session": "30/minute",
    "vote": "60/minute",
    "read_session": "200/minute",
}

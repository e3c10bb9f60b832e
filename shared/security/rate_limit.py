"""
Rate limiting for the admin API using slowapi.

All mutating admin routes share one bucket per client address, so the limit
applies to the admin session as a whole rather than per route.

Usage:
    @router.post("/faqs")
    @admin_rate_limit
    def create_faq(request: Request, ...):
        ...
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from shared.config.settings import settings
from shared.config.logging import get_logger

logger = get_logger(__name__)

# Create limiter instance using client IP as key
limiter = Limiter(key_func=get_remote_address)

ADMIN_SCOPE = "admin"

# Decorator for mutating admin endpoints; they must accept ``request: Request``
admin_rate_limit = limiter.shared_limit(settings.admin_rate_limit, scope=ADMIN_SCOPE)

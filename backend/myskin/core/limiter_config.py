from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from myskin.core.config import get_limiter_storage_uri

# Global Limiter instance to be imported by controllers.
# main.py disables it for test runs when RATE_LIMIT_ENABLED=0.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per hour", "50 per minute"],
    storage_uri=get_limiter_storage_uri(),
    enabled=True,
)

# Shared limits for public write endpoints
AUTH_LIMIT = "5 per minute;20 per hour"
FORM_LIMIT = "10 per minute;60 per hour"

"""
The shared slowapi limiter, keyed on the client address, and the limits
the routers decorate their endpoints with.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

# Sign-in, sign-up and password reset mail
RATE_LIMIT_AUTH = "5/minute"

# Writes: create, update, delete, import
RATE_LIMIT_GENERAL = "30/minute"

# Listing and analytics
RATE_LIMIT_READ = "60/minute"

# Skill autocomplete runs on (debounced) keystrokes
RATE_LIMIT_SUGGEST = "120/minute"

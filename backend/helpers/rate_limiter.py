"""Per-client-address request limits (slowapi).

Registration is limited here by address. Failed logins are throttled per
username by services.login_throttle instead, since one address may front
many users.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Shared by main.py (handler registration) and routers (decorators)
limiter = Limiter(key_func=get_remote_address)

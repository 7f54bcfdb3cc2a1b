"""
Sign-in for JobTrack.

Local installs run in single-user mode and never ask for credentials. With
JOBTRACK_SINGLE_USER_MODE=false, accounts sign up and sign in with an email
and password or through Google/GitHub, and every API call carries a bearer
session token.
"""
from .models import User, LinkedIdentity
from .dependencies import get_current_user, get_current_active_user
from .router import router

__all__ = [
    "User",
    "LinkedIdentity",
    "get_current_user",
    "get_current_active_user",
    "router",
]

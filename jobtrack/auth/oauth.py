"""
"Continue with Google" and "Continue with GitHub".

Providers are registered with authlib's Starlette client when both the
client id and secret are configured (JOBTRACK_GOOGLE_CLIENT_ID/SECRET,
JOBTRACK_GITHUB_CLIENT_ID/SECRET). The redirect URI to register with each
provider is {base_url}/auth/oauth/{provider}/callback.
"""
import logging
from typing import Optional
from urllib.parse import urlsplit

import httpx
from authlib.integrations.starlette_client import OAuth

from ..config import settings

logger = logging.getLogger("jobtrack.auth")

SUPPORTED_PROVIDERS = ("google", "github")
DEFAULT_NEXT_PATH = "/applications"

oauth = OAuth()

if settings.auth.google_client_id and settings.auth.google_client_secret:
    oauth.register(
        name="google",
        client_id=settings.auth.google_client_id,
        client_secret=settings.auth.google_client_secret,
        server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
        client_kwargs={"scope": "openid email profile"},
    )

if settings.auth.github_client_id and settings.auth.github_client_secret:
    oauth.register(
        name="github",
        client_id=settings.auth.github_client_id,
        client_secret=settings.auth.github_client_secret,
        authorize_url="https://github.com/login/oauth/authorize",
        access_token_url="https://github.com/login/oauth/access_token",
        api_base_url="https://api.github.com/",
        client_kwargs={"scope": "user:email"},
    )


class ProviderError(Exception):
    """The provider did not hand back a usable profile."""


def get_oauth_client(provider: str):
    """The registered client for `provider`, or None when it is unknown or unconfigured."""
    if provider not in SUPPORTED_PROVIDERS:
        return None
    return oauth.create_client(provider)


def configured_providers() -> list:
    return [p for p in SUPPORTED_PROVIDERS if get_oauth_client(p) is not None]


async def fetch_profile(provider: str, client, token: dict) -> dict:
    """
    {"subject", "email", "name"} for the signed-in provider account.

    Raises ProviderError when the provider's API fails or answers with
    something other than a profile.
    """
    if provider == "google":
        info = token.get("userinfo") or await client.userinfo(token=token)
        profile = {"subject": info.get("sub"), "email": info.get("email"), "name": info.get("name")}
    else:
        profile = await _fetch_github_profile(client, token)

    if not profile["subject"] or not profile["email"]:
        raise ProviderError(f"{provider} profile has no id or email")
    return profile


async def _fetch_github_profile(client, token: dict) -> dict:
    # A private address only shows up in /user/emails
    try:
        account_resp = await client.get("user", token=token)
        account_resp.raise_for_status()
        emails_resp = await client.get("user/emails", token=token)
        emails_resp.raise_for_status()
        account, emails = account_resp.json(), emails_resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise ProviderError(f"GitHub API request failed: {e}") from e

    if not isinstance(account, dict) or not isinstance(emails, list):
        raise ProviderError("Unexpected GitHub API response")
    return github_profile(account, emails)


def github_profile(account: dict, emails: list) -> dict:
    primary = next(
        (
            entry.get("email") for entry in emails
            if isinstance(entry, dict) and entry.get("primary") and entry.get("verified")
        ),
        None,
    )
    account_id = account.get("id")
    return {
        "subject": str(account_id) if account_id is not None else None,
        "email": primary or account.get("email"),
        "name": account.get("name") or account.get("login"),
    }


def safe_next_path(next_param: Optional[str], redirect_to: Optional[str], origin: str) -> str:
    """
    Where to send the user after signing in.

    An explicit `next` path wins unless it is "/". Otherwise `redirect_to` is
    used when it points at this origin (absolute URL) or is a bare path.
    Anything off-site falls back to the applications list.
    """
    if next_param and next_param != "/" and _is_local_path(next_param):
        return next_param

    if redirect_to:
        parts = urlsplit(redirect_to)
        if parts.scheme and parts.netloc:
            if f"{parts.scheme}://{parts.netloc}" == origin.rstrip("/"):
                candidate = parts.path + (f"?{parts.query}" if parts.query else "")
                if candidate and candidate != "/":
                    return candidate
        elif _is_local_path(redirect_to) and redirect_to != "/":
            return redirect_to

    return DEFAULT_NEXT_PATH


def _is_local_path(value: str) -> bool:
    # "//evil.com" is protocol-relative, not a path
    return value.startswith("/") and not value.startswith("//")

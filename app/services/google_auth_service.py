import logging
from dataclasses import dataclass

import httpx
from authlib.integrations.starlette_client import OAuth
from starlette.requests import Request

from app.config import Settings

logger = logging.getLogger(__name__)

GOOGLE_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v1/userinfo"


@dataclass(frozen=True)
class GoogleIdentity:
    google_id: str
    email: str | None
    name: str | None


class IdentityProviderUnavailable(Exception):
    pass


class GoogleIdentityProvider:
    """Google sign-in: browser redirect flow plus access-token lookup."""

    enabled = True

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None):
        self.callback_url = settings.GOOGLE_CALLBACK_URL
        self.http_client = http_client or httpx.AsyncClient(timeout=10)
        self.oauth = OAuth()
        self.client = self.oauth.register(
            name="google",
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            server_metadata_url=GOOGLE_METADATA_URL,
            client_kwargs={"scope": "openid email profile"},
        )

    async def authorize_redirect(self, request: Request):
        return await self.client.authorize_redirect(request, self.callback_url)

    async def identity_from_callback(self, request: Request) -> GoogleIdentity:
        token = await self.client.authorize_access_token(request)
        user_info = token.get("userinfo") or {}
        if not user_info.get("sub"):
            raise IdentityProviderUnavailable("Invalid Google token")
        return GoogleIdentity(
            google_id=user_info["sub"],
            email=user_info.get("email"),
            name=user_info.get("name"),
        )

    async def identity_from_access_token(self, access_token: str) -> GoogleIdentity | None:
        response = await self.http_client.get(GOOGLE_USERINFO_URL, params={"access_token": access_token})
        if response.status_code != 200:
            logger.info("Google userinfo rejected token (status=%s)", response.status_code)
            return None
        payload = response.json()
        if not payload.get("id"):
            return None
        return GoogleIdentity(
            google_id=str(payload["id"]),
            email=payload.get("email"),
            name=payload.get("name"),
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()


class DisabledGoogleIdentityProvider(GoogleIdentityProvider):
    """Used when no client credentials are configured; only token lookup works."""

    enabled = False

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None):
        self.callback_url = settings.GOOGLE_CALLBACK_URL
        self.http_client = http_client or httpx.AsyncClient(timeout=10)

    async def authorize_redirect(self, request: Request):
        raise IdentityProviderUnavailable("Google OAuth is not configured")

    async def identity_from_callback(self, request: Request) -> GoogleIdentity:
        raise IdentityProviderUnavailable("Google OAuth is not configured")


def build_identity_provider(settings: Settings) -> GoogleIdentityProvider:
    if not settings.google_configured:
        logger.warning(
            "Google OAuth not configured. Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET environment variables."
        )
        return DisabledGoogleIdentityProvider(settings)
    return GoogleIdentityProvider(settings)


def get_identity_provider(request: Request) -> GoogleIdentityProvider:
    return request.app.state.identity_provider

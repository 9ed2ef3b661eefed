"""OAuth login providers.

Providers are plain objects collected into an ``AuthProviders`` mapping at
startup and handed to the auth routes through a dependency, so there is no
process-wide strategy registry.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx

from src.config import Settings

logger = logging.getLogger(__name__)


class OAuthError(Exception):
    """The provider rejected the code exchange or returned an unusable profile."""


@dataclass(frozen=True)
class ExternalIdentity:
    """Profile returned by an identity provider after a successful login."""

    provider: str
    subject: str
    email: str | None = None
    full_name: str | None = None
    picture: str | None = None


class OAuthProvider:
    """Authorization-code flow against one identity provider."""

    name: str = ""
    authorize_url: str = ""
    token_url: str = ""
    profile_url: str = ""
    scope: str = ""

    def __init__(self, client_id: str, client_secret: str, server_url: str):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = f"{server_url}/auth/{self.name}/callback"
        self.timeout = 10.0

    def authorization_url(self) -> str:
        """URL the browser is redirected to in order to start the login."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.scope,
            "prompt": "select_account",
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def fetch_identity(self, code: str) -> ExternalIdentity:
        """Exchange an authorization code and load the caller's profile."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                token_response = await client.post(
                    self.token_url,
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": self.redirect_uri,
                        "grant_type": "authorization_code",
                        "code": code,
                    },
                )
                token_response.raise_for_status()
                access_token = token_response.json()["access_token"]

                profile_response = await client.get(
                    self.profile_url,
                    params=self.profile_params(),
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                profile_response.raise_for_status()
                profile = profile_response.json()
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error(f"{self.name} code exchange failed: {e}")
            raise OAuthError(f"Cannot login using {self.name}, try again later") from e

        return self.parse_profile(profile)

    def profile_params(self) -> dict[str, str]:
        return {}

    def parse_profile(self, profile: dict[str, Any]) -> ExternalIdentity:
        raise NotImplementedError


class GoogleProvider(OAuthProvider):
    name = "google"
    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"  # noqa: S105
    profile_url = "https://openidconnect.googleapis.com/v1/userinfo"
    scope = "openid profile email"

    def parse_profile(self, profile: dict[str, Any]) -> ExternalIdentity:
        if "sub" not in profile:
            raise OAuthError("Cannot login using google, try again later")
        full_name = " ".join(
            part for part in (profile.get("given_name"), profile.get("family_name")) if part
        )
        return ExternalIdentity(
            provider=self.name,
            subject=str(profile["sub"]),
            email=profile.get("email"),
            full_name=full_name or profile.get("name"),
            picture=profile.get("picture"),
        )


class FacebookProvider(OAuthProvider):
    name = "facebook"
    authorize_url = "https://www.facebook.com/v19.0/dialog/oauth"
    token_url = "https://graph.facebook.com/v19.0/oauth/access_token"  # noqa: S105
    profile_url = "https://graph.facebook.com/me"
    scope = "public_profile,email"

    def profile_params(self) -> dict[str, str]:
        return {"fields": "id,name,email,picture.type(large)"}

    def parse_profile(self, profile: dict[str, Any]) -> ExternalIdentity:
        if "id" not in profile:
            raise OAuthError("Cannot login using facebook, try again later")
        picture = profile.get("picture", {}).get("data", {}).get("url")
        return ExternalIdentity(
            provider=self.name,
            subject=str(profile["id"]),
            email=profile.get("email"),
            full_name=profile.get("name"),
            picture=picture,
        )


class AuthProviders(Mapping[str, OAuthProvider]):
    """Immutable set of enabled providers keyed by name."""

    def __init__(self, providers: list[OAuthProvider] | None = None):
        self._providers = {provider.name: provider for provider in providers or []}

    def __getitem__(self, name: str) -> OAuthProvider:
        return self._providers[name]

    def __iter__(self):
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)


def build_auth_providers(settings: Settings) -> AuthProviders:
    """Create every provider whose client credentials are configured."""
    providers: list[OAuthProvider] = []
    if settings.google_client_id and settings.google_client_secret:
        providers.append(
            GoogleProvider(
                settings.google_client_id, settings.google_client_secret, settings.server_url
            )
        )
    if settings.facebook_client_id and settings.facebook_client_secret:
        providers.append(
            FacebookProvider(
                settings.facebook_client_id, settings.facebook_client_secret, settings.server_url
            )
        )
    logger.info(f"Enabled OAuth providers: {', '.join(p.name for p in providers) or 'none'}")
    return AuthProviders(providers)

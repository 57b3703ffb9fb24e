import aiohttp
import logging
from urllib.parse import urlencode
from pydantic import ValidationError
from damaijiwa.core.config import settings
from damaijiwa.core.exceptions import AuthenticationError
from damaijiwa.schemas.user import GoogleIdentity

logger = logging.getLogger("google_oauth_service")

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

class GoogleOAuthService:
    def __init__(self, client_id: str = None, client_secret: str = None, redirect_uri: str = None):
        self.client_id = client_id or settings.google_client_id or ""
        self.client_secret = client_secret or settings.google_client_secret or ""
        self.redirect_uri = redirect_uri or settings.google_redirect_uri

    def authorization_url(self) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> GoogleIdentity:
        """Trade an authorization code for the user's identity claims."""
        if not code:
            raise AuthenticationError("No code provided")
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(TOKEN_URL, data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                }) as resp:
                    tokens = await resp.json(content_type=None)
                    if not isinstance(tokens, dict):
                        raise AuthenticationError("Token exchange failed", "unexpected token response")
                    if resp.status != 200 or not tokens.get("access_token"):
                        raise AuthenticationError(
                            "Token exchange failed",
                            tokens.get("error_description") or tokens.get("error"),
                        )

                headers = {"Authorization": f"Bearer {tokens['access_token']}"}
                async with session.get(USERINFO_URL, headers=headers) as resp:
                    claims = await resp.json(content_type=None)
                    if not isinstance(claims, dict):
                        raise AuthenticationError("Userinfo request failed", "unexpected userinfo response")
                    if resp.status != 200:
                        raise AuthenticationError("Userinfo request failed", claims.get("error"))
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Google OAuth request error: {e}")
            raise AuthenticationError("Could not reach identity provider", str(e)) from e

        try:
            return GoogleIdentity.model_validate(claims)
        except ValidationError as e:
            raise AuthenticationError("Identity provider returned no subject id") from e

google_oauth_service = GoogleOAuthService()

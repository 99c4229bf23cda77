"""Authentication configuration for the forum moderation API."""

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class AuthSettings(BaseSettings):
    """Authentication configuration settings.

    Token issuance lives in the account service; this API only verifies the
    access tokens it receives.
    """

    # JWT Configuration
    jwt_secret_key: str = Field(default="", description="JWT signing secret key")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_issuer: str = Field(default="forum-api", description="JWT issuer")
    jwt_audience: str = Field(default="forum", description="JWT audience")
    access_token_lifetime: int = Field(
        default=3600, description="Access token lifetime (1 hour)"
    )

    # Cookie Configuration
    access_cookie_name: str = Field(
        default="forum_at", description="Access token cookie name"
    )
    cookie_secure: bool = Field(default=True, description="Use secure cookies")

    model_config = SettingsConfigDict(env_prefix="AUTH_", case_sensitive=False)

    @property
    def effective_cookie_name(self) -> str:
        """Cookie name, with the __Secure- prefix when cookies are secure."""
        if self.cookie_secure:
            return f"__Secure-{self.access_cookie_name}"
        return self.access_cookie_name


def get_auth_settings() -> AuthSettings:
    """Get authentication settings instance."""
    from forum_moderation_api.config.settings import get_settings

    return get_settings().auth

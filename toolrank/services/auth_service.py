"""Authentication service for bearer JWTs issued by the external auth provider."""

from dataclasses import dataclass
from typing import Optional
import jwt
from jwt import PyJWKClient

from toolrank.exceptions import InvalidTokenError, MissingTokenError
from toolrank.utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class AuthenticatedUser:
    """Identity extracted from a verified token."""

    user_id: str
    email: Optional[str] = None


class AuthService:
    """Service for verifying provider JWTs against the issuer's JWKS."""

    JWKS_URL_TEMPLATE = "{issuer}/.well-known/jwks.json"
    ALGORITHMS = ["RS256", "ES256"]

    def __init__(self, issuer: str, audience: Optional[str] = None) -> None:
        self._issuer = issuer.rstrip("/")
        self._audience = audience
        self._jwks_client: Optional[PyJWKClient] = None

    def _get_jwks_client(self) -> PyJWKClient:
        """Get or create the cached PyJWKClient for the configured issuer."""
        if self._jwks_client is None:
            self._jwks_client = PyJWKClient(self.JWKS_URL_TEMPLATE.format(issuer=self._issuer))
        return self._jwks_client

    async def verify_token(self, authorization_header: Optional[str]) -> AuthenticatedUser:
        """
        Verify a bearer JWT and extract the user identity.

        Args:
            authorization_header: The Authorization header value (Bearer <token>)

        Returns:
            AuthenticatedUser whose user_id is the token's ``sub`` claim

        Raises:
            MissingTokenError: If no token is provided
            InvalidTokenError: If token is invalid or expired
        """
        if not authorization_header:
            raise MissingTokenError()

        parts = authorization_header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise InvalidTokenError("Invalid authorization header format")

        token = parts[1]

        try:
            # Reject foreign issuers before fetching any keys
            unverified = jwt.decode(token, options={"verify_signature": False})
            issuer = str(unverified.get("iss", "")).rstrip("/")

            if not issuer or not issuer.startswith("https://"):
                raise InvalidTokenError("Invalid token issuer")

            if issuer != self._issuer:
                raise InvalidTokenError("Token issuer not trusted")

            signing_key = self._get_jwks_client().get_signing_key_from_jwt(token)

            payload = jwt.decode(
                token,
                signing_key.key,
                algorithms=self.ALGORITHMS,
                issuer=unverified.get("iss"),
                audience=self._audience,
                options={
                    "verify_exp": True,
                    "verify_iat": True,
                    "verify_nbf": True,
                    "verify_aud": self._audience is not None,
                },
            )

            user_id = payload.get("sub")
            if not user_id:
                raise InvalidTokenError("Token missing user identifier")

            log.debug("token verified", user_id=user_id)

            return AuthenticatedUser(user_id=user_id, email=payload.get("email"))

        except jwt.ExpiredSignatureError:
            log.warning("token expired")
            raise InvalidTokenError("Token has expired")
        except InvalidTokenError:
            raise
        except jwt.InvalidTokenError as e:
            log.warning("token invalid", error=str(e))
            raise InvalidTokenError(f"Token validation failed: {str(e)}")
        except Exception as e:
            log.error("token verification failed", error=str(e), error_type=type(e).__name__)
            raise InvalidTokenError("Token verification failed")


# Singleton instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        from toolrank.config import get_settings

        settings = get_settings()
        _auth_service = AuthService(issuer=settings.auth_issuer, audience=settings.auth_audience)
    return _auth_service

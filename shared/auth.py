"""
JWT validation and user extraction utilities for Supabase Auth.
Supports both HS256 (legacy) and ES256 (JWKS) token verification.
"""

import os
import base64
import jwt
from jwt import PyJWKClient
import logging
from typing import Optional
import azure.functions as func

logger = logging.getLogger(__name__)

# Cache the JWKS client to avoid repeated fetches
_jwks_client: Optional[PyJWKClient] = None


class UnauthorizedError(Exception):
    """Raised when authentication fails."""
    pass


def get_supabase_url() -> str:
    """Get the Supabase URL from environment variables."""
    url = os.environ.get("SUPABASE_URL")
    if not url:
        raise ValueError("SUPABASE_URL environment variable not set")
    return url.rstrip('/')


def get_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client for Supabase token verification.
    Uses the Supabase JWKS endpoint for ES256 token verification.
    """
    global _jwks_client
    if _jwks_client is None:
        supabase_url = get_supabase_url()
        jwks_url = f"{supabase_url}/auth/v1/.well-known/jwks.json"
        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        _jwks_client = PyJWKClient(jwks_url, cache_keys=True)
    return _jwks_client


def get_bearer_token(req: func.HttpRequest) -> str:
    """
    Return the raw bearer token from the Authorization header.

    Raises:
        UnauthorizedError: If the header is missing or not a bearer token
    """
    auth_header = req.headers.get("Authorization", "")

    if not auth_header.startswith("Bearer ") or not auth_header[7:].strip():
        raise UnauthorizedError("Missing or invalid Authorization header")

    return auth_header[7:].strip()


def get_user_from_token(req: func.HttpRequest) -> dict:
    """
    Extract and validate user from Authorization header.
    Supports both ES256 (JWKS) and HS256 (legacy) tokens.

    Args:
        req: The HTTP request object

    Returns:
        dict with user info: {"id", "email", "role", "user_metadata", "app_metadata"}

    Raises:
        UnauthorizedError: If token is missing, expired, or invalid
    """
    token = get_bearer_token(req)

    try:
        try:
            unverified_header = jwt.get_unverified_header(token)
            token_alg = unverified_header.get('alg')
        except jwt.exceptions.DecodeError as e:
            logger.warning(f"Could not read token header: {e}")
            raise UnauthorizedError("Invalid token format")

        if token_alg == "ES256":
            payload = _verify_es256_token(token)
        elif token_alg == "HS256":
            payload = _verify_hs256_token(token)
        else:
            logger.error(f"Unsupported algorithm: {token_alg}")
            raise UnauthorizedError(f"Unsupported token algorithm: {token_alg}")

        logger.info(f"Token validated for user: {payload.get('sub')}")

        return {
            "id": payload["sub"],
            "email": payload.get("email"),
            "role": payload.get("role", "authenticated"),
            "user_metadata": payload.get("user_metadata") or {},
            "app_metadata": payload.get("app_metadata") or {},
        }

    except UnauthorizedError:
        raise
    except jwt.ExpiredSignatureError:
        logger.warning("Token expired")
        raise UnauthorizedError("Token expired")
    except jwt.InvalidAudienceError:
        logger.warning("Invalid audience in token")
        raise UnauthorizedError("Invalid token audience")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise UnauthorizedError("Invalid token")
    except Exception as e:
        logger.error(f"Token verification error: {str(e)}")
        raise UnauthorizedError("Token verification failed")


def _verify_es256_token(token: str) -> dict:
    """Verify an ES256 token using JWKS."""
    jwks_client = get_jwks_client()

    signing_key = jwks_client.get_signing_key_from_jwt(token)

    return jwt.decode(
        token,
        signing_key.key,
        algorithms=["ES256"],
        audience="authenticated",
        options={
            "verify_signature": True,
            "verify_aud": True,
            "verify_exp": True,
            "require": ["sub", "exp", "aud"]
        }
    )


def get_jwt_secret() -> bytes:
    """
    Get the legacy HS256 secret, decoding base64-encoded values.
    """
    secret = os.environ.get("SUPABASE_JWT_SECRET")
    if not secret:
        raise ValueError("SUPABASE_JWT_SECRET not set for HS256 verification")

    if secret.endswith('='):
        try:
            return base64.b64decode(secret)
        except ValueError:
            pass
    return secret.encode('utf-8')


def _verify_hs256_token(token: str) -> dict:
    """Verify an HS256 token using the static JWT secret (legacy)."""
    return jwt.decode(
        token,
        get_jwt_secret(),
        algorithms=["HS256"],
        audience="authenticated",
        options={
            "verify_signature": True,
            "verify_aud": True,
            "verify_exp": True,
            "require": ["sub", "exp", "aud"]
        }
    )

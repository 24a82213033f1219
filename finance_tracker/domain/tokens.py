"""Signed bearer tokens (JWT) binding a request to a user id"""

from datetime import datetime, timedelta, timezone

import jwt

from finance_tracker.domain.exceptions import InvalidToken, MalformedToken, TokenExpired

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class TokenService:
    """Issues and verifies stateless, time-limited tokens

    There is no revocation list: a token stays valid until it expires.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=30)):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, subject_id: str, now: datetime | None = None) -> str:
        """Sign a token for subject_id that expires ttl after now"""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(subject_id),
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """
        Verify signature and expiry, returning the subject id.

        Raises:
            TokenExpired: Token is past its exp claim
            InvalidToken: Signature mismatch or invalid claim values
            MalformedToken: Not decodable, or a required claim is missing
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired("Token has expired") from e
        except jwt.InvalidSignatureError as e:
            # Must precede DecodeError, which it subclasses
            raise InvalidToken("Token signature is invalid") from e
        except (jwt.DecodeError, jwt.MissingRequiredClaimError) as e:
            raise MalformedToken(f"Token is malformed: {e}") from e
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Token is invalid: {e}") from e

        return payload["sub"]

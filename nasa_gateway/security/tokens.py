"""Issue and validate signed bearer tokens.

Tokens are RS256 JWTs carrying the principal in ``sub`` and its roles in a
space-separated ``scope`` claim. The RSA key pair is generated when the
:class:`TokenService` is constructed and lives only in memory, so restarting
the process invalidates every token handed out before the restart. There is
no refresh and no revocation: a token is good until it expires.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger(__name__)

ALGORITHM = "RS256"
DEFAULT_ISSUER = "self"
DEFAULT_LIFETIME = timedelta(minutes=30)


class InvalidToken(Exception):
    """Raised when a token cannot be trusted."""


class ExpiredToken(InvalidToken):
    """Raised when a well-formed, correctly signed token is past ``exp``."""


@dataclass(frozen=True)
class TokenClaims:
    """What a validated token says about its bearer."""

    subject: str
    roles: frozenset[str]
    issued_at: datetime
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(UTC)


def build_scope(roles: Iterable[str]) -> str:
    """Join role names into the ``scope`` claim, deduplicated and sorted."""
    return " ".join(sorted({role for role in roles if role}))


class TokenService:
    """Process-local JWT issuer and validator."""

    def __init__(
        self,
        issuer: str = DEFAULT_ISSUER,
        lifetime: timedelta = DEFAULT_LIFETIME,
        key_size: int = 2048,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.issuer = issuer
        self.lifetime = lifetime
        self._clock = clock
        self._private_key = rsa.generate_private_key(
            public_exponent=65537, key_size=key_size
        )
        self._public_key = self._private_key.public_key()
        self.key_id = str(uuid.uuid4())
        logger.info(
            "Generated token signing key",
            extra={"kid": self.key_id, "key_size": key_size},
        )

    def issue(self, subject: str, roles: Iterable[str]) -> str:
        """Return a signed token for ``subject`` valid for ``lifetime``."""
        # NumericDate may be fractional, so exp stays exactly one lifetime after iat
        issued_at = self._clock()
        expires_at = issued_at + self.lifetime
        claims = {
            "iss": self.issuer,
            "iat": issued_at.timestamp(),
            "exp": expires_at.timestamp(),
            "sub": subject,
            "scope": build_scope(roles),
        }
        return jwt.encode(
            claims,
            self._private_key,
            algorithm=ALGORITHM,
            headers={"kid": self.key_id},
        )

    def validate(self, token: str) -> TokenClaims:
        """Verify ``token`` and return its claims.

        Raises:
            ExpiredToken: signature is valid but the token is at or past ``exp``
            InvalidToken: anything else is wrong with it
        """
        try:
            # Expiry is checked against our own clock below, so the same
            # clock drives issue and validate.
            payload = jwt.decode(
                token,
                self._public_key,
                algorithms=[ALGORITHM],
                issuer=self.issuer,
                options={
                    "require": ["iss", "iat", "exp", "sub"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as exc:
            raise InvalidToken(str(exc)) from exc

        expires_at = datetime.fromtimestamp(float(payload["exp"]), tz=UTC)
        if self._clock() >= expires_at:
            raise ExpiredToken("Token has expired")

        subject = payload["sub"]
        if not isinstance(subject, str) or not subject:
            raise InvalidToken("Token subject is missing")
        scope = payload.get("scope") or ""
        return TokenClaims(
            subject=subject,
            roles=frozenset(scope.split()),
            issued_at=datetime.fromtimestamp(float(payload["iat"]), tz=UTC),
            expires_at=expires_at,
        )

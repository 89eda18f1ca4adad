"""Bearer token issue and validation (HS512-signed JWT).

Claims: ``user_id`` (subject), ``name`` (display name), ``exp`` and ``iat``.
Validation failures of any kind surface as one generic ``Unauthenticated``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional

import jwt

from config import Settings
from services.errors import InvalidIdentity, Unauthenticated

logger = logging.getLogger(__name__)

ALGORITHM = "HS512"
REQUIRED_CLAIMS = ["exp", "user_id", "name"]
TOKEN_TTL = timedelta(hours=24)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def extract_subject(claims: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Subject of an already-verified claim set, or None when absent or mistyped."""
    if not claims:
        return None
    user_id = claims.get("user_id")
    if not isinstance(user_id, str) or not user_id:
        return None
    return user_id


@dataclass(frozen=True)
class TokenClaims:
    subject_id: str
    display_name: str
    expires_at: datetime

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> Optional["TokenClaims"]:
        subject_id = extract_subject(payload)
        if subject_id is None:
            return None
        name = payload.get("name")
        exp = payload.get("exp")
        if not isinstance(name, str) or not name:
            return None
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return None
        return cls(
            subject_id=subject_id,
            display_name=name,
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )


class TokenService:
    def __init__(self, settings: Settings, clock: Callable[[], datetime] = _now):
        self._secret = settings.jwt_secret
        self._clock = clock

    def issue(self, subject_id: str, display_name: str) -> str:
        if not subject_id or not display_name:
            raise InvalidIdentity()
        issued_at = self._clock()
        payload = {
            "name": display_name,
            "user_id": subject_id,
            "iat": issued_at,
            "exp": issued_at + TOKEN_TTL,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def validate(self, token: str) -> TokenClaims:
        if not token:
            raise Unauthenticated()
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.InvalidTokenError as exc:
            # ExpiredSignatureError is a subclass; the caller sees the same failure.
            logger.info("Rejected bearer token: %s", type(exc).__name__)
            raise Unauthenticated()

        claims = TokenClaims.from_payload(payload)
        if claims is None:
            logger.info("Rejected bearer token: malformed claims")
            raise Unauthenticated()
        return claims

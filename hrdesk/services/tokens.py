"""Signed, time-limited JWTs for sessions and one-off workflows."""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from hrdesk.config import Settings
from hrdesk.errors import TokenExpired, TokenInvalid
from hrdesk.models.user import UserRole

SESSION_TOKEN = "access"
PURPOSE_TOKEN = "purpose"


class Identity(BaseModel):
    """Who is calling, as decoded from a session token."""

    id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class TokenService:
    """Issues and verifies tokens. Built once from ``Settings``."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        session_ttl: timedelta = timedelta(hours=5),
        purpose_ttl: timedelta = timedelta(minutes=10),
    ):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.session_ttl = session_ttl
        self.purpose_ttl = purpose_ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            session_ttl=timedelta(minutes=settings.jwt_access_token_expire_minutes),
            purpose_ttl=timedelta(minutes=settings.reset_token_expire_minutes),
        )

    def _encode(self, claims: dict[str, Any], ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        to_encode = {**claims, "iat": now, "exp": now + ttl}
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def issue_session_token(self, identity_id: str, role: UserRole | str) -> str:
        role = UserRole(role)
        return self._encode({"id": str(identity_id), "role": role.value, "type": SESSION_TOKEN}, self.session_ttl)

    def issue_purpose_token(self, identity_id: str, purpose: str, ttl: Optional[timedelta] = None) -> str:
        claims = {"id": str(identity_id), "purpose": purpose, "type": PURPOSE_TOKEN}
        return self._encode(claims, ttl if ttl is not None else self.purpose_ttl)

    def verify(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise TokenExpired()
        except JWTError:
            raise TokenInvalid()

    def decode_session(self, token: str) -> Identity:
        payload = self.verify(token)
        if payload.get("type") != SESSION_TOKEN or not payload.get("id"):
            raise TokenInvalid()
        try:
            return Identity(id=payload["id"], role=payload.get("role"))
        except ValueError:
            raise TokenInvalid()

    def decode_purpose(self, token: str, purpose: str) -> str:
        """Return the identity id of a purpose token issued for ``purpose``."""
        payload = self.verify(token)
        if payload.get("type") != PURPOSE_TOKEN or payload.get("purpose") != purpose or not payload.get("id"):
            raise TokenInvalid()
        return payload["id"]

"""Shared dependencies: password hashing, bearer auth and role checks."""
from typing import Annotated, Optional

import bcrypt
from beanie import PydanticObjectId
from fastapi import Depends, Header, Request

from hrdesk.errors import Forbidden, NotFound, TokenInvalid, Unauthorized
from hrdesk.models.user import User, UserRole
from hrdesk.services.mailer import Mailer
from hrdesk.services.tokens import Identity, TokenService


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


Tokens = Annotated[TokenService, Depends(get_token_service)]
MailerDep = Annotated[Mailer, Depends(get_mailer)]


def bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        raise Unauthorized("Authorization header is missing")
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme != "Bearer" or not token:
        raise TokenInvalid("Invalid token format")
    return token


async def get_current_identity(
    request: Request,
    tokens: Tokens,
    authorization: Annotated[Optional[str], Header()] = None,
) -> Identity:
    identity = tokens.decode_session(bearer_token(authorization))
    request.state.identity = identity
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


async def get_current_user(identity: CurrentIdentity) -> User:
    user = await User.get(PydanticObjectId(identity.id))
    if not user:
        raise NotFound("User not found")
    return user


def require_roles(*allowed: UserRole):
    async def checker(identity: CurrentIdentity) -> Identity:
        if identity.role not in allowed:
            names = " or ".join(f"{role.value.title()}s" for role in allowed)
            raise Forbidden(f"You don't have permission to perform this action. {names} only.")
        return identity

    return checker


def ensure_self_or_admin(identity: Identity, user_id: PydanticObjectId, message: str) -> None:
    if not identity.is_admin and identity.id != str(user_id):
        raise Forbidden(message)


# Type aliases for route injection
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminOnly = Annotated[Identity, Depends(require_roles(UserRole.ADMIN))]
EmployeeOnly = Annotated[Identity, Depends(require_roles(UserRole.USER))]

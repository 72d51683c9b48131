"""JWT-based stateless authentication."""
import logging

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, EmailStr
from pymongo.errors import DuplicateKeyError

from hrdesk.api.deps import AdminOnly, CurrentUser, Tokens, get_password_hash, verify_password
from hrdesk.api.responses import ok
from hrdesk.errors import Conflict, Unauthorized
from hrdesk.models.user import User, UserCreate, user_out

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    email: EmailStr
    password: str


async def create_user(data: UserCreate) -> User:
    if await User.find_one(User.email == data.email):
        raise Conflict(f"Email {data.email} already exists")
    user = User(
        email=data.email,
        hashed_password=get_password_hash(data.password),
        role=data.role,
        first_name=data.first_name,
        last_name=data.last_name,
        profile_pic=data.profile_pic,
    )
    try:
        await user.insert()
    except DuplicateKeyError:
        raise Conflict(f"Email {data.email} already exists")
    return user


@router.post("/login")
async def login(req: LoginRequest, tokens: Tokens):
    user = await User.find_one(User.email == req.email)
    if not user or not verify_password(req.password, user.hashed_password):
        logger.info("Failed login for %s", req.email)
        raise Unauthorized("Wrong email or password!")
    access_token = tokens.issue_session_token(str(user.id), user.role)
    return ok(
        "Login successful",
        {"user": user_out(user), "access_token": access_token, "token_type": "bearer"},
    )


@router.post("/save-user", status_code=status.HTTP_201_CREATED)
async def save_user(data: UserCreate, admin: AdminOnly):
    """Create an employee or admin account (Admin only)."""
    user = await create_user(data)
    logger.info("Admin %s created user %s", admin.id, user.id)
    return ok("Signup successfully", user_out(user))


@router.get("/me")
async def me(user: CurrentUser):
    return ok("Profile fetched successfully", user_out(user))

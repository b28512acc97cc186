"""Auth API — registration, login and the current account.

Learn: Routes for account lifecycle:
- POST /auth/register → create an account, returns a token right away
- POST /auth/login    → email/password → token
- GET  /auth/me       → current account (any signed-in role)

POST /auth/** is PUBLIC in the route table; GET /auth/me falls through
to the default rule and needs a token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quizhub.auth.dependencies import get_current_account
from quizhub.auth.tokens import create_access_token
from quizhub.db.engine import get_db
from quizhub.db.models import Account
from quizhub.schemas.auth import AccountRead, AuthResponse, LoginRequest, RegisterRequest
from quizhub.services.account_service import AccountService

router = APIRouter(prefix="/auth")


def _auth_response(account: Account, message: str) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(account.email, account.role),
        id=account.id,
        email=account.email,
        name=account.name,
        role=account.role,
        message=message,
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create a new OWNER or TAKER account."""
    account = await AccountService(db).register(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    return _auth_response(account, "User registered successfully")


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    account = await AccountService(db).authenticate(body.email, body.password)
    return _auth_response(account, "User logged in successfully")


@router.get("/me", response_model=AccountRead)
async def get_me(account: Account = Depends(get_current_account)):
    return account

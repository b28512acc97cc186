"""Account service — registration, login and identity resolution.

Learn: Tokens carry the account's email (subject), not its database id.
resolve() turns a verified Identity back into the stored Account so
handlers can compare ids for ownership checks.
"""

import re

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quizhub.auth.identity import Identity, Role
from quizhub.auth.password import hash_password, verify_password
from quizhub.db.models import Account
from quizhub.errors import BadRequest, Conflict, ResourceNotFound, Unauthorized

logger = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@(.+)$")


def normalize_email(email: str) -> str:
    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise BadRequest("Invalid email format")
    return email


class AccountService:
    """Business logic for accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Account | None:
        result = await self.db.execute(select(Account).where(Account.email == email))
        return result.scalars().first()

    async def register(self, name: str, email: str, password: str, role: str) -> Account:
        email = normalize_email(email)
        name = name.strip()
        if not name:
            raise BadRequest("Name cannot be empty")
        try:
            parsed_role = Role.parse(role)
        except ValueError:
            raise BadRequest("Invalid role. Must be OWNER or TAKER")

        if await self.get_by_email(email):
            raise Conflict("Email already registered")

        account = Account(
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=parsed_role,
            is_active=True,
        )
        self.db.add(account)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await self.db.rollback()
            raise Conflict("Email already registered")

        logger.info("account.registered", account_id=account.id, role=parsed_role.value)
        return account

    async def authenticate(self, email: str, password: str) -> Account:
        """Check credentials. Inactive accounts can't log in."""
        email = normalize_email(email)
        account = await self.get_by_email(email)
        if not account or not verify_password(password, account.password_hash):
            logger.warning("account.login_failed", email=email)
            raise Unauthorized("Invalid email or password")

        if not account.is_active:
            logger.warning("account.login_inactive", account_id=account.id)
            raise Unauthorized("User account is inactive")

        logger.info("account.logged_in", account_id=account.id)
        return account

    async def resolve(self, identity: Identity) -> Account:
        """Load the account behind a verified identity."""
        account = await self.get_by_email(identity.subject)
        if not account:
            raise ResourceNotFound("User not found")
        return account

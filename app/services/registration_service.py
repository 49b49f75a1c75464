"""
Atomic registration of a person: one ``users`` row plus its role profile.

Both inserts run in a single transaction on one leased connection. Either the
identity and its profile become visible together at commit, or neither does.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from app.core.exceptions import DuplicateIdentityError, RegistrationError
from app.core.logger import logger
from app.core.security import get_password_hash
from app.core.utils import build_full_name, generate_username
from app.db.models import Doctor, Patient, User
from app.db.pool import ConnectionPool, Lease
from app.schemas.user import IdentityCreate

T = TypeVar("T")

ROLE_PROFILES: dict[str, type[SQLModel]] = {
    "doctor": Doctor,
    "patient": Patient,
}


@dataclass
class RegistrationResult:
    identity_id: int
    profile_id: int
    role: str
    full_name: str
    username: str
    email: str
    phone: Optional[str]


async def _run_to_completion(aw: Awaitable[T]) -> T:
    """Await ``aw`` even if the caller is cancelled meanwhile.

    Commit and rollback must finish on the connection before it goes back to
    the pool; a cancellation is re-raised once they have.
    """
    task = asyncio.ensure_future(aw)
    try:
        return await asyncio.shield(task)
    except asyncio.CancelledError:
        if not task.done():
            await asyncio.wait([task])
        raise


def _unique_violation_field(exc: IntegrityError) -> Optional[str]:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    text = str(orig).lower()
    if code != "23505" and "unique" not in text and "duplicate" not in text:
        return None
    for field in ("email", "username"):
        if field in text:
            return field
    return "identity"


class RegistrationService:
    def __init__(
        self,
        pool: ConnectionPool,
        default_password: str = "123456",
        bcrypt_rounds: int = 10,
        transaction_timeout: Optional[float] = 30.0,
    ):
        self.pool = pool
        self.default_password = default_password
        self.bcrypt_rounds = bcrypt_rounds
        self.transaction_timeout = transaction_timeout

    async def register(
        self,
        identity: IdentityCreate,
        role_fields: dict[str, Any],
        role: str,
    ) -> RegistrationResult:
        profile_model = ROLE_PROFILES.get(role)
        if profile_model is None:
            raise RegistrationError(f"Cannot register role '{role}'", role=role)

        full_name = build_full_name(identity.first_name, identity.last_name)
        user = User(
            username=generate_username(identity.email, role),
            password_hash=await asyncio.to_thread(
                get_password_hash, self.default_password, self.bcrypt_rounds
            ),
            email=identity.email,
            phone=identity.phone,
            user_type=role,
            full_name=full_name,
            date_of_birth=identity.date_of_birth,
            gender=identity.gender,
            address=identity.address,
            is_active=True,
        )

        # Connection failures propagate untouched: nothing has been written yet
        async with self.pool.lease() as lease:
            profile = await self._write_pair(lease, user, profile_model, role_fields)

        logger.info(
            f"Registered {role}: {full_name} (user_id={user.user_id})",
            extra={"role": role, "user_id": user.user_id, "full_name": full_name},
        )
        return RegistrationResult(
            identity_id=user.user_id,
            profile_id=getattr(profile, f"{role}_id"),
            role=role,
            full_name=full_name,
            username=user.username,
            email=user.email,
            phone=user.phone,
        )

    async def _write_pair(
        self,
        lease: Lease,
        user: User,
        profile_model: type[SQLModel],
        role_fields: dict[str, Any],
    ) -> SQLModel:
        # Plain copies: rollback expunges the pending instances
        role, full_name, email = user.user_type, user.full_name, user.email
        session = AsyncSession(bind=lease.connection, expire_on_commit=False)
        stage = "identity"
        committed = False

        async def stage_pair() -> SQLModel:
            nonlocal stage
            session.add(user)
            await session.flush()

            stage = "profile"
            profile = profile_model(user_id=user.user_id, **role_fields)
            session.add(profile)
            await session.flush()
            return profile

        async def commit() -> None:
            nonlocal committed
            await session.commit()
            committed = True

        try:
            # The timeout bounds the inserts; a started commit always runs to the end
            profile = await asyncio.wait_for(stage_pair(), self.transaction_timeout)
            stage = "commit"
            await _run_to_completion(commit())
            return profile
        except BaseException as exc:
            if committed:
                # Both rows are durable, only the caller went away
                raise
            try:
                await _run_to_completion(session.rollback())
            except Exception as rollback_exc:
                # Broken connection; the pool discards it on release
                logger.error(f"Rollback after failed {role} registration also failed: {rollback_exc}")
            if isinstance(exc, asyncio.TimeoutError):
                logger.error(
                    f"Registration of {role} '{full_name}' exceeded {self.transaction_timeout}s "
                    f"at {stage} step; rolled back",
                    extra={"role": role, "stage": stage, "email": email},
                )
                raise RegistrationError(
                    f"Could not register {role}", role=role, stage=stage, reason="timeout"
                ) from None
            if isinstance(exc, Exception):
                raise self._translate(exc, stage, role, full_name, email) from exc
            raise
        finally:
            await _run_to_completion(session.close())

    def _translate(
        self, exc: Exception, stage: str, role: str, full_name: str, email: str
    ) -> RegistrationError:
        statement = getattr(exc, "statement", None)
        driver_message = str(exc.orig) if isinstance(exc, DBAPIError) else str(exc)
        logger.error(
            f"Registration of {role} '{full_name}' failed at {stage} step; rolled back: {driver_message}",
            extra={"role": role, "stage": stage, "sql": statement, "email": email},
        )

        if stage == "identity" and isinstance(exc, IntegrityError):
            field = _unique_violation_field(exc)
            if field is not None:
                return DuplicateIdentityError(role=role, field=field, sql=statement)
        return RegistrationError(f"Could not register {role}", role=role, stage=stage, sql=statement)

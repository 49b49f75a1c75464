import pytest

from app.core.config import Settings
from app.core.exceptions import DatabaseConnectionError, PoolExhaustedError
from app.core.security import get_password_hash, verify_password
from app.core.utils import build_full_name, generate_username, like_pattern


def test_database_url_is_built_from_parts():
    settings = Settings(DB_HOST="db.internal", DB_USER="clinic", DB_PASSWORD="pw", DB_NAME="cc", DB_PORT=5433)
    assert settings.DATABASE_URL == "postgresql+asyncpg://clinic:pw@db.internal:5433/cc"


def test_explicit_database_url_wins():
    settings = Settings(DATABASE_URL="sqlite+aiosqlite:///./clinic.db")
    assert settings.DATABASE_URL == "sqlite+aiosqlite:///./clinic.db"


@pytest.mark.parametrize(
    "email,expected",
    [
        ("a.said@example.com", "a.said"),
        ("Mixed.Case@example.com", "Mixed.Case"),
    ],
)
def test_username_is_email_local_part(email, expected):
    assert generate_username(email, "doctor") == expected


def test_username_fallback_is_role_and_timestamp():
    username = generate_username("@example.com", "doctor")
    prefix, _, stamp = username.partition("_")
    assert prefix == "doctor"
    assert stamp.isdigit()


def test_full_name():
    assert build_full_name("Amal", "Said") == "Amal Said"


def test_like_pattern_escapes_wildcards():
    assert like_pattern("car") == "%car%"
    assert like_pattern("50%_off") == "%50\\%\\_off%"


def test_password_hash_round_trip():
    hashed = get_password_hash("123456", rounds=4)
    assert hashed != "123456"
    assert verify_password("123456", hashed)
    assert not verify_password("654321", hashed)
    assert not verify_password("123456", None)


def test_connection_errors_are_builtin_connection_errors():
    exc = PoolExhaustedError(reason="acquire timeout")
    assert isinstance(exc, DatabaseConnectionError)
    assert isinstance(exc, ConnectionError)
    assert exc.status_code == 500
    assert exc.to_dict() == {"success": False, "error": "The server is busy, please try again later"}

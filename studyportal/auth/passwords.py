from functools import lru_cache

from passlib.context import CryptContext

from studyportal.core import config


@lru_cache(maxsize=4)
def _context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def get_password_hash(password: str) -> str:
    return _context(config.BCRYPT_ROUNDS).hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    return _context(config.BCRYPT_ROUNDS).verify(plain_password, hashed_password)


def dummy_verify() -> None:
    # Spend the same time as a real check when the username is unknown.
    _context(config.BCRYPT_ROUNDS).dummy_verify()

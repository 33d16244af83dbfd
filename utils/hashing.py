import secrets
import string
from typing import Protocol
from passlib.context import CryptContext

bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')

RANDOM_ALPHABET = string.ascii_letters + string.digits


class PasswordHasher(Protocol):
    def hash(self, plain: str) -> str: ...

    def verify(self, plain: str, secret: str) -> bool: ...


class BcryptHasher:
    """Salted bcrypt hashing through passlib."""

    def hash(self, plain: str) -> str:
        return get_password_hash(plain)

    def verify(self, plain: str, secret: str) -> bool:
        return verify_password(plain, secret)


def get_password_hash(password: str):
    # Bcrypt has a 72-byte limit, truncate if necessary
    return bcrypt_context.hash(password[:72])


def verify_password(plain_password: str, hashed_password: str):
    # Bcrypt has a 72-byte limit, truncate if necessary
    return bcrypt_context.verify(plain_password[:72], hashed_password)


def generate_random_string(length: int) -> str:
    return "".join(secrets.choice(RANDOM_ALPHABET) for _ in range(length))

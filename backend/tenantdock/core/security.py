"""
Password hashing for tenant admin accounts.

Hashes are written into the tenant schema's `users` table at signup, so the
plaintext never reaches the tenant connection.
"""
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login attempt against a stored hash."""
    return pwd_context.verify(plain_password, hashed_password)

import secrets
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError

ph = PasswordHasher(time_cost=3, memory_cost=65536, parallelism=4)


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(stored_hash: str, password: str) -> bool:
    try:
        return ph.verify(stored_hash, password)
    except VerificationError:
        return False


def generate_token() -> str:
    return secrets.token_hex(32)

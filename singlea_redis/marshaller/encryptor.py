"""Fernet encryptor keyed by a caller-supplied secret."""

import base64
import os

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from singlea_redis.domain.errors import DecryptionError

SALT_SIZE = 16
# base64 от 16 байт соли всегда 24 символа
ENCODED_SALT_SIZE = 24
DEFAULT_ITERATIONS = 390_000


class FernetFeatureConfigEncryptor:
    """
    Encrypts marshalled configs with Fernet.

    Формат: urlsafe-base64(salt) + Fernet token, весь payload ASCII.
    Ключ выводится из secret через PBKDF2-HMAC-SHA256 с этой солью.
    """

    def __init__(self, iterations: int = DEFAULT_ITERATIONS) -> None:
        self.iterations = iterations

    def _fernet(self, secret: str, salt: bytes) -> Fernet:
        if not secret:
            raise ValueError("Secret must not be empty")

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=self.iterations,
        )
        key = kdf.derive(secret.encode("utf-8"))
        return Fernet(base64.urlsafe_b64encode(key))

    def encrypt(self, value: bytes, secret: str) -> bytes:
        salt = os.urandom(SALT_SIZE)
        return base64.urlsafe_b64encode(salt) + self._fernet(secret, salt).encrypt(value)

    def decrypt(self, value: bytes | str, secret: str) -> bytes:
        # Redis с decode_responses=True отдаёт str
        if isinstance(value, str):
            value = value.encode("ascii", errors="replace")

        if len(value) <= ENCODED_SALT_SIZE:
            raise DecryptionError("Encrypted payload is too short")

        try:
            salt = base64.urlsafe_b64decode(value[:ENCODED_SALT_SIZE])
        except ValueError as e:
            raise DecryptionError("Encrypted payload has a malformed salt") from e

        try:
            return self._fernet(secret, salt).decrypt(value[ENCODED_SALT_SIZE:])
        except InvalidToken as e:
            raise DecryptionError(
                "Cannot decrypt feature config: wrong secret or corrupted payload"
            ) from e

from cryptography.fernet import Fernet

from settings import settings

cipher_suite = Fernet(settings.token_encryption_key.encode())


class TokenCipher:
    """Encrypts provider OAuth tokens before they reach the database."""

    @staticmethod
    def encrypt(token: str) -> str:
        return cipher_suite.encrypt(token.encode()).decode()

    @staticmethod
    def decrypt(token: str) -> str:
        return cipher_suite.decrypt(token.encode()).decode()

    @classmethod
    def encrypt_optional(cls, token: str | None) -> str | None:
        return cls.encrypt(token) if token else None

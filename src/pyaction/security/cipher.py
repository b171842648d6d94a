"""
Reversible ciphers used for secure cookies.
"""

import base64
import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Dict

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

logger = logging.getLogger(__name__)


class CipherInterface(ABC):
    """Symmetric cipher keyed by a caller-supplied secret"""

    @abstractmethod
    def encrypt(self, plaintext: str, secret: str) -> str:
        ...

    @abstractmethod
    def decrypt(self, ciphertext: str, secret: str) -> str:
        ...


class SimpleCipher(CipherInterface):
    """
    Fernet (AES-128-CBC + HMAC-SHA256) with a key derived from the secret.

    The PBKDF2 salt is derived from the secret itself so any process that
    knows the secret can decrypt, and derived keys are cached per secret.
    An invalid or tampered token decrypts to an empty string.
    """

    def __init__(self, iterations: int = 100000):
        self.iterations = iterations
        self._keys: Dict[str, Fernet] = {}

    def _derive_key(self, secret: str) -> Fernet:
        """Derive encryption key from the secret."""
        fernet = self._keys.get(secret)
        if fernet is None:
            kdf = PBKDF2HMAC(
                algorithm=hashes.SHA256(),
                length=32,
                salt=hashlib.sha256(b"pyaction:" + secret.encode()).digest()[:16],
                iterations=self.iterations,
            )
            fernet = Fernet(base64.urlsafe_b64encode(kdf.derive(secret.encode())))
            self._keys[secret] = fernet
        return fernet

    def encrypt(self, plaintext: str, secret: str) -> str:
        return self._derive_key(secret).encrypt(str(plaintext).encode()).decode()

    def decrypt(self, ciphertext: str, secret: str) -> str:
        try:
            return self._derive_key(secret).decrypt(ciphertext.encode()).decode()
        except (InvalidToken, ValueError):
            logger.warning("Rejected undecryptable token")
            return ""


class Cipher:
    """Factory for the built-in ciphers"""

    @staticmethod
    def create_simple(iterations: int = 100000) -> CipherInterface:
        return SimpleCipher(iterations)


__all__ = ['CipherInterface', 'SimpleCipher', 'Cipher']

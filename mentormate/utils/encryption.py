# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import os
from typing import Optional
from sqlalchemy.types import TypeDecorator, Text
from cryptography.fernet import Fernet

_fernet: Optional[Fernet] = None


def configure_encryption(secret: str) -> None:
    """Installs the Fernet key used by encrypted columns. Called once at startup."""
    global _fernet
    try:
        _fernet = Fernet(secret)
    except Exception as e:
        raise ValueError("FERNET_SECRET is invalid. Make sure it is a valid 32-byte base64 string.") from e


def _get_fernet() -> Fernet:
    if _fernet is None:
        # 🔐 Scripts that skip create_app() still pick the key up from the environment
        secret = os.getenv("FERNET_SECRET")
        if not secret:
            raise EnvironmentError("FERNET_SECRET is missing. Please set it in your environment or .env file.")
        configure_encryption(secret)
    return _fernet


# 🔐 Encrypt/Decrypt helpers
def encrypt(text: str) -> str:
    return _get_fernet().encrypt(text.encode()).decode()

def decrypt(token: str) -> str:
    return _get_fernet().decrypt(token.encode()).decode()


# 🧩 Custom Encrypted DB Field
class EncryptedTypeHybrid(TypeDecorator):
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return encrypt(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return decrypt(value)
        return value

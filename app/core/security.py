# app/core/security.py
import base64
import hashlib
import hmac
import os
import re

_PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,}$")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def is_strong_password(password: str) -> bool:
    # минимум 8 символов, строчная, заглавная, цифра
    return bool(_PASSWORD_RE.match(password or ""))


def normalize_phone(phone: str) -> str:
    return "".join(ch for ch in (phone or "") if ch.isdigit())


def is_valid_phone(phone: str) -> bool:
    return 10 <= len(normalize_phone(phone)) <= 15


def hash_password(password: str) -> tuple[str, str]:
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, 200_000)
    return base64.b64encode(salt).decode("ascii"), base64.b64encode(dk).decode("ascii")


def verify_password(password: str, salt_b64: str, hash_b64: str) -> bool:
    try:
        salt = base64.b64decode(salt_b64.encode("ascii"))
        expected = base64.b64decode(hash_b64.encode("ascii"))
    except Exception:
        return False

    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, 200_000)
    return hmac.compare_digest(dk, expected)

# utils/hashing.py
from werkzeug.security import generate_password_hash, check_password_hash


def get_password_hash(password: str) -> str:
    return generate_password_hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, plain_password)


# Password policy used by change-password and recovery flows.
# Returns an error message or None when the password is acceptable.
def validate_password(password: str):
    if len(password) < 6:
        return "Password minimal 6 karakter"
    if not any(c.islower() for c in password):
        return "Password harus mengandung huruf kecil"
    if not any(c.isupper() for c in password):
        return "Password harus mengandung huruf besar"
    if not any(c.isdigit() for c in password):
        return "Password harus mengandung angka"
    return None

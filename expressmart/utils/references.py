# expressmart/utils/references.py
import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def generate_payment_reference(user_id) -> str:
    """express_<user_id>_<epoch ms>_<9 znaków base36>"""
    timestamp = int(time.time() * 1000)
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(9))
    return f"express_{user_id}_{timestamp}_{random_part}"

# flashfix/utils/validators.py

# เบอร์มือถือจีน 11 หลัก ขึ้นต้นด้วย 13-19 (ใช้กับ Field(pattern=...) ของ pydantic)
PHONE_PATTERN = r"^1[3-9][0-9]{9}$"
MIN_PASSWORD_LENGTH = 6


def require_text(value: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError("Field cannot be empty")
    return str(value).strip()

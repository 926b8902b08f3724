"""Utility functions for the GetTogether platform."""

import secrets
import time
import uuid
import qrcode
from io import BytesIO

BASE36_ALPHABET = '0123456789abcdefghijklmnopqrstuvwxyz'


def generate_unique_code(prefix='', length=8):
    """Generate a unique code with a given prefix."""
    unique_id = uuid.uuid4().hex[:length].upper()
    return f"{prefix}{unique_id}"


def to_base36(number: int) -> str:
    """Encode a non-negative integer in lowercase base36."""
    if number < 0:
        raise ValueError("base36 encoding requires a non-negative integer")
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return ''.join(reversed(digits))


def generate_ticket_number():
    """
    Generate a ticket number: TKT-<base36 ms timestamp>-<6 random base36 chars>.

    Example: TKT-LZ3K9Q1A-7G2M0X
    """
    timestamp = to_base36(int(time.time() * 1000))
    suffix = ''.join(secrets.choice(BASE36_ALPHABET) for _ in range(6))
    return f"TKT-{timestamp}-{suffix}".upper()


def generate_ticket_numbers(count):
    """Generate `count` distinct ticket numbers."""
    numbers = []
    while len(numbers) < count:
        number = generate_ticket_number()
        if number not in numbers:
            numbers.append(number)
    return numbers


def generate_qr_code_png(data, size=10):
    """Generate a QR code PNG for the given data and return its bytes."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=size,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()

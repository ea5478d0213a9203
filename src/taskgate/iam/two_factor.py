"""
TOTP two-factor authentication.
"""

from __future__ import annotations

import base64
import io

import pyotp
import qrcode


class TwoFactor:
    """TOTP provider using pyotp."""

    def __init__(self, issuer: str = "TodoApp", window: int = 2):
        self.issuer = issuer
        self.window = window

    def generate_secret(self) -> str:
        """Generate a new base32 TOTP secret."""
        return pyotp.random_base32()

    def provisioning_uri(self, secret: str, account_name: str) -> str:
        """Get the otpauth:// URI for authenticator apps."""
        return pyotp.TOTP(secret).provisioning_uri(
            name=f"{self.issuer}-{account_name}",
            issuer_name=self.issuer,
        )

    def qr_code_data_url(self, provisioning_uri: str) -> str:
        """Render a provisioning URI as a PNG ``data:`` URL."""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=4,
        )
        qr.add_data(provisioning_uri)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")

    def verify(self, secret: str, code: str) -> bool:
        """Verify a TOTP code, allowing ``window`` steps of clock drift."""
        if not secret or not code:
            return False
        return pyotp.TOTP(secret).verify(code, valid_window=self.window)

"""
Backend package: Flask JSON API of the TOTP demo.
Integrates with the totp_engine core through one shared Authenticator.
"""

from .app import create_app

__all__ = ['create_app']

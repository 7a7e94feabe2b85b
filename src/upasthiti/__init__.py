"""Upasthiti attendance package.

Organized by feature modules (users, access, tokens, attendance, fraud)
with a thin Flask controller layer over service/repository layers.
"""

__version__ = "0.1.0"

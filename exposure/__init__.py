"""
Exposure Events client - signed request core

Responsibilities:
- HMAC-SHA256 request signing (Authentication / Timestamp headers)
- Login exchange and in-memory key material
- Single re-authentication retry for calls made while logged out
- Normalizing upstream responses into Success / Failure outcomes
"""

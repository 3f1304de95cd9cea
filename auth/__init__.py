"""
Auth Module
Sage token 解析与捕获
"""
from .credentials import CredentialResolver, parse_cookie_token
from .interceptor import credential_trace_config

__all__ = [
    "CredentialResolver",
    "parse_cookie_token",
    "credential_trace_config",
]

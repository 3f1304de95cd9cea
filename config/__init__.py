"""
Configuration Management Module
统一配置管理
"""
from .settings import (
    Settings,
    SageSettings,
    CredentialSettings,
    GeneralSettings,
    get_settings,
    get_sage_settings,
    get_credential_settings,
)

__all__ = [
    "Settings",
    "SageSettings",
    "CredentialSettings",
    "GeneralSettings",
    "get_settings",
    "get_sage_settings",
    "get_credential_settings",
]

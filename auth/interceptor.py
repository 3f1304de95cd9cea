"""
Outbound request interception
把 aiohttp 会话的出站请求交给 CredentialResolver.observe
"""
from types import SimpleNamespace

import aiohttp

from .credentials import CredentialResolver


def credential_trace_config(resolver: CredentialResolver) -> aiohttp.TraceConfig:
    """
    创建一个 TraceConfig, 挂到任意 ClientSession 上即可自动捕获 token

    Usage:
        session = aiohttp.ClientSession(trace_configs=[credential_trace_config(resolver)])
    """

    async def on_request_start(
        session: aiohttp.ClientSession,
        trace_config_ctx: SimpleNamespace,
        params: aiohttp.TraceRequestStartParams,
    ) -> None:
        resolver.observe(str(params.url), params.headers)

    trace_config = aiohttp.TraceConfig()
    trace_config.on_request_start.append(on_request_start)
    return trace_config

"""
HTTP 传输

核心只依赖 Transport 协议；默认实现基于 httpx.AsyncClient，
不做重试，超时由 timeout 控制。
"""
import logging
import ssl
from typing import Optional, Protocol, Tuple, Union

import httpx

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def post(self, url: str, body: str) -> str:
        ...


class HttpxTransport:
    """httpx 传输实现，cert 为退款/企业付款所需的商户证书 (cert 文件, key 文件)"""

    def __init__(self, timeout: float = 30.0, cert: Optional[Tuple[str, str]] = None):
        self.timeout = timeout
        self.verify: Union[bool, ssl.SSLContext] = True
        if cert:
            context = ssl.create_default_context()
            context.load_cert_chain(certfile=cert[0], keyfile=cert[1])
            self.verify = context

    async def post(self, url: str, body: str) -> str:
        async with httpx.AsyncClient(timeout=self.timeout, verify=self.verify) as client:
            response = await client.post(
                url,
                content=body.encode('utf-8'),
                headers={'Content-Type': 'text/xml; charset=utf-8'}
            )
            response.raise_for_status()
            logger.debug(f"微信支付响应: url={url}, status={response.status_code}")
            return response.text

"""
Pytest configuration and shared fixtures.
"""
import base64
from decimal import Decimal
from typing import List, Tuple

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from wxpay.config import SignConfig
from wxpay.models.schemas import PayOrder, TransactionType
from wxpay.services.codec import map_to_xml
from wxpay.services.sign_utils import get_sign_content, get_signer

MD5_KEY = "192006250b4c09247ec02edce69f6a2d"


class FakeTransport:
    """记录请求并按顺序返回预设响应的传输"""

    def __init__(self, *responses: str):
        self.responses = list(responses)
        self.requests: List[Tuple[str, str]] = []

    async def post(self, url: str, body: str) -> str:
        self.requests.append((url, body))
        return self.responses.pop(0)


@pytest.fixture(scope="session")
def rsa_keys():
    """生成测试用 RSA 密钥对，返回 (私钥 Base64 DER, 公钥 Base64 DER, 私钥对象)"""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_der = key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_der = key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return base64.b64encode(private_der).decode(), base64.b64encode(public_der).decode(), key


@pytest.fixture
def md5_config():
    return SignConfig(
        appid="wx2421b1c4370ec43b",
        mch_id="10000100",
        key_private=MD5_KEY,
        sign_type="MD5",
        notify_url="https://example.com/callback/pay",
    )


@pytest.fixture
def hmac_config():
    return SignConfig(
        appid="wx2421b1c4370ec43b",
        mch_id="10000100",
        key_private=MD5_KEY,
        sign_type="HMAC-SHA256",
        notify_url="https://example.com/callback/pay",
    )


@pytest.fixture
def rsa_config(rsa_keys):
    private_key, public_key, _ = rsa_keys
    return SignConfig(
        appid="wx2421b1c4370ec43b",
        mch_id="10000100",
        key_private=private_key,
        key_public=public_key,
        sign_type="RSA",
        notify_url="https://example.com/callback/pay",
    )


@pytest.fixture
def transfer_config(rsa_keys):
    """MD5 签名 + 网关公钥（企业付款加密用）"""
    _, public_key, _ = rsa_keys
    return SignConfig(
        appid="wx2421b1c4370ec43b",
        mch_id="10000100",
        key_private=MD5_KEY,
        key_public=public_key,
        sign_type="MD5",
    )


@pytest.fixture
def native_order():
    return PayOrder(
        subject="Test",
        out_trade_no="ORDER1",
        price=Decimal("9.99"),
        transaction_type=TransactionType.NATIVE,
    )


@pytest.fixture
def sign_response():
    """用 MD5 密钥给模拟的网关响应签名并转成 XML"""
    def _sign(params, key=MD5_KEY, as_xml=True):
        params = dict(params)
        params["sign"] = get_signer("MD5").sign(get_sign_content(params), key)
        return map_to_xml(params) if as_xml else params
    return _sign


@pytest.fixture
def fake_transport():
    """返回 FakeTransport 构造函数"""
    return FakeTransport

"""
微信支付配置管理模块
从环境变量加载商户配置，生成只读的签名配置
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .services.sign_utils import get_signer

# 加载 .env 文件
load_dotenv()


@dataclass(frozen=True)
class SignConfig:
    """
    签名配置，客户端生命周期内只读，可在并发请求间共享

    key_private: MD5/HMAC-SHA256 时为商户 API 密钥，RSA 时为商户私钥
    key_public: 网关 RSA 公钥，用于 RSA 验签与企业付款字段加密
    """
    appid: str
    mch_id: str
    key_private: str
    sign_type: str = 'MD5'
    key_public: Optional[str] = None
    input_charset: str = 'utf-8'
    notify_url: Optional[str] = None
    return_url: Optional[str] = None
    sandbox: bool = False

    def __post_init__(self):
        get_signer(self.sign_type)
        if not self.key_private:
            raise ConfigurationError('商户密钥 key_private 未配置')
        if self.sign_type == 'RSA' and not self.key_public:
            raise ConfigurationError('RSA 签名需要配置 key_public 用于验签')

    @property
    def verify_key(self) -> str:
        """验签使用的密钥：RSA 用公钥，其余用商户密钥"""
        if self.sign_type == 'RSA':
            return self.key_public
        return self.key_private


class Settings:
    """应用配置类"""

    # 商户配置
    WX_APPID: str = os.getenv("WX_APPID", "")
    WX_MCH_ID: str = os.getenv("WX_MCH_ID", "")
    WX_KEY_PRIVATE: str = os.getenv("WX_KEY_PRIVATE", "")
    WX_KEY_PUBLIC: str = os.getenv("WX_KEY_PUBLIC", "")
    WX_SIGN_TYPE: str = os.getenv("WX_SIGN_TYPE", "MD5")
    WX_INPUT_CHARSET: str = os.getenv("WX_INPUT_CHARSET", "utf-8")
    WX_SANDBOX: bool = os.getenv("WX_SANDBOX", "false").lower() == "true"

    # 回调地址
    WX_NOTIFY_URL: str = os.getenv("WX_NOTIFY_URL", "http://localhost:8000/callback/pay")
    WX_RETURN_URL: str = os.getenv("WX_RETURN_URL", "")

    # 网络配置
    WX_HTTP_TIMEOUT: float = float(os.getenv("WX_HTTP_TIMEOUT", "30"))
    # 商户证书，退款与企业付款接口需要双向证书
    WX_CERT_FILE: str = os.getenv("WX_CERT_FILE", "")
    WX_CERT_KEY_FILE: str = os.getenv("WX_CERT_KEY_FILE", "")

    # 应用配置
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("APP_PORT", "8000"))
    APP_DEBUG: bool = os.getenv("APP_DEBUG", "false").lower() == "true"

    def validate(self) -> list[str]:
        """验证必要配置是否已设置"""
        errors = []
        if not self.WX_APPID:
            errors.append("WX_APPID 未配置")
        if not self.WX_MCH_ID:
            errors.append("WX_MCH_ID 未配置")
        if not self.WX_KEY_PRIVATE:
            errors.append("WX_KEY_PRIVATE 未配置")
        if self.WX_SIGN_TYPE == "RSA" and not self.WX_KEY_PUBLIC:
            errors.append("WX_SIGN_TYPE=RSA 时 WX_KEY_PUBLIC 必须配置")
        return errors

    def sign_config(self) -> SignConfig:
        """根据环境变量生成签名配置，配置错误时抛出 ConfigurationError"""
        return SignConfig(
            appid=self.WX_APPID,
            mch_id=self.WX_MCH_ID,
            key_private=self.WX_KEY_PRIVATE,
            sign_type=self.WX_SIGN_TYPE,
            key_public=self.WX_KEY_PUBLIC or None,
            input_charset=self.WX_INPUT_CHARSET,
            notify_url=self.WX_NOTIFY_URL or None,
            return_url=self.WX_RETURN_URL or None,
            sandbox=self.WX_SANDBOX,
        )


settings = Settings()

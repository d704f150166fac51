"""
微信支付网关异常定义

所有异常共用 WxPayError，kind 字段区分类别，调用方既可以按 kind 匹配，
也可以按子类捕获。网关返回的 code/message 原样保留，便于审计。
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """异常类别"""
    CONFIGURATION = "configuration"                 # 配置错误（签名算法、密钥）
    VALIDATION = "validation"                       # 本地参数校验失败
    UNSUPPORTED_OPERATION = "unsupported_operation"  # 入口不支持该交易类型
    GATEWAY_BUSINESS = "gateway_business"           # 网关返回失败状态


class WxPayError(Exception):
    """微信支付异常基类"""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, code: Optional[str] = None, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        self.code = code
        self.message = message

    def __str__(self) -> str:
        if self.code:
            return f'[{self.code}] {self.message}'
        return self.message

    def __repr__(self) -> str:
        return f'{type(self).__name__}(kind={self.kind.value!r}, code={self.code!r}, message={self.message!r})'


class ConfigurationError(WxPayError):
    """签名算法不存在、密钥缺失等配置错误"""
    kind = ErrorKind.CONFIGURATION


class ValidationError(WxPayError):
    """请求参数不合法，在任何网络交互之前抛出"""
    kind = ErrorKind.VALIDATION


class UnsupportedOperationError(WxPayError):
    """交易类型不能通过当前入口调用"""
    kind = ErrorKind.UNSUPPORTED_OPERATION


class GatewayBusinessError(WxPayError):
    """网关返回的业务失败，code/message 为网关原值"""
    kind = ErrorKind.GATEWAY_BUSINESS

    def __init__(self, code: Optional[str], message: Optional[str]):
        super().__init__(message or '', code=code)

"""
微信支付数据模型
使用 Pydantic 定义订单、查询参数与验签结果
"""
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TransactionType(str, Enum):
    """交易类型"""
    NATIVE = "NATIVE"                   # 扫码支付
    JSAPI = "JSAPI"                     # 公众号/小程序支付
    APP = "APP"                         # APP 支付
    MICROPAY = "MICROPAY"               # 刷卡支付
    MWEB = "MWEB"                       # H5 支付
    QUERY = "QUERY"                     # 查询订单
    CLOSE = "CLOSE"                     # 关闭订单
    REFUND = "REFUND"                   # 申请退款
    REFUNDQUERY = "REFUNDQUERY"         # 查询退款
    DOWNLOADBILL = "DOWNLOADBILL"       # 下载对账单
    TRANSFER = "TRANSFER"               # 企业付款到银行卡
    TRANSFER_QUERY = "TRANSFER_QUERY"   # 查询企业付款


class PayOrder(BaseModel):
    """支付订单"""
    model_config = ConfigDict(frozen=True)

    subject: str                              # 商品描述，对应 body
    out_trade_no: str                         # 商户订单号
    price: Decimal = Field(ge=0)              # 金额（元）
    transaction_type: TransactionType
    body: Optional[str] = None                # 附加数据，对应 attach
    spbill_create_ip: Optional[str] = None    # 终端IP
    openid: Optional[str] = None              # JSAPI 用户标识
    auth_code: Optional[str] = None           # 刷卡支付授权码
    product_id: Optional[str] = None          # 扫码支付商品ID


class RefundOrder(BaseModel):
    """退款订单，trade_no 与 out_trade_no 二选一"""
    model_config = ConfigDict(frozen=True)

    refund_no: str                            # 商户退款单号
    refund_amount: Decimal = Field(ge=0)      # 退款金额（元）
    total_amount: Decimal = Field(ge=0)       # 订单总金额（元）
    trade_no: Optional[str] = None            # 微信订单号
    out_trade_no: Optional[str] = None        # 商户订单号


class TransferOrder(BaseModel):
    """企业付款到银行卡"""
    model_config = ConfigDict(frozen=True)

    out_no: str                               # 商户付款单号
    payee_account: str                        # 收款方银行卡号（加密传输）
    payee_name: str                           # 收款方用户名（加密传输）
    bank_code: str                            # 收款方开户行
    amount: Decimal = Field(ge=0)             # 付款金额（元）
    remark: Optional[str] = None              # 付款说明


class ByTransactionId(BaseModel):
    """按微信订单号查询"""
    model_config = ConfigDict(frozen=True)

    transaction_id: str


class ByExternalOrderId(BaseModel):
    """按商户订单号查询"""
    model_config = ConfigDict(frozen=True)

    out_trade_no: str


class ByBillingDate(BaseModel):
    """按账单日期下载对账单"""
    model_config = ConfigDict(frozen=True)

    bill_date: date
    bill_type: str = "ALL"


Lookup = Union[ByTransactionId, ByExternalOrderId, ByBillingDate]


class VerificationState(str, Enum):
    """验签状态"""
    UNVERIFIED = "unverified"
    VERIFIED = "verified"
    REJECTED = "rejected"


class VerificationReason(str, Enum):
    """验签结论原因"""
    VERIFIED = "verified"
    GATEWAY_FAILURE = "gateway-reported failure"
    MISSING_SIGNATURE = "missing signature"
    SIGNATURE_MISMATCH = "signature mismatch"
    SOURCE_CHECK_FAILED = "source check failed"


class VerificationResult(BaseModel):
    """验签结果"""
    model_config = ConfigDict(frozen=True)

    verified: bool
    reason: VerificationReason

    @property
    def state(self) -> VerificationState:
        return VerificationState.VERIFIED if self.verified else VerificationState.REJECTED

    @classmethod
    def accept(cls) -> "VerificationResult":
        return cls(verified=True, reason=VerificationReason.VERIFIED)

    @classmethod
    def reject(cls, reason: VerificationReason) -> "VerificationResult":
        return cls(verified=False, reason=reason)


# ==================== API 请求模型 ====================

class CreateOrderRequest(BaseModel):
    """创建支付订单请求"""
    subject: str                              # 商品描述
    price: Decimal = Field(ge=0)              # 金额（元）
    out_trade_no: str                         # 商户订单号
    transaction_type: TransactionType = TransactionType.NATIVE
    body: Optional[str] = None
    spbill_create_ip: Optional[str] = None
    openid: Optional[str] = None
    auth_code: Optional[str] = None


class RefundRequest(BaseModel):
    """退款请求"""
    refund_no: str
    refund_amount: Decimal = Field(ge=0)
    total_amount: Decimal = Field(ge=0)
    trade_no: Optional[str] = None
    out_trade_no: Optional[str] = None

"""
通用查询接口分发

查询订单、关闭订单、查询退款、下载对账单、查询企业付款共用一个入口，
查询条件用 ByTransactionId / ByExternalOrderId / ByBillingDate 明确区分。
"""
from dataclasses import dataclass
from typing import Any, Mapping

from ..exceptions import UnsupportedOperationError, ValidationError
from ..models.schemas import ByBillingDate, ByExternalOrderId, ByTransactionId, Lookup, TransactionType
from .request_builder import RequestBuilder
from .transaction_types import get_spec, get_url

BILL_DATE_FORMAT = '%Y%m%d'


@dataclass(frozen=True)
class PreparedRequest:
    """待发送的已签名请求"""
    transaction_type: TransactionType
    url: str
    params: Mapping[str, Any]


class SecondaryInterfaceDispatcher:
    """通用查询接口分发器"""

    def __init__(self, builder: RequestBuilder, sandbox: bool = False):
        self.builder = builder
        self.sandbox = sandbox

    def prepare(self, transaction_type: TransactionType, lookup: Lookup) -> PreparedRequest:
        spec = get_spec(transaction_type)
        if not spec.lookup:
            raise UnsupportedOperationError(
                f'交易类型 {TransactionType(transaction_type).value} 不支持通过通用查询接口调用'
            )

        parameters = self.builder.public_parameters(with_appid=spec.with_appid)
        if spec.by_date:
            if not isinstance(lookup, ByBillingDate):
                raise ValidationError('下载对账单必须按账单日期查询 (ByBillingDate)')
            parameters['bill_type'] = lookup.bill_type
            # 账单日期按东八区自然日，调用方传入的 date 即为该日
            parameters['bill_date'] = lookup.bill_date.strftime(BILL_DATE_FORMAT)
        else:
            transaction_field, out_trade_field = spec.id_fields
            if isinstance(lookup, ByTransactionId) and lookup.transaction_id:
                parameters[transaction_field] = lookup.transaction_id
            elif isinstance(lookup, ByExternalOrderId) and lookup.out_trade_no:
                parameters[out_trade_field] = lookup.out_trade_no
            else:
                raise ValidationError('必须提供非空的微信订单号或商户订单号')

        return PreparedRequest(
            transaction_type=TransactionType(transaction_type),
            url=get_url(transaction_type, self.sandbox),
            params=self.builder.sign_lookup(parameters),
        )

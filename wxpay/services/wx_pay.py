"""
微信支付服务客户端
串联参数构造、签名、传输与验签
"""
import logging
from datetime import date
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Union

from ..config import SignConfig, settings
from ..exceptions import UnsupportedOperationError, ValidationError
from ..models.schemas import (
    ByBillingDate,
    Lookup,
    PayOrder,
    RefundOrder,
    TransactionType,
    TransferOrder,
    VerificationResult,
)
from .amount import to_major_units
from .codec import is_xml, map_to_xml, xml_to_map
from .dispatcher import SecondaryInterfaceDispatcher
from .qr import render_qr_png
from .request_builder import RequestBuilder
from .transaction_types import get_url
from .transport import HttpxTransport, Transport
from .verifier import (
    RESULT_CODE,
    RETURN_CODE,
    RETURN_MSG,
    SUCCESS,
    ResponseVerifier,
    SourceCheck,
    always_pass,
    raise_for_status,
)

logger = logging.getLogger(__name__)


class WxPayClient:
    """微信支付客户端（异步版本）"""

    def __init__(self, config: SignConfig, transport: Optional[Transport] = None,
                 source_check: SourceCheck = always_pass):
        self.config = config
        self.builder = RequestBuilder(config)
        self.verifier = ResponseVerifier(config, source_check)
        self.dispatcher = SecondaryInterfaceDispatcher(self.builder, config.sandbox)
        self.transport = transport or HttpxTransport(timeout=settings.WX_HTTP_TIMEOUT)

    async def _post(self, url: str, params: Mapping[str, Any]) -> str:
        request_xml = map_to_xml(params)
        logger.debug(f"requestXML: {request_xml}")
        return await self.transport.post(url, request_xml)

    async def _call_api(self, url: str, params: Mapping[str, Any]) -> Dict[str, str]:
        """发送请求并解析 XML 响应"""
        return xml_to_map(await self._post(url, params))

    # ==================== 支付接口 ====================

    async def unified_order(self, order: PayOrder) -> Dict[str, str]:
        """统一下单，return_code 不为 SUCCESS 时抛出 GatewayBusinessError"""
        params = self.builder.build_payment(order)
        result = await self._call_api(get_url(order.transaction_type, self.config.sandbox), params)
        raise_for_status(result)
        logger.info(
            f"统一下单完成: out_trade_no={order.out_trade_no}, "
            f"金额={to_major_units(params['total_fee'])}元, result_code={result.get(RESULT_CODE)}"
        )
        return result

    async def order_info(self, order: PayOrder) -> Dict[str, Any]:
        """
        返回创建的订单信息

        扫码、刷卡、H5 支付直接返回下单结果；JSAPI、APP 返回客户端调起支付所需的签名参数。
        """
        result = await self.unified_order(order)
        if order.transaction_type in (TransactionType.NATIVE, TransactionType.MICROPAY, TransactionType.MWEB):
            return result
        # 业务失败时没有 prepay_id，不能生成调起参数
        raise_for_status(result, RESULT_CODE)
        return self.builder.build_client_params(order.transaction_type, result)

    async def micro_pay(self, order: PayOrder) -> Dict[str, Any]:
        """刷卡支付，POS 主动扫码付款"""
        if order.transaction_type != TransactionType.MICROPAY:
            raise ValidationError('刷卡支付订单的交易类型必须为 MICROPAY')
        return await self.order_info(order)

    async def gen_qr_pay(self, order: PayOrder) -> bytes:
        """扫码支付：下单并将 code_url 渲染为二维码 PNG"""
        if order.transaction_type != TransactionType.NATIVE:
            raise ValidationError('生成支付二维码只支持 NATIVE 交易类型')
        info = await self.order_info(order)
        raise_for_status(info, RESULT_CODE)
        return render_qr_png(info['code_url'])

    def build_request(self, order_info: Mapping[str, Any]) -> str:
        """H5 支付：生成跳转到微信支付中间页的脚本"""
        raise_for_status(order_info)
        if order_info.get('trade_type') != TransactionType.MWEB.value:
            raise UnsupportedOperationError(f"交易类型 {order_info.get('trade_type')} 不支持生成跳转脚本")
        params = self.builder.build_client_params(TransactionType.MWEB, order_info)
        return f'<script type="text/javascript">location.href="{params["mweb_url"]}"</script>'

    # ==================== 查询接口 ====================

    async def secondary_interface(self, transaction_type: TransactionType, lookup: Lookup) -> Dict[str, Any]:
        """通用查询入口，返回网关原值"""
        prepared = self.dispatcher.prepare(transaction_type, lookup)
        text = await self._post(prepared.url, prepared.params)
        if prepared.transaction_type == TransactionType.DOWNLOADBILL and not is_xml(text):
            # 对账单成功时直接返回文本
            return {RETURN_CODE: SUCCESS, RETURN_MSG: 'ok', 'data': text}
        return xml_to_map(text)

    async def query(self, lookup: Lookup) -> Dict[str, Any]:
        """查询订单"""
        return await self.secondary_interface(TransactionType.QUERY, lookup)

    async def close(self, lookup: Lookup) -> Dict[str, Any]:
        """关闭订单"""
        return await self.secondary_interface(TransactionType.CLOSE, lookup)

    async def refund_query(self, lookup: Lookup) -> Dict[str, Any]:
        """查询退款"""
        return await self.secondary_interface(TransactionType.REFUNDQUERY, lookup)

    async def download_bill(self, bill_date: date, bill_type: str = 'ALL') -> Dict[str, Any]:
        """下载对账单，目前只支持日账单"""
        return await self.secondary_interface(
            TransactionType.DOWNLOADBILL, ByBillingDate(bill_date=bill_date, bill_type=bill_type)
        )

    async def transfer_query(self, lookup: Lookup) -> Dict[str, Any]:
        """查询企业付款"""
        return await self.secondary_interface(TransactionType.TRANSFER_QUERY, lookup)

    # ==================== 退款 / 企业付款 ====================

    async def refund(self, refund_order: RefundOrder) -> Dict[str, str]:
        """申请退款"""
        params = self.builder.build_refund(refund_order)
        logger.info(f"申请退款: out_refund_no={params['out_refund_no']}, 退款金额={to_major_units(params['refund_fee'])}元")
        return await self._call_api(get_url(TransactionType.REFUND, self.config.sandbox), params)

    async def transfer(self, order: TransferOrder) -> Dict[str, str]:
        """企业付款到银行卡"""
        params = self.builder.build_transfer(order)
        return await self._call_api(get_url(TransactionType.TRANSFER, self.config.sandbox), params)

    # ==================== 回调 ====================

    def parse_callback(self, body: Union[str, bytes]) -> Dict[str, str]:
        """将回调报文转为参数字典"""
        if isinstance(body, bytes):
            try:
                body = body.decode(self.config.input_charset)
            except UnicodeDecodeError as e:
                raise ValidationError(f"回调报文不是合法的 {self.config.input_charset} 编码") from e
        return xml_to_map(body)

    def verify(self, params: Mapping[str, Any]) -> VerificationResult:
        """回调验签"""
        return self.verifier.verify(params)

    @staticmethod
    def pay_out_message(code: str, message: str) -> str:
        """返回给微信的应答报文"""
        return map_to_xml({RETURN_CODE: code.upper(), RETURN_MSG: message})

    @classmethod
    def success_pay_out_message(cls) -> str:
        return cls.pay_out_message(SUCCESS, 'OK')


@lru_cache(maxsize=1)
def get_wx_pay_client() -> WxPayClient:
    """按环境变量配置创建全局客户端"""
    cert = None
    if settings.WX_CERT_FILE and settings.WX_CERT_KEY_FILE:
        cert = (settings.WX_CERT_FILE, settings.WX_CERT_KEY_FILE)
    transport = HttpxTransport(timeout=settings.WX_HTTP_TIMEOUT, cert=cert)
    return WxPayClient(settings.sign_config(), transport=transport)

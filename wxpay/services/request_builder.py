"""
请求参数构造

将支付、退款、企业付款、查询请求组装成已签名的参数集。
每次调用都新建参数字典并生成新的 nonce_str，可并发调用。
"""
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping

from ..config import SignConfig
from ..exceptions import ConfigurationError, ValidationError
from ..models.schemas import PayOrder, RefundOrder, TransactionType, TransferOrder
from .amount import to_minor_units
from .sign_utils import (
    DEFAULT_EXCLUDE,
    LOOKUP_EXCLUDE,
    SIGN,
    encrypt_field,
    get_sign_content,
    get_signer,
    random_str,
)
from .transaction_types import CLIENT_STEPS, PAYMENT_TYPES, get_spec

logger = logging.getLogger(__name__)

SPBILL_CREATE_IP_DEFAULT = '192.168.1.1'


class RequestBuilder:
    """签名请求构造器"""

    def __init__(self, config: SignConfig):
        self.config = config
        self.signer = get_signer(config.sign_type)

    @staticmethod
    def new_nonce() -> str:
        return random_str()

    def public_parameters(self, with_appid: bool = True) -> Dict[str, Any]:
        """获取公共参数"""
        parameters: Dict[str, Any] = {}
        if with_appid:
            parameters['appid'] = self.config.appid
        parameters['mch_id'] = self.config.mch_id
        parameters['nonce_str'] = self.new_nonce()
        return parameters

    def create_sign(self, content: str) -> str:
        """对待签名串签名"""
        return self.signer.sign(content, self.config.key_private, self.config.input_charset)

    def sign(self, parameters: Dict[str, Any], exclude_keys: Iterable[str] = DEFAULT_EXCLUDE,
             sign_field: str = SIGN) -> Mapping[str, Any]:
        """生成签名并写入参数，返回只读参数集"""
        parameters = dict(parameters)
        parameters[sign_field] = self.create_sign(get_sign_content(parameters, exclude_keys))
        return MappingProxyType(parameters)

    def sign_lookup(self, parameters: Dict[str, Any]) -> Mapping[str, Any]:
        """查询类接口签名：带 sign_type"""
        parameters = dict(parameters)
        parameters['sign_type'] = self.config.sign_type
        return self.sign(parameters, LOOKUP_EXCLUDE)

    # ==================== 支付 ====================

    def build_payment(self, order: PayOrder) -> Mapping[str, Any]:
        """统一下单 / 刷卡支付参数"""
        if order.transaction_type not in PAYMENT_TYPES:
            raise ValidationError(f'交易类型 {order.transaction_type.value} 不是支付类型')
        if order.transaction_type == TransactionType.MICROPAY and not order.auth_code:
            raise ValidationError('刷卡支付必须提供 auth_code')

        parameters = self.public_parameters()
        parameters['body'] = order.subject
        parameters['out_trade_no'] = order.out_trade_no
        parameters['spbill_create_ip'] = order.spbill_create_ip or SPBILL_CREATE_IP_DEFAULT
        parameters['total_fee'] = to_minor_units(order.price)
        parameters['attach'] = order.body
        parameters['notify_url'] = self.config.notify_url
        parameters['trade_type'] = order.transaction_type.value

        parameters = get_spec(order.transaction_type).contribute(order, parameters)
        return self.sign(parameters)

    def build_client_params(self, transaction_type: TransactionType,
                            result: Mapping[str, Any]) -> Dict[str, Any]:
        """统一下单成功后，构造客户端调起支付的参数（第二次签名）"""
        step = CLIENT_STEPS.get(transaction_type)
        if step is None:
            return dict(result)
        params = step.build(self.config, result)
        if step.sign_field:
            params[step.sign_field] = self.create_sign(get_sign_content(params, step.exclude_keys))
        return params

    # ==================== 退款 ====================

    def build_refund(self, refund_order: RefundOrder) -> Mapping[str, Any]:
        """申请退款参数，trade_no 与 out_trade_no 必须且只能提供一个"""
        has_trade_no = bool(refund_order.trade_no)
        has_out_trade_no = bool(refund_order.out_trade_no)
        if has_trade_no == has_out_trade_no:
            raise ValidationError('退款订单必须且只能提供 trade_no 或 out_trade_no 其中之一')

        parameters = self.public_parameters()
        if has_trade_no:
            parameters['transaction_id'] = refund_order.trade_no
        else:
            parameters['out_trade_no'] = refund_order.out_trade_no
        parameters['out_refund_no'] = refund_order.refund_no
        parameters['total_fee'] = to_minor_units(refund_order.total_amount)
        parameters['refund_fee'] = to_minor_units(refund_order.refund_amount)
        parameters['op_user_id'] = self.config.mch_id
        return self.sign_lookup(parameters)

    # ==================== 企业付款 ====================

    def encrypt(self, content: str) -> str:
        """敏感字段公钥加密"""
        if not self.config.key_public:
            raise ConfigurationError('企业付款需要配置 key_public 用于加密收款方信息')
        return encrypt_field(content, self.config.key_public, self.config.input_charset)

    def build_transfer(self, order: TransferOrder) -> Mapping[str, Any]:
        """企业付款到银行卡参数"""
        parameters = self.public_parameters(with_appid=get_spec(TransactionType.TRANSFER).with_appid)
        parameters['partner_trade_no'] = order.out_no
        parameters['enc_bank_no'] = self.encrypt(order.payee_account)
        parameters['enc_true_name'] = self.encrypt(order.payee_name)
        parameters['bank_code'] = order.bank_code
        parameters['amount'] = to_minor_units(order.amount)
        if order.remark:
            parameters['desc'] = order.remark
        logger.debug(f"企业付款参数已构造: partner_trade_no={order.out_no}")
        return self.sign(parameters)

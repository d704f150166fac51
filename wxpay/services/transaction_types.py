"""
微信支付交易类型目录

每种交易类型对应一个接口路径和一个字段补充函数。补充函数是纯函数，
接收订单与已有参数，返回新的参数字典。JSAPI/APP/MWEB 在统一下单之后
还有一个独立的客户端调起步骤，登记在 CLIENT_STEPS 中。
"""
import time
import urllib.parse
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Tuple

from ..config import SignConfig
from ..models.schemas import PayOrder, TransactionType
from .sign_utils import APP_EXCLUDE, JSAPI_EXCLUDE

URI = 'https://api.mch.weixin.qq.com/'
SANDBOXNEW = 'sandboxnew/'

Contribution = Callable[[PayOrder, Dict[str, Any]], Dict[str, Any]]


def _no_contribution(order: PayOrder, params: Dict[str, Any]) -> Dict[str, Any]:
    return dict(params)


def _native(order: PayOrder, params: Dict[str, Any]) -> Dict[str, Any]:
    params = dict(params)
    params['product_id'] = order.product_id or order.out_trade_no
    return params


def _jsapi(order: PayOrder, params: Dict[str, Any]) -> Dict[str, Any]:
    params = dict(params)
    if order.openid:
        params['openid'] = order.openid
    return params


def _micropay(order: PayOrder, params: Dict[str, Any]) -> Dict[str, Any]:
    # 刷卡支付没有异步通知，也不传 trade_type
    params = {k: v for k, v in params.items() if k not in ('notify_url', 'trade_type')}
    params['auth_code'] = order.auth_code
    return params


@dataclass(frozen=True)
class TransactionSpec:
    """交易类型描述"""
    method: str                                   # 接口路径
    contribute: Contribution = _no_contribution
    lookup: bool = False                          # 是否可走通用查询入口
    id_fields: Tuple[str, str] = ('transaction_id', 'out_trade_no')
    with_appid: bool = True                       # 公共参数是否包含 appid
    by_date: bool = False                         # 按日期查询（对账单）


CATALOG: Dict[TransactionType, TransactionSpec] = {
    TransactionType.NATIVE: TransactionSpec('pay/unifiedorder', _native),
    TransactionType.JSAPI: TransactionSpec('pay/unifiedorder', _jsapi),
    TransactionType.APP: TransactionSpec('pay/unifiedorder'),
    TransactionType.MWEB: TransactionSpec('pay/unifiedorder'),
    TransactionType.MICROPAY: TransactionSpec('pay/micropay', _micropay),
    TransactionType.QUERY: TransactionSpec('pay/orderquery', lookup=True),
    TransactionType.CLOSE: TransactionSpec('pay/closeorder', lookup=True),
    TransactionType.REFUND: TransactionSpec('secapi/pay/refund'),
    TransactionType.REFUNDQUERY: TransactionSpec('pay/refundquery', lookup=True),
    TransactionType.DOWNLOADBILL: TransactionSpec('pay/downloadbill', lookup=True, by_date=True),
    TransactionType.TRANSFER: TransactionSpec('mmpaysptrans/pay_bank', with_appid=False),
    TransactionType.TRANSFER_QUERY: TransactionSpec(
        'mmpaysptrans/query_bank',
        lookup=True,
        id_fields=('partner_trade_no', 'partner_trade_no'),
        with_appid=False,
    ),
}

PAYMENT_TYPES: FrozenSet[TransactionType] = frozenset({
    TransactionType.NATIVE,
    TransactionType.JSAPI,
    TransactionType.APP,
    TransactionType.MWEB,
    TransactionType.MICROPAY,
})


def get_spec(transaction_type: TransactionType) -> TransactionSpec:
    return CATALOG[TransactionType(transaction_type)]


def get_url(transaction_type: TransactionType, sandbox: bool = False) -> str:
    """根据交易类型获取请求地址"""
    return URI + (SANDBOXNEW if sandbox else '') + get_spec(transaction_type).method


# ==================== 客户端调起步骤 ====================

def _timestamp() -> str:
    # 必须为字符串，否则客户端提示找不到 timeStamp
    return str(int(time.time()))


def _jsapi_client(config: SignConfig, result: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        'appId': config.appid,
        'timeStamp': _timestamp(),
        'nonceStr': result.get('nonce_str'),
        'package': f"prepay_id={result.get('prepay_id')}",
        'signType': config.sign_type,
    }


def _app_client(config: SignConfig, result: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        'appid': config.appid,
        'partnerid': config.mch_id,
        'prepayid': result.get('prepay_id'),
        'package': 'Sign=WXPay',
        'noncestr': result.get('nonce_str'),
        'timestamp': _timestamp(),
    }


def _mweb_client(config: SignConfig, result: Mapping[str, Any]) -> Dict[str, Any]:
    url = result.get('mweb_url') or ''
    if config.return_url:
        url += '&redirect_url=' + urllib.parse.quote_plus(config.return_url)
    return {'mweb_url': url}


@dataclass(frozen=True)
class ClientStep:
    """统一下单后的客户端调起参数构造"""
    build: Callable[[SignConfig, Mapping[str, Any]], Dict[str, Any]]
    sign_field: Optional[str] = None              # 为空表示该步骤不签名
    exclude_keys: FrozenSet[str] = frozenset()


CLIENT_STEPS: Dict[TransactionType, ClientStep] = {
    TransactionType.JSAPI: ClientStep(_jsapi_client, 'paySign', JSAPI_EXCLUDE),
    TransactionType.APP: ClientStep(_app_client, 'sign', APP_EXCLUDE),
    TransactionType.MWEB: ClientStep(_mweb_client),
}

"""
网关响应 / 回调验签

校验顺序：return_code → sign 是否存在 → 签名比对 → 来源二次校验，
任一步失败立即返回 REJECTED，不抛异常。
"""
import logging
from typing import Any, Callable, Mapping, Optional

from ..config import SignConfig
from ..exceptions import GatewayBusinessError
from ..models.schemas import VerificationReason, VerificationResult
from .sign_utils import DEFAULT_EXCLUDE, SIGN, get_signer

logger = logging.getLogger(__name__)

SUCCESS = 'SUCCESS'
RETURN_CODE = 'return_code'
RETURN_MSG = 'return_msg'
RESULT_CODE = 'result_code'
ERR_CODE = 'err_code'
ERR_CODE_DES = 'err_code_des'

SourceCheck = Callable[[Optional[str]], bool]


def always_pass(out_trade_no: Optional[str]) -> bool:
    """默认不做来源二次校验"""
    return True


class ResponseVerifier:
    """响应验签器"""

    def __init__(self, config: SignConfig, source_check: SourceCheck = always_pass):
        self.config = config
        self.signer = get_signer(config.sign_type)
        self.source_check = source_check

    def signature_matches(self, params: Mapping[str, Any], sign: str) -> bool:
        return self.signer.verify(
            params, sign, self.config.verify_key, self.config.input_charset, DEFAULT_EXCLUDE
        )

    def verify(self, params: Mapping[str, Any]) -> VerificationResult:
        if params.get(RETURN_CODE) != SUCCESS:
            logger.debug(f"微信支付异常：return_code={params.get(RETURN_CODE)}, return_msg={params.get(RETURN_MSG)}")
            return VerificationResult.reject(VerificationReason.GATEWAY_FAILURE)

        sign = params.get(SIGN)
        if not sign:
            logger.debug(f"微信支付异常：签名为空！out_trade_no={params.get('out_trade_no')}")
            return VerificationResult.reject(VerificationReason.MISSING_SIGNATURE)

        try:
            matched = self.signature_matches(params, sign)
        except Exception as e:
            logger.error(f"验签异常: {e}")
            matched = False
        if not matched:
            logger.warning(f"微信支付验签失败: out_trade_no={params.get('out_trade_no')}")
            return VerificationResult.reject(VerificationReason.SIGNATURE_MISMATCH)

        try:
            source_ok = self.source_check(params.get('out_trade_no'))
        except Exception as e:
            logger.error(f"来源校验异常: {e}")
            source_ok = False
        if not source_ok:
            logger.warning(f"微信支付来源校验失败: out_trade_no={params.get('out_trade_no')}")
            return VerificationResult.reject(VerificationReason.SOURCE_CHECK_FAILED)

        return VerificationResult.accept()


def raise_for_status(result: Mapping[str, Any], code_field: str = RETURN_CODE) -> Mapping[str, Any]:
    """网关状态字段不为 SUCCESS 时抛出 GatewayBusinessError，code/message 原样保留"""
    if result.get(code_field) == SUCCESS:
        return result
    if code_field == RESULT_CODE:
        raise GatewayBusinessError(result.get(ERR_CODE) or result.get(RESULT_CODE),
                                   result.get(ERR_CODE_DES) or result.get(RETURN_MSG))
    raise GatewayBusinessError(result.get(RETURN_CODE), result.get(RETURN_MSG))

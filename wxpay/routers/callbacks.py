"""
回调处理路由
接收微信支付结果通知，验签后应答 XML
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ..exceptions import WxPayError
from ..services.wx_pay import WxPayClient, get_wx_pay_client

router = APIRouter(prefix="/callback", tags=["回调处理"])
logger = logging.getLogger(__name__)

XML_MEDIA_TYPE = "application/xml"


@router.post("/pay")
async def pay_callback(request: Request, client: WxPayClient = Depends(get_wx_pay_client)):
    """
    支付结果回调
    无论验签结果如何都返回格式正确的 XML 应答，失败时 return_code=FAIL
    """
    body = await request.body()
    try:
        params = client.parse_callback(body)
    except WxPayError as e:
        logger.warning(f"支付回调报文解析失败: {e}")
        return Response(client.pay_out_message("FAIL", "报文格式错误"), media_type=XML_MEDIA_TYPE)

    out_trade_no = params.get("out_trade_no")
    logger.info(f"收到支付回调: out_trade_no={out_trade_no}, result_code={params.get('result_code')}")

    result = client.verify(params)
    if not result.verified:
        logger.warning(f"支付回调验签失败: out_trade_no={out_trade_no}, reason={result.reason.value}")
        return Response(client.pay_out_message("FAIL", result.reason.value), media_type=XML_MEDIA_TYPE)

    logger.info(f"支付回调验签成功: out_trade_no={out_trade_no}, transaction_id={params.get('transaction_id')}")
    return Response(client.success_pay_out_message(), media_type=XML_MEDIA_TYPE)


@router.get("/test")
async def test_callback():
    """测试回调接口是否可访问"""
    return {"status": "ok", "message": "回调接口正常"}

"""
订单接口路由
下单、二维码、查询、关闭、退款，不在本地保存订单
"""
import logging
from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response

from ..models.schemas import (
    ByExternalOrderId,
    ByTransactionId,
    CreateOrderRequest,
    PayOrder,
    RefundOrder,
    RefundRequest,
    TransactionType,
)
from ..services.wx_pay import WxPayClient, get_wx_pay_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["订单"])


def _to_pay_order(request: CreateOrderRequest) -> PayOrder:
    return PayOrder(
        subject=request.subject,
        out_trade_no=request.out_trade_no,
        price=request.price,
        transaction_type=request.transaction_type,
        body=request.body,
        spbill_create_ip=request.spbill_create_ip,
        openid=request.openid,
        auth_code=request.auth_code,
    )


def _lookup(out_trade_no: str, transaction_id: str = None):
    if transaction_id:
        return ByTransactionId(transaction_id=transaction_id)
    return ByExternalOrderId(out_trade_no=out_trade_no)


@router.post("/")
async def create_order(request: CreateOrderRequest, client: WxPayClient = Depends(get_wx_pay_client)):
    """下单，JSAPI/APP 返回客户端调起参数"""
    return await client.order_info(_to_pay_order(request))


@router.post("/qrcode")
async def create_qr_order(request: CreateOrderRequest, client: WxPayClient = Depends(get_wx_pay_client)):
    """扫码支付，返回二维码 PNG"""
    order = _to_pay_order(request.model_copy(update={"transaction_type": TransactionType.NATIVE}))
    image = await client.gen_qr_pay(order)
    return Response(content=image, media_type="image/png")


@router.post("/mweb", response_class=HTMLResponse)
async def create_mweb_order(request: CreateOrderRequest, client: WxPayClient = Depends(get_wx_pay_client)):
    """H5 支付，返回跳转脚本"""
    order = _to_pay_order(request.model_copy(update={"transaction_type": TransactionType.MWEB}))
    info = await client.order_info(order)
    return HTMLResponse(client.build_request(info))


@router.get("/{out_trade_no}")
async def query_order(out_trade_no: str, transaction_id: str = None,
                      client: WxPayClient = Depends(get_wx_pay_client)):
    """查询订单"""
    result = await client.query(_lookup(out_trade_no, transaction_id))
    logger.info(f"查询订单结果: out_trade_no={out_trade_no}, trade_state={result.get('trade_state')}")
    return result


@router.post("/{out_trade_no}/close")
async def close_order(out_trade_no: str, client: WxPayClient = Depends(get_wx_pay_client)):
    """关闭订单"""
    return await client.close(ByExternalOrderId(out_trade_no=out_trade_no))


@router.post("/refund")
async def refund_order(request: RefundRequest, client: WxPayClient = Depends(get_wx_pay_client)):
    """申请退款"""
    refund_order = RefundOrder(
        refund_no=request.refund_no,
        refund_amount=request.refund_amount,
        total_amount=request.total_amount,
        trade_no=request.trade_no,
        out_trade_no=request.out_trade_no,
    )
    return await client.refund(refund_order)


@router.get("/refund/{out_trade_no}")
async def query_refund(out_trade_no: str, transaction_id: str = None,
                       client: WxPayClient = Depends(get_wx_pay_client)):
    """查询退款"""
    return await client.refund_query(_lookup(out_trade_no, transaction_id))


@router.get("/bill/{bill_date}")
async def download_bill(bill_date: date, bill_type: str = "ALL",
                        client: WxPayClient = Depends(get_wx_pay_client)):
    """下载对账单"""
    return await client.download_bill(bill_date, bill_type)

"""
微信支付网关 - FastAPI 应用入口
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .exceptions import ErrorKind, WxPayError
from .routers import orders_router, callbacks_router

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# 创建 FastAPI 应用
app = FastAPI(
    title="WxPay Gateway",
    description="微信支付签名与交易分发服务",
    version="1.0.0"
)

# 注册路由
app.include_router(orders_router)
app.include_router(callbacks_router)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNSUPPORTED_OPERATION: 400,
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.GATEWAY_BUSINESS: 502,
}


@app.exception_handler(WxPayError)
async def wx_pay_error_handler(request: Request, exc: WxPayError):
    """按异常类别映射 HTTP 状态码，网关 code/message 原样返回"""
    if exc.kind == ErrorKind.CONFIGURATION:
        logger.error(f"配置错误: {exc}")
    return JSONResponse(
        status_code=STATUS_BY_KIND.get(exc.kind, 500),
        content={"kind": exc.kind.value, "code": exc.code, "message": exc.message},
    )


@app.get("/health")
async def health_check():
    """健康检查"""
    errors = settings.validate()
    return {
        "status": "ok" if not errors else "warning",
        "config_errors": errors,
        "sandbox": settings.WX_SANDBOX
    }


@app.on_event("startup")
async def startup_event():
    """应用启动事件"""
    errors = settings.validate()
    if errors:
        logger.warning(f"配置警告: {errors}")
    else:
        logger.info("WxPay Gateway 启动成功")
        logger.info(f"签名类型: {settings.WX_SIGN_TYPE}, 沙箱: {settings.WX_SANDBOX}")
        logger.info(f"回调地址: {settings.WX_NOTIFY_URL}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "wxpay.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.APP_DEBUG
    )

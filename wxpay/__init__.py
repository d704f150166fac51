"""
微信支付网关签名与交易分发
"""
__version__ = "1.0.0"

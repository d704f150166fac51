"""
微信支付服务层
"""

"""
金额换算：元 ↔ 分

全部使用 Decimal 运算，避免浮点误差导致的一分钱偏差。
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

MINOR_UNIT_RATIO = Decimal(100)

Amount = Union[Decimal, int, float, str]


def _to_decimal(amount: Amount) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    # float 先转字符串，保留字面值
    return Decimal(str(amount))


def to_minor_units(amount: Amount) -> int:
    """元转分，四舍五入（远离零）到整数分"""
    value = _to_decimal(amount)
    if value < 0:
        raise ArithmeticError(f'金额不能为负数: {amount}')
    return int((value * MINOR_UNIT_RATIO).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def to_major_units(minor: Union[int, str]) -> Decimal:
    """分转元，保留两位小数"""
    return (Decimal(int(minor)) / MINOR_UNIT_RATIO).quantize(Decimal('0.01'))

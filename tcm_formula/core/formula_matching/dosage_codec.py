"""
剂量字符串编解码
"麻黄:9 桂枝:6" <-> {"麻黄": 9.0, "桂枝": 6.0}
"""

import re
from decimal import Decimal
from typing import Dict, Mapping, Optional

from .herb_parser import split_tokens

# 药名 + 可选分隔符(: = ：) + 数字
DOSAGE_CHUNK_PATTERN = re.compile(r'^([\u4e00-\u9fa5]+)[:=：]?([0-9]+(?:\.[0-9]+)?)$')


def decode_dosage_string(text: Optional[str]) -> Dict[str, float]:
    """解析剂量字符串，格式不符的片段跳过"""
    result: Dict[str, float] = {}
    for chunk in split_tokens(text):
        match = DOSAGE_CHUNK_PATTERN.match(chunk)
        if match:
            result[match.group(1)] = float(match.group(2))
    return result


def _format_amount(amount: float) -> str:
    # 定点表示，避免科学计数法；整数不带小数点
    number = float(amount)
    if number == 0:
        return "0"
    return format(Decimal(repr(number)).normalize(), 'f')


def encode_dosage_string(dosage: Optional[Mapping[str, float]]) -> str:
    """剂量字典转为 "药名:剂量" 空格分隔的字符串"""
    if not dosage:
        return ''
    return ' '.join(f"{name}:{_format_amount(amount)}" for name, amount in dosage.items())

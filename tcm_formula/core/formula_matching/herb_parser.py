#!/usr/bin/env python3
"""
药物输入解析器
将用户自由输入的药物清单解析为结构化的药物条目

支持的分隔符：空格、逗号（全角/半角）、顿号、换行、制表符、句号、分号
支持的剂量写法："麻黄9g"、"麻黄9"、"大枣12枚"、"麻黄"（未注明剂量）
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Union

from .aliases import resolve_herb_alias
from .models import HerbEntry

logger = logging.getLogger(__name__)

DEFAULT_UNIT = "g"

# 分隔符统一替换为空格
DELIMITER_PATTERN = re.compile(r'[，,、\n\r\t。；;]')

# 药名(汉字) + 可选剂量(数字) + 可选单位(字母/汉字)
HERB_TOKEN_PATTERN = re.compile(
    r'^(?P<name>[\u4e00-\u9fa5]+)'
    r'(?P<amount>[0-9]*\.?[0-9]+)?'
    r'(?P<unit>[a-zA-Z\u4e00-\u9fa5]+)?$'
)


@dataclass(frozen=True)
class TokenMatch:
    """单个词元的匹配结果"""
    name: str
    amount: Optional[float] = None
    unit: Optional[str] = None


class _Unmatched:
    """不符合"药名+剂量+单位"格式的词元"""

    def __repr__(self) -> str:
        return "UNMATCHED"


UNMATCHED = _Unmatched()

TokenResult = Union[TokenMatch, _Unmatched]


def split_tokens(raw_text: Optional[str]) -> List[str]:
    """分隔符归一后按空白切分"""
    if not raw_text:
        return []
    normalized = DELIMITER_PATTERN.sub(' ', raw_text).strip()
    return [token for token in normalized.split() if token]


def match_token(token: str) -> TokenResult:
    """匹配单个词元"""
    match = HERB_TOKEN_PATTERN.match(token)
    if not match:
        return UNMATCHED
    amount = match.group('amount')
    return TokenMatch(
        name=match.group('name'),
        amount=float(amount) if amount is not None else None,
        unit=match.group('unit'),
    )


def parse_formula_input(raw_text: Optional[str]) -> List[HerbEntry]:
    """
    解析用户输入的药物清单

    Args:
        raw_text: 原始输入，如 "麻黄9g，桂枝6g、杏仁9g 甘草3g"

    Returns:
        List[HerbEntry]: 按输入顺序排列的药物条目，重复药物不去重
    """
    herbs: List[HerbEntry] = []

    for token in split_tokens(raw_text):
        result = match_token(token)
        if result is UNMATCHED:
            logger.debug(f"忽略无法识别的输入: {token}")
            continue

        herbs.append(HerbEntry(
            name=resolve_herb_alias(result.name),
            dosage=result.amount if result.amount is not None else 0.0,
            unit=result.unit or DEFAULT_UNIT,
            original_text=token,
        ))

    return herbs


def format_herbs_to_lines(herb_names: List[str], per_line: int = 4) -> List[List[str]]:
    """按四味一行排列药名，用于收藏夹展示"""
    return [herb_names[i:i + per_line] for i in range(0, len(herb_names), per_line)]


def format_herb_entries(herbs: List[HerbEntry], separator: str = '，') -> str:
    """药物条目转为文本，如 "麻黄9g，桂枝6g，甘草" """
    parts = []
    for herb in herbs:
        if herb.dosage > 0:
            parts.append(f"{herb.name}{herb.dosage:g}{herb.unit}")
        else:
            parts.append(herb.name)
    return separator.join(parts)

"""
方剂数据构建
管理端表单、AI返回的JSON -> StandardFormula
"""

import re
import uuid
from typing import Any, Dict, List, Mapping, Optional, Union

from tcm_formula.core.formula_matching.aliases import resolve_book_alias, resolve_herb_alias
from tcm_formula.core.formula_matching.dosage_codec import decode_dosage_string
from tcm_formula.core.formula_matching.models import StandardFormula

CUSTOM_SOURCE = '自定义'

_COMPOSITION_DELIMITERS = re.compile(r'[，、,]')


def split_composition(composition: Union[str, List[str], None]) -> List[str]:
    """组成文本或列表切分为药名列表，药名归一；其他格式返回空列表"""
    if not composition:
        return []
    if isinstance(composition, str):
        names = _COMPOSITION_DELIMITERS.sub(' ', composition).split()
    elif isinstance(composition, (list, tuple)):
        names = [str(name).strip() for name in composition if name is not None]
    else:
        # AI返回的组成格式不符
        return []
    return [resolve_herb_alias(name) for name in names if name]


def normalize_standard_dosage(
    standard_dosage: Union[str, Mapping[str, Any], None]
) -> Optional[Dict[str, float]]:
    """剂量可以是 "麻黄:9 桂枝:6" 字符串或字典；空值或其他格式返回 None"""
    if not standard_dosage:
        return None
    if isinstance(standard_dosage, str):
        decoded = decode_dosage_string(standard_dosage)
    elif isinstance(standard_dosage, Mapping):
        decoded = {}
        for name, amount in standard_dosage.items():
            try:
                decoded[str(name).strip()] = float(amount)
            except (TypeError, ValueError):
                continue
    else:
        return None
    normalized = {resolve_herb_alias(name): amount for name, amount in decoded.items()}
    return normalized or None


def build_formula_from_form(
    name: str,
    composition: Union[str, List[str]],
    source: str = "",
    standard_dosage: Union[str, Mapping[str, Any], None] = None,
    usage: str = "",
    effect: str = "",
    indications: str = "",
    analysis: str = "",
    formula_id: Optional[str] = None,
    pinyin: str = "",
    category: str = "",
) -> StandardFormula:
    """
    管理端录入的方剂

    Raises:
        ValueError: 名称或组成为空
    """
    herbs = split_composition(composition)
    if not name or not name.strip() or not herbs:
        raise ValueError("方剂名称和组成不能为空")

    return StandardFormula(
        id=formula_id or f"custom-{uuid.uuid4().hex[:12]}",
        name=name.strip(),
        source=resolve_book_alias(source) if source and source.strip() else CUSTOM_SOURCE,
        composition=tuple(herbs),
        standard_dosage=normalize_standard_dosage(standard_dosage),
        usage=usage or "",
        effect=effect or "",
        indications=indications or "",
        analysis=analysis or "",
        pinyin=pinyin or "",
        category=category or "",
    )


def formula_from_payload(
    payload: Mapping[str, Any],
    formula_id: str,
    is_ai_generated: bool = True,
) -> Optional[StandardFormula]:
    """AI返回的方剂JSON转为 StandardFormula，缺少名称或组成时返回 None"""
    name = str(payload.get("name") or "").strip()
    herbs = split_composition(payload.get("composition"))
    if not name or not herbs:
        return None

    return StandardFormula(
        id=formula_id,
        name=name,
        source=resolve_book_alias(payload.get("source")),
        composition=tuple(herbs),
        standard_dosage=normalize_standard_dosage(
            payload.get("standardDosage", payload.get("standard_dosage"))
        ),
        usage=str(payload.get("usage") or ""),
        effect=str(payload.get("effect") or ""),
        indications=str(payload.get("indications") or ""),
        analysis=str(payload.get("analysis") or ""),
        is_ai_generated=is_ai_generated,
        pinyin=str(payload.get("pinyin") or ""),
        category=str(payload.get("category") or ""),
    )

#!/usr/bin/env python3
"""
方剂匹配数据模型
药物条目、标准方剂、匹配结果
"""

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Dict, List, Optional, Any, Tuple


class MatchType(str, Enum):
    """匹配关系类型"""
    EXACT = "exact"                    # 药味完全相同
    VARIANT = "variant"                # 加减变化
    SUBSET = "subset"                  # 原方完整包含于输入中
    RATIO_MISMATCH = "ratio-mismatch"  # 药味相同、剂量比例不同


@dataclass(frozen=True)
class HerbEntry:
    """用户输入解析出的单味药"""
    name: str
    dosage: float = 0.0  # 0 表示未注明剂量
    unit: str = "g"
    original_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class StandardFormula:
    """标准方剂"""
    id: str
    name: str
    source: str
    composition: Tuple[str, ...]
    # 仅用于剂量比例比较；不参与哈希
    standard_dosage: Optional[Dict[str, float]] = field(default=None, hash=False, compare=True)
    usage: str = ""
    effect: str = ""        # 功效
    indications: str = ""   # 主治
    analysis: str = ""      # 方解
    is_ai_generated: bool = False
    pinyin: str = ""
    category: str = ""      # 如：解表剂

    def __post_init__(self):
        object.__setattr__(self, "composition", tuple(self.composition))
        # 复制剂量表，调用方持有的字典不影响快照
        if self.standard_dosage is not None:
            object.__setattr__(self, "standard_dosage", dict(self.standard_dosage))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["composition"] = list(self.composition)
        data["standard_dosage"] = dict(self.standard_dosage) if self.standard_dosage else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StandardFormula":
        """从字典构建方剂，兼容 camelCase 字段名（standardDosage / isAiGenerated）"""
        standard_dosage = data.get("standard_dosage", data.get("standardDosage"))
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            source=data.get("source", ""),
            composition=tuple(data.get("composition") or ()),
            standard_dosage={k: float(v) for k, v in standard_dosage.items()} if standard_dosage else None,
            usage=data.get("usage", "") or "",
            effect=data.get("effect", "") or "",
            indications=data.get("indications", "") or "",
            analysis=data.get("analysis", "") or "",
            is_ai_generated=bool(data.get("is_ai_generated", data.get("isAiGenerated", False))),
            pinyin=data.get("pinyin", "") or "",
            category=data.get("category", "") or "",
        )


@dataclass(frozen=True)
class DosageAnalysis:
    """剂量比例分析"""
    similarity: float
    details: str


@dataclass
class MatchResult:
    """输入药物与单个标准方剂的比较结果"""
    formula: StandardFormula
    score: float
    match_type: MatchType
    missing_herbs: List[str]
    additional_herbs: List[HerbEntry]
    input_herbs: List[HerbEntry]
    dosage_analysis: Optional[DosageAnalysis] = None
    is_combined: bool = False
    combined_with: Optional[str] = None

    def mark_combined(self, other_formula_name: str) -> None:
        """标记合方，只允许设置一次"""
        if self.is_combined:
            raise ValueError(f"{self.formula.name} 已标记为与 {self.combined_with} 合方")
        self.is_combined = True
        self.combined_with = other_formula_name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "formula": self.formula.to_dict(),
            "score": self.score,
            "match_type": self.match_type.value,
            "missing_herbs": list(self.missing_herbs),
            "additional_herbs": [h.to_dict() for h in self.additional_herbs],
            "input_herbs": [h.to_dict() for h in self.input_herbs],
            "dosage_analysis": asdict(self.dosage_analysis) if self.dosage_analysis else None,
            "is_combined": self.is_combined,
            "combined_with": self.combined_with,
        }


@dataclass
class HerbDetail:
    """药物详情（药效、炮制等）"""
    effect: str = ""
    paozhi: str = ""
    pinyin: str = ""
    category: str = ""
    origin: str = ""
    taste: str = ""              # 性味
    meridians: str = ""          # 归经
    actions: str = ""            # 主治
    usage_dosage: str = ""
    contraindications: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HerbDetail":
        known = {f for f in cls.__dataclass_fields__}
        return cls(**{k: str(v) for k, v in data.items() if k in known and v is not None})

#!/usr/bin/env python3
"""
方剂检索服务
本地方剂库排序 + AI联网识别的混合检索

流程：
1. 解析输入 -> 在方剂库快照上排序
2. 没有完全吻合的方剂时，请求AI识别一首方剂
3. AI识别结果与本地结果合并（同名方剂不重复）
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from tcm_formula.core.ai_analysis.formula_ai_service import FormulaAIService
from tcm_formula.core.formula_database.formula_repository import (
    FormulaNotFoundError,
    FormulaRepository,
    FormulaSnapshot,
)

from .formula_matcher import MatchThresholds, compare_formula_with_input
from .herb_parser import parse_formula_input
from .match_ranker import find_matches, has_perfect_match, merge_match
from .models import HerbEntry, MatchResult, StandardFormula

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    """一次检索的结果"""
    herbs: List[HerbEntry]
    matches: List[MatchResult]
    snapshot_version: int
    ai_formula: Optional[StandardFormula] = None
    low_confidence_score: float = 0.5
    ai_searched: bool = False

    @property
    def has_perfect_match(self) -> bool:
        return has_perfect_match(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "herbs": [h.to_dict() for h in self.herbs],
            "matches": [m.to_dict() for m in self.matches],
            "has_perfect_match": self.has_perfect_match,
            "low_confidence_count": sum(1 for m in self.matches if m.score < self.low_confidence_score),
            "ai_searched": self.ai_searched,
            "ai_formula": self.ai_formula.to_dict() if self.ai_formula else None,
            "snapshot_version": self.snapshot_version,
        }


class FormulaSearchService:
    """方剂检索服务"""

    def __init__(
        self,
        repository: FormulaRepository,
        ai_service: Optional[FormulaAIService] = None,
        thresholds: Optional[MatchThresholds] = None,
    ):
        self.repository = repository
        self.ai_service = ai_service
        self.thresholds = thresholds or MatchThresholds.from_settings()

    def _require_formula(self, snapshot: FormulaSnapshot, formula_id: str) -> StandardFormula:
        formula = snapshot.get(formula_id)
        if formula is None:
            raise FormulaNotFoundError(f"方剂不存在: {formula_id}")
        return formula

    async def search(self, raw_text: str, use_ai: bool = True) -> SearchOutcome:
        """
        检索输入药物对应的方剂

        Args:
            raw_text: 用户输入
            use_ai: 本地无完全吻合结果时是否请求AI识别

        Returns:
            SearchOutcome: AI调用失败不影响本地结果
        """
        herbs = parse_formula_input(raw_text)
        snapshot = self.repository.snapshot()
        matches = find_matches(herbs, snapshot, self.thresholds)

        outcome = SearchOutcome(
            herbs=herbs,
            matches=matches,
            snapshot_version=snapshot.version,
            low_confidence_score=self.thresholds.low_confidence_score,
        )
        logger.info(f"🔍 检索: {len(herbs)}味药, 本地命中{len(matches)}首 (快照v{snapshot.version})")

        if not herbs or outcome.has_perfect_match:
            return outcome
        if not use_ai or self.ai_service is None or not self.ai_service.available:
            return outcome

        outcome.ai_searched = True
        try:
            ai_formula = await self.ai_service.identify_formula(herbs)
        except Exception as e:
            logger.error(f"❌ AI识别失败，仅返回本地结果: {e}")
            return outcome
        if ai_formula is None:
            return outcome

        outcome.ai_formula = ai_formula
        ai_match = compare_formula_with_input(herbs, ai_formula, self.thresholds)
        outcome.matches = merge_match(matches, ai_match)
        return outcome

    def compare(self, raw_text: str, formula_id: str) -> Optional[MatchResult]:
        """与指定方剂单独比较；方剂不存在时抛出 FormulaNotFoundError"""
        formula = self._require_formula(self.repository.snapshot(), formula_id)
        return compare_formula_with_input(parse_formula_input(raw_text), formula, self.thresholds)

    async def analyze(self, raw_text: str, formula_id: str) -> Dict[str, Any]:
        """
        AI分析用户方相对指定方剂的加减变化

        Raises:
            FormulaNotFoundError: 方剂不存在
            ValueError: 输入与该方剂无关联
        """
        if self.ai_service is None:
            raise ValueError("AI服务未启用")

        herbs = parse_formula_input(raw_text)
        snapshot = self.repository.snapshot()
        formula = self._require_formula(snapshot, formula_id)
        # 合方标记来自全库排序
        ranked = find_matches(herbs, snapshot, self.thresholds)
        match = next((m for m in ranked if m.formula.id == formula_id), None)
        if match is None:
            match = compare_formula_with_input(herbs, formula, self.thresholds)
        if match is None:
            raise ValueError(f"输入药物与{formula.name}无关联")

        analysis = await self.ai_service.generate_formula_analysis(herbs, match)
        return {"match": match.to_dict(), "analysis": analysis}

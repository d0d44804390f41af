#!/usr/bin/env python3
"""
方剂排序与合方检测

1. 输入药物与方剂库逐一比对，按评分降序排列
2. 对排名第一的结果，用其剩余药物（加味部分）再检索一次方剂库，
   若剩余药物能被另一首方剂解释，则标记为合方
"""

import logging
from typing import Iterable, List, Optional

from .formula_matcher import DEFAULT_THRESHOLDS, MatchThresholds, compare_formula_with_input
from .models import HerbEntry, MatchResult, MatchType, StandardFormula

logger = logging.getLogger(__name__)


def _rank_against(
    input_herbs: List[HerbEntry],
    database: Iterable[StandardFormula],
    thresholds: MatchThresholds,
    exclude_name: Optional[str] = None,
) -> List[MatchResult]:
    results = []
    for formula in database:
        if exclude_name is not None and formula.name == exclude_name:
            continue
        result = compare_formula_with_input(input_herbs, formula, thresholds)
        if result:
            results.append(result)
    # 稳定排序，同分时保持方剂库顺序
    return sorted(results, key=lambda r: r.score, reverse=True)


def _detect_combined_formula(
    top_match: MatchResult,
    database: List[StandardFormula],
    thresholds: MatchThresholds,
) -> Optional[str]:
    """用剩余药物检索第二首方剂，返回合方名称"""
    leftover_herbs = top_match.additional_herbs
    if len(leftover_herbs) < thresholds.combined_min_leftovers:
        return None

    secondary_results = _rank_against(leftover_herbs, database, thresholds,
                                      exclude_name=top_match.formula.name)
    if not secondary_results:
        return None

    second_match = secondary_results[0]
    leftover_names = {herb.name for herb in leftover_herbs}
    explained_by_second = sum(1 for name in second_match.formula.composition if name in leftover_names)

    if (explained_by_second >= thresholds.combined_min_explained
            or explained_by_second == len(leftover_herbs)):
        return second_match.formula.name
    return None


def find_matches(
    input_herbs: List[HerbEntry],
    database: Iterable[StandardFormula],
    thresholds: Optional[MatchThresholds] = None,
) -> List[MatchResult]:
    """
    在方剂库中查找与输入最匹配的方剂

    Args:
        input_herbs: 解析后的输入药物
        database: 方剂库快照，检索过程中不得修改
        thresholds: 匹配阈值

    Returns:
        List[MatchResult]: 按评分降序排列；第一名可能带有合方标记
    """
    if not input_herbs:
        return []

    thresholds = thresholds or DEFAULT_THRESHOLDS
    formulas = list(database)

    sorted_matches = _rank_against(input_herbs, formulas, thresholds)

    if sorted_matches:
        top_match = sorted_matches[0]
        combined_name = _detect_combined_formula(top_match, formulas, thresholds)
        if combined_name:
            top_match.mark_combined(combined_name)
            logger.info(f"🔗 检测到合方: {top_match.formula.name} + {combined_name}")

    return sorted_matches


def has_perfect_match(results: List[MatchResult]) -> bool:
    """是否存在药味与剂量比例都完全吻合的方剂"""
    return any(r.match_type == MatchType.EXACT and r.score == 1.0 for r in results)


def merge_match(results: List[MatchResult], extra: Optional[MatchResult]) -> List[MatchResult]:
    """
    合并额外的匹配结果（如AI检索得到的方剂）

    同名方剂已存在时不重复添加；返回新的列表，不修改原列表
    """
    if extra is None or any(r.formula.name == extra.formula.name for r in results):
        return list(results)
    return sorted([*results, extra], key=lambda r: r.score, reverse=True)

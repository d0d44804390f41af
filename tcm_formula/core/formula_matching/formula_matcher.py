#!/usr/bin/env python3
"""
方剂比对
计算输入药物与单个标准方剂的重合度、综合评分与匹配类型

评分：
    召回率 = 命中药味数 / 原方药味数
    精确率 = 命中药味数 / 输入药味数
    综合分 = 0.6 * 召回率 + 0.4 * 精确率
召回率权重更高：用户只输入几味主药时，也要能找到对应的原方
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from tcm_formula.config.settings import MATCHING_CONFIG

from .models import DosageAnalysis, HerbEntry, MatchResult, MatchType, StandardFormula
from .ratio_similarity import calculate_ratio_similarity

logger = logging.getLogger(__name__)

RATIO_MISMATCH_NOTE = '药味完全相同，但剂量比例与原方差异显著，可能为衍生方或类方。'
RATIO_CONFORM_NOTE = '剂量比例与原方高度符合。'


@dataclass(frozen=True)
class MatchThresholds:
    """匹配阈值（经验值）"""
    recall_weight: float = 0.6
    precision_weight: float = 0.4
    # 输入超过 noise_input_size 味且命中不超过 noise_max_overlap 味时视为噪声
    noise_input_size: int = 4
    noise_max_overlap: int = 1
    ratio_mismatch_threshold: float = 0.85
    # 合方检测：剩余药物至少 combined_min_leftovers 味才检测
    combined_min_leftovers: int = 2
    combined_min_explained: int = 2
    low_confidence_score: float = 0.5

    @classmethod
    def from_settings(cls) -> "MatchThresholds":
        return cls(**MATCHING_CONFIG)


DEFAULT_THRESHOLDS = MatchThresholds()


def compare_formula_with_input(
    input_herbs: List[HerbEntry],
    formula: StandardFormula,
    thresholds: Optional[MatchThresholds] = None,
) -> Optional[MatchResult]:
    """
    比较输入药物与一个标准方剂

    Args:
        input_herbs: 解析后的输入药物
        formula: 标准方剂
        thresholds: 匹配阈值，默认使用内置经验值

    Returns:
        Optional[MatchResult]: 无任何关联或判定为噪声时返回 None
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS

    input_names = {herb.name for herb in input_herbs}
    formula_names = set(formula.composition)

    intersection = [name for name in formula.composition if name in input_names]
    missing = [name for name in formula.composition if name not in input_names]
    additional = [herb for herb in input_herbs if herb.name not in formula_names]

    # 至少命中一味
    if not intersection:
        return None

    # 输入药味多而只命中一味，视为噪声；AI检索得到的方剂不过滤
    if (len(input_herbs) > thresholds.noise_input_size
            and len(intersection) <= thresholds.noise_max_overlap
            and not formula.is_ai_generated):
        return None

    recall = len(intersection) / len(formula.composition)
    precision = len(intersection) / len(input_herbs)
    score = recall * thresholds.recall_weight + precision * thresholds.precision_weight

    match_type = MatchType.VARIANT
    dosage_analysis = None

    if not missing and not additional:
        match_type = MatchType.EXACT
        score = 1.0

        # 药味完全相同时再比较剂量比例
        has_dosage = all(herb.dosage > 0 for herb in input_herbs)
        if has_dosage and formula.standard_dosage:
            ratio_score = calculate_ratio_similarity(input_herbs, formula.standard_dosage)

            if ratio_score < thresholds.ratio_mismatch_threshold:
                match_type = MatchType.RATIO_MISMATCH
                score *= ratio_score
                dosage_analysis = DosageAnalysis(similarity=ratio_score, details=RATIO_MISMATCH_NOTE)
            else:
                dosage_analysis = DosageAnalysis(similarity=ratio_score, details=RATIO_CONFORM_NOTE)
    elif not missing:
        # 输入包含完整原方，另有加味
        match_type = MatchType.SUBSET

    logger.debug(f"{formula.name}: 命中{len(intersection)}/{len(formula.composition)}, "
                 f"类型={match_type.value}, 评分={score:.3f}")

    return MatchResult(
        formula=formula,
        score=score,
        match_type=match_type,
        missing_herbs=missing,
        additional_herbs=additional,
        input_herbs=input_herbs,
        dosage_analysis=dosage_analysis,
    )

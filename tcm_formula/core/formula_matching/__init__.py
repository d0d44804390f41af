#!/usr/bin/env python3
"""
方剂匹配模块
药物输入解析、方剂比对、排序与合方检测
"""

from .models import (
    DosageAnalysis,
    HerbDetail,
    HerbEntry,
    MatchResult,
    MatchType,
    StandardFormula,
)

from .aliases import resolve_book_alias, resolve_herb_alias
from .herb_parser import parse_formula_input, format_herbs_to_lines
from .dosage_codec import decode_dosage_string, encode_dosage_string
from .ratio_similarity import calculate_ratio_similarity
from .formula_matcher import MatchThresholds, compare_formula_with_input
from .match_ranker import find_matches, has_perfect_match, merge_match

__all__ = [
    'DosageAnalysis',
    'HerbDetail',
    'HerbEntry',
    'MatchResult',
    'MatchType',
    'StandardFormula',
    'resolve_book_alias',
    'resolve_herb_alias',
    'parse_formula_input',
    'format_herbs_to_lines',
    'decode_dosage_string',
    'encode_dosage_string',
    'calculate_ratio_similarity',
    'MatchThresholds',
    'compare_formula_with_input',
    'find_matches',
    'has_perfect_match',
    'merge_match',
]

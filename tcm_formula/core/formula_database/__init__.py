"""
方剂库模块
"""

from .formula_builder import (
    build_formula_from_form,
    formula_from_payload,
    split_composition,
)

from .formula_repository import (
    FormulaNotFoundError,
    FormulaRepository,
    FormulaSnapshot,
    get_formula_repository,
)

__all__ = [
    'build_formula_from_form',
    'formula_from_payload',
    'split_composition',
    'FormulaNotFoundError',
    'FormulaRepository',
    'FormulaSnapshot',
    'get_formula_repository',
]

"""
方剂AI服务模块
"""

from .formula_ai_service import (
    AIServiceError,
    AIServiceTimeoutError,
    AIServiceUnavailableError,
    FormulaAIService,
    get_formula_ai_service,
    parse_json_from_text,
)

__all__ = [
    'AIServiceError',
    'AIServiceTimeoutError',
    'AIServiceUnavailableError',
    'FormulaAIService',
    'get_formula_ai_service',
    'parse_json_from_text',
]

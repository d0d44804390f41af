"""
方剂服务依赖注入
"""

from typing import Optional

from tcm_formula.config.settings import AI_CONFIG
from tcm_formula.core.ai_analysis.formula_ai_service import FormulaAIService, get_formula_ai_service
from tcm_formula.core.formula_database.formula_repository import FormulaRepository, get_formula_repository
from tcm_formula.core.formula_matching.formula_search_service import FormulaSearchService

_search_service: Optional[FormulaSearchService] = None


def get_repository() -> FormulaRepository:
    return get_formula_repository()


def get_ai_service() -> FormulaAIService:
    return get_formula_ai_service()


def get_search_service() -> FormulaSearchService:
    global _search_service
    if _search_service is None:
        ai_service = get_formula_ai_service() if AI_CONFIG["enabled"] else None
        _search_service = FormulaSearchService(get_formula_repository(), ai_service)
    return _search_service

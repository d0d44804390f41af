#!/usr/bin/env python3
"""
方剂识别API路由
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from tcm_formula.api.dependencies.formula_deps import get_repository, get_search_service
from tcm_formula.api.utils.api_response import APIResponse
from tcm_formula.core.formula_database.formula_repository import FormulaRepository
from tcm_formula.core.formula_matching.formula_search_service import FormulaSearchService
from tcm_formula.core.formula_matching.herb_parser import format_herbs_to_lines, parse_formula_input

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/formula", tags=["方剂识别"])


class HerbTextRequest(BaseModel):
    """药物清单"""
    text: str = Field(..., max_length=2000)


class SearchRequest(HerbTextRequest):
    """方剂检索请求"""
    use_ai: bool = True


class CompareRequest(HerbTextRequest):
    """与指定方剂比较"""
    formula_id: str


@router.post("/parse")
async def parse_herbs(request: HerbTextRequest):
    """解析药物清单"""
    herbs = parse_formula_input(request.text)
    return APIResponse.success(data={
        "herbs": [h.to_dict() for h in herbs],
        "lines": format_herbs_to_lines([h.name for h in herbs]),
    })


@router.post("/search")
async def search_formula(
    request: SearchRequest,
    service: FormulaSearchService = Depends(get_search_service)
):
    """识别输入药物对应的方剂"""
    outcome = await service.search(request.text, use_ai=request.use_ai)
    message = "" if outcome.matches else "未找到匹配的方剂"
    return APIResponse.success(data=outcome.to_dict(), message=message)


@router.post("/compare")
async def compare_formula(
    request: CompareRequest,
    service: FormulaSearchService = Depends(get_search_service)
):
    """与指定方剂比较，无关联时 data 为 null"""
    match = service.compare(request.text, request.formula_id)
    return APIResponse.success(data=match.to_dict() if match else None)


@router.post("/analyze")
async def analyze_formula(
    request: CompareRequest,
    service: FormulaSearchService = Depends(get_search_service)
):
    """AI分析加减变化"""
    result = await service.analyze(request.text, request.formula_id)
    return APIResponse.success(data=result)


@router.get("/formulas")
async def list_formulas(repository: FormulaRepository = Depends(get_repository)):
    """方剂库列表"""
    snapshot = repository.snapshot()
    return APIResponse.success(data={
        "version": snapshot.version,
        "formulas": [f.to_dict() for f in snapshot],
    })


@router.get("/formulas/{formula_id}")
async def get_formula(formula_id: str, repository: FormulaRepository = Depends(get_repository)):
    formula = repository.get_formula(formula_id)
    if formula is None:
        return APIResponse.not_found("方剂")
    return APIResponse.success(data=formula.to_dict())

#!/usr/bin/env python3
"""
方剂库管理API路由
方剂录入/修改、AI智能导入、药物信息维护
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from tcm_formula.api.dependencies.formula_deps import get_ai_service, get_repository
from tcm_formula.api.utils.api_response import APIResponse
from tcm_formula.core.ai_analysis.formula_ai_service import FormulaAIService
from tcm_formula.core.formula_database.formula_builder import (
    build_formula_from_form,
    normalize_standard_dosage,
    split_composition,
)
from tcm_formula.core.formula_database.formula_repository import FormulaRepository
from tcm_formula.core.formula_matching.aliases import resolve_book_alias
from tcm_formula.core.formula_matching.dosage_codec import encode_dosage_string
from tcm_formula.core.formula_matching.models import HerbDetail, StandardFormula

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/formula/admin", tags=["方剂库管理"])


class FormulaForm(BaseModel):
    """方剂录入表单，组成与剂量均为文本"""
    name: str
    composition: str
    source: str = ""
    standard_dosage: str = ""  # "麻黄:9 桂枝:6"
    usage: str = ""
    effect: str = ""
    indications: str = ""
    analysis: str = ""
    pinyin: str = ""
    category: str = ""


class RawTextRequest(BaseModel):
    raw_text: str = Field(..., max_length=10000)


class CrawlRequest(BaseModel):
    name: str
    save: bool = False


class HerbInfoForm(BaseModel):
    effect: str = ""
    paozhi: str = ""
    pinyin: str = ""
    category: str = ""
    origin: str = ""
    taste: str = ""
    meridians: str = ""
    actions: str = ""
    usage_dosage: str = ""
    contraindications: str = ""


def formula_to_form(formula: StandardFormula) -> dict:
    """方剂转为表单字段，剂量编码为文本"""
    return {
        "name": formula.name,
        "composition": " ".join(formula.composition),
        "source": formula.source,
        "standard_dosage": encode_dosage_string(formula.standard_dosage),
        "usage": formula.usage,
        "effect": formula.effect,
        "indications": formula.indications,
        "analysis": formula.analysis,
        "pinyin": formula.pinyin,
        "category": formula.category,
    }


def _build(form: FormulaForm, formula_id: Optional[str] = None) -> StandardFormula:
    return build_formula_from_form(formula_id=formula_id, **form.model_dump())


@router.post("/formulas")
async def add_formula(form: FormulaForm, repository: FormulaRepository = Depends(get_repository)):
    """新增方剂"""
    formula = repository.add_formula(_build(form))
    return APIResponse.success(data=formula.to_dict(), message="方剂已添加", status_code=201)


@router.get("/formulas/{formula_id}/form")
async def get_formula_form(formula_id: str, repository: FormulaRepository = Depends(get_repository)):
    """编辑用的表单数据"""
    formula = repository.get_formula(formula_id)
    if formula is None:
        raise HTTPException(status_code=404, detail="方剂不存在")
    return APIResponse.success(data=formula_to_form(formula))


@router.put("/formulas/{formula_id}")
async def update_formula(
    formula_id: str,
    form: FormulaForm,
    repository: FormulaRepository = Depends(get_repository)
):
    """修改方剂"""
    formula = _build(form, formula_id=formula_id)
    if not repository.update_formula(formula):
        raise HTTPException(status_code=404, detail="方剂不存在")
    return APIResponse.success(data=formula.to_dict(), message="方剂已更新")


@router.delete("/formulas/{formula_id}")
async def delete_formula(formula_id: str, repository: FormulaRepository = Depends(get_repository)):
    if not repository.delete_formula(formula_id):
        raise HTTPException(status_code=404, detail="方剂不存在")
    return APIResponse.success(message="方剂已删除")


@router.post("/import")
async def import_formula_text(
    request: RawTextRequest,
    ai_service: FormulaAIService = Depends(get_ai_service)
):
    """AI智能导入：解析方剂原文，返回可填入表单的数据"""
    payload = await ai_service.parse_raw_formula_text(request.raw_text)
    standard_dosage = normalize_standard_dosage(payload.get("standardDosage", payload.get("standard_dosage")))
    return APIResponse.success(data={
        "name": str(payload.get("name") or ""),
        "composition": " ".join(split_composition(payload.get("composition"))),
        "source": resolve_book_alias(payload.get("source")),
        "standard_dosage": encode_dosage_string(standard_dosage),
        "usage": str(payload.get("usage") or ""),
        "effect": str(payload.get("effect") or ""),
        "indications": str(payload.get("indications") or ""),
        "analysis": str(payload.get("analysis") or ""),
    })


@router.post("/crawl")
async def crawl_formula(
    request: CrawlRequest,
    ai_service: FormulaAIService = Depends(get_ai_service),
    repository: FormulaRepository = Depends(get_repository)
):
    """检索方剂资料，save=True 时写入方剂库"""
    formula = await ai_service.crawl_formula(request.name)
    if formula is None:
        raise HTTPException(status_code=404, detail=f"未检索到方剂: {request.name}")
    if request.save:
        repository.add_formula(formula)
    return APIResponse.success(data=formula.to_dict())


@router.get("/books")
async def list_books(repository: FormulaRepository = Depends(get_repository)):
    """典籍列表及收录方剂数"""
    return APIResponse.success(data=repository.list_books())


@router.get("/herbs")
async def list_herbs(repository: FormulaRepository = Depends(get_repository)):
    herbs = repository.list_herb_info()
    return APIResponse.success(data={name: detail.to_dict() for name, detail in herbs.items()})


@router.put("/herbs/{name}")
async def save_herb_info(
    name: str,
    form: HerbInfoForm,
    repository: FormulaRepository = Depends(get_repository)
):
    """新增或修改药物信息"""
    repository.upsert_herb_info(name, HerbDetail(**form.model_dump()))
    return APIResponse.success(message="药效信息已保存")


@router.post("/herbs/crawl")
async def crawl_herb(
    request: CrawlRequest,
    ai_service: FormulaAIService = Depends(get_ai_service),
    repository: FormulaRepository = Depends(get_repository)
):
    """检索药物详情，save=True 时写入药物信息"""
    detail = await ai_service.crawl_herb(request.name)
    if detail is None:
        raise HTTPException(status_code=404, detail=f"未检索到药物: {request.name}")
    if request.save:
        repository.upsert_herb_info(request.name, detail)
    return APIResponse.success(data=detail.to_dict())

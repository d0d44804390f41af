#!/usr/bin/env python3
"""
方剂AI服务
调用通义千问（DashScope）完成：
1. 方剂加减分析
2. 本地方剂库未命中时的联网识别
3. 管理端方剂文本智能导入
4. 方剂、药物详情检索
"""

import asyncio
import json
import logging
import re
import time
import uuid
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from dashscope import Generation

from tcm_formula.config.settings import AI_CONFIG
from tcm_formula.core.formula_database.formula_builder import formula_from_payload
from tcm_formula.core.formula_matching.herb_parser import format_herb_entries
from tcm_formula.core.formula_matching.models import HerbDetail, HerbEntry, MatchResult, MatchType, StandardFormula

logger = logging.getLogger(__name__)

ANALYSIS_UNAVAILABLE = "AI 分析服务暂时不可用，请检查网络或稍后再试。"
ANALYSIS_EMPTY = "未能生成分析结果。"


class AIServiceError(RuntimeError):
    """AI调用失败"""


class AIServiceUnavailableError(AIServiceError):
    """未配置 DASHSCOPE_API_KEY"""


class AIServiceTimeoutError(AIServiceError):
    """AI调用超时"""


def parse_json_from_text(text: str) -> Optional[Dict[str, Any]]:
    """从模型回复中提取JSON对象，兼容 ```json 代码块和多余的尾逗号"""
    if not text:
        return None

    json_str = text
    fenced = re.search(r'```json\s*([\s\S]*?)\s*```', text) or re.search(r'```\s*([\s\S]*?)\s*```', text)
    if fenced:
        json_str = fenced.group(1)
    else:
        first_brace = text.find('{')
        last_brace = text.rfind('}')
        if first_brace != -1 and last_brace > first_brace:
            json_str = text[first_brace:last_brace + 1]

    json_str = re.sub(r',\s*}', '}', json_str)
    json_str = re.sub(r',\s*]', ']', json_str)
    try:
        result = json.loads(json_str)
    except json.JSONDecodeError:
        logger.warning(f"AI返回内容无法解析为JSON: {text[:200]}")
        return None
    return result if isinstance(result, dict) else None


class FormulaAIService:
    """方剂AI服务"""

    def __init__(self, ai_config: Optional[Dict[str, Any]] = None):
        config = ai_config or AI_CONFIG
        self.api_key = config.get('dashscope_api_key', '')
        self.model = config.get('default_model', 'qwen-max')
        self.timeout = config.get('model_timeout', 40)

        if not self.api_key:
            logger.warning("⚠️ DASHSCOPE_API_KEY未设置，AI识别与分析不可用")

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def _call_model(self, prompt: str, enable_search: bool = False) -> str:
        """调用模型，返回文本内容"""
        if not self.api_key:
            raise AIServiceUnavailableError("未配置 DASHSCOPE_API_KEY")

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    Generation.call,
                    model=self.model,
                    api_key=self.api_key,
                    messages=[{"role": "user", "content": prompt}],
                    result_format='message',
                    enable_search=enable_search,
                ),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            raise AIServiceTimeoutError(f"AI调用超时 ({self.timeout}秒)")
        except Exception as e:
            raise AIServiceError(f"AI调用异常: {e}") from e

        try:
            if response.status_code == HTTPStatus.OK and response.output and response.output.choices:
                return response.output.choices[0]['message']['content'] or ''
        except (AttributeError, KeyError, IndexError, TypeError) as e:
            raise AIServiceError(f"AI返回格式异常: {e!r}") from e
        raise AIServiceError(f"AI调用失败: {getattr(response, 'message', 'Unknown')}")

    async def generate_formula_analysis(self, input_herbs: List[HerbEntry], primary_match: MatchResult) -> str:
        """
        分析用户方相对原方的加减变化

        调用失败时返回提示文本，不抛出异常
        """
        formula = primary_match.formula
        match_desc = '药味相同但剂量比例不同' if primary_match.match_type == MatchType.RATIO_MISMATCH else '药味加减'
        combined_hint = f"【合方提示】：此方似乎包含 {primary_match.combined_with} 的组成。" if primary_match.is_combined else ''
        ai_hint = '【注】：此方为AI基于古籍检索匹配的结果。' if formula.is_ai_generated else ''

        prompt = f"""你是一位资深中医专家，请对以下方剂进行深度分析。

【用户输入方剂】：{format_herb_entries(input_herbs)}
【系统识别原方】：{formula.name}（出处：{formula.source}）
【原方标准组成】：{'，'.join(formula.composition)}
【识别关系】：{match_desc}
{combined_hint}
{ai_hint}

请用简体中文、Markdown格式生成简明的临床分析报告，包含：
1. **加减变化分析**：用户方相对原方增加了什么药、去掉了什么药，或核心药物剂量比例有何变化。
2. **方义衍变推导**：上述变化使方剂功效侧重发生了怎样的偏移。
3. **临床应用建议**：这种变化更适合什么样的病证。

要求：术语准确，逻辑清晰，400字以内。"""

        try:
            text = await self._call_model(prompt)
        except AIServiceError as e:
            logger.error(f"方剂分析失败: {e}")
            return ANALYSIS_UNAVAILABLE

        logger.info(f"🤖 方剂分析完成: {formula.name}")
        return text or ANALYSIS_EMPTY

    async def identify_formula(self, input_herbs: List[HerbEntry]) -> Optional[StandardFormula]:
        """联网识别与输入药物最匹配的一首经典方剂，失败返回 None"""
        if not input_herbs:
            return None

        herb_names = '、'.join(herb.name for herb in input_herbs)
        prompt = f"""用户输入药物: {herb_names}

任务: 识别与这些药物最匹配的一首中医经典方剂。

要求:
1. 请联网检索核实方剂组成。
2. 即使只输入了几味药，也要找出包含它们的最著名方剂。
3. 药名使用正名（如"熟地"写作"熟地黄"，"薏米"写作"薏苡仁"），全部使用简体中文。
4. 只返回一个JSON对象，不要Markdown。

输出格式:
{{
    "name": "方剂名",
    "source": "出处（如《伤寒论》）",
    "composition": ["药名1", "药名2"],
    "usage": "用法",
    "effect": "功效",
    "indications": "主治",
    "analysis": "简要分析"
}}"""

        try:
            text = await self._call_model(prompt, enable_search=True)
        except AIServiceError as e:
            logger.error(f"AI识别方剂失败: {e}")
            return None

        payload = parse_json_from_text(text)
        if not payload:
            return None

        formula = formula_from_payload(payload, formula_id=f"ai-{uuid.uuid4().hex[:8]}")
        if formula:
            logger.info(f"🤖 AI识别方剂: {formula.name}")
        return formula

    async def parse_raw_formula_text(self, raw_text: str) -> Dict[str, Any]:
        """
        管理端智能导入：从方剂原文中提取结构化数据

        Raises:
            AIServiceError: 调用失败或返回内容无法解析
        """
        prompt = f"""任务: 从提供的文本中提取中医方剂数据。
原始文本: \"\"\"{raw_text}\"\"\"

请解析文本并返回适合数据库录入的JSON对象：
1. composition: 药名数组，使用标准简体中文正名（如"熟地黄"而不是"熟地"）。
2. standardDosage: 若提到剂量，格式化为单一字符串 "麻黄:9 桂枝:6"，古制换算为克（1钱约3g）。
3. source: 典籍出处，去掉书名号并使用通用简称；未知填"未知"。
4. 全部使用简体中文，只返回JSON，不要Markdown。

JSON结构:
{{
    "name": "string",
    "source": "string",
    "composition": ["string"],
    "standardDosage": "string",
    "usage": "string",
    "effect": "string",
    "indications": "string",
    "analysis": "string"
}}"""

        text = await self._call_model(prompt)
        payload = parse_json_from_text(text)
        if payload is None:
            raise AIServiceError("AI返回内容无法解析为方剂数据")
        logger.info(f"📥 智能导入解析完成: {payload.get('name')}")
        return payload

    async def crawl_formula(self, name: str) -> Optional[StandardFormula]:
        """检索方剂的完整资料，失败返回 None"""
        prompt = f"""任务: 联网检索中医方剂"{name}"的权威资料（优先参考中医世家 zysj.com.cn），返回完整数据。

要求:
1. 所有内容使用简体中文。
2. 药名使用正名（如：薏米->薏苡仁，元胡->延胡索，山肉->山茱萸，锦纹->大黄）。
3. 书名去掉书名号并使用简称（如：医学衷中参西录->衷中参西，备急千金要方->千金方）。

只返回如下结构的JSON，不要Markdown:
{{
    "name": "{name}",
    "pinyin": "拼音",
    "source": "出处",
    "category": "分类（如：解表剂）",
    "composition": ["药名1", "药名2"],
    "standardDosage": "药名1:剂量 药名2:剂量（尽量换算为克）",
    "usage": "用法",
    "effect": "功用",
    "indications": "主治",
    "analysis": "方解"
}}"""

        try:
            text = await self._call_model(prompt, enable_search=True)
        except AIServiceError as e:
            logger.error(f"方剂检索失败 {name}: {e}")
            return None

        payload = parse_json_from_text(text)
        if not payload:
            return None
        return formula_from_payload(
            payload,
            formula_id=f"crawl-{int(time.time() * 1000)}-{uuid.uuid4().hex[:5]}",
        )

    async def crawl_herb(self, name: str) -> Optional[HerbDetail]:
        """检索药物详情，失败或缺少功效时返回 None"""
        prompt = f"""任务: 联网检索中药"{name}"的详细资料（优先参考中医世家 zysj.com.cn）。

要求: 所有内容使用简体中文，药名使用正名。

只返回如下结构的JSON，不要Markdown:
{{
    "effect": "功效",
    "paozhi": "炮制方法",
    "pinyin": "拼音",
    "category": "分类（如：解表药）",
    "origin": "来源",
    "taste": "性味",
    "meridians": "归经",
    "actions": "主治",
    "usage_dosage": "用法用量",
    "contraindications": "注意/禁忌"
}}"""

        try:
            text = await self._call_model(prompt, enable_search=True)
        except AIServiceError as e:
            logger.error(f"药物检索失败 {name}: {e}")
            return None

        payload = parse_json_from_text(text)
        if not payload or not payload.get('effect'):
            return None
        return HerbDetail.from_dict(payload)


# 全局实例
_formula_ai_service = None


def get_formula_ai_service() -> FormulaAIService:
    """获取方剂AI服务实例"""
    global _formula_ai_service
    if _formula_ai_service is None:
        _formula_ai_service = FormulaAIService()
    return _formula_ai_service

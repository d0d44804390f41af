#!/usr/bin/env python3
"""
方剂AI服务测试
DashScope 调用以替身代替，不访问网络
"""

import asyncio
import json
import time
from types import SimpleNamespace

import pytest

from tcm_formula.core.ai_analysis import formula_ai_service
from tcm_formula.core.ai_analysis.formula_ai_service import (
    ANALYSIS_UNAVAILABLE,
    AIServiceError,
    AIServiceTimeoutError,
    AIServiceUnavailableError,
    FormulaAIService,
    parse_json_from_text,
)
from tcm_formula.core.formula_matching.formula_matcher import compare_formula_with_input
from tcm_formula.core.formula_matching.herb_parser import parse_formula_input

TEST_CONFIG = {"dashscope_api_key": "test-key", "default_model": "qwen-max", "model_timeout": 5}


class FakeGeneration:
    """记录调用参数并返回预设内容"""

    def __init__(self, content="", status_code=200, error=None, delay=0):
        self.content = content
        self.status_code = status_code
        self.error = error
        self.delay = delay
        self.calls = []

    def call(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return SimpleNamespace(
            status_code=self.status_code,
            message="mock failure",
            output=SimpleNamespace(choices=[{"message": {"content": self.content}}]),
        )


@pytest.fixture
def fake_generation(monkeypatch):
    def install(**kwargs):
        fake = FakeGeneration(**kwargs)
        monkeypatch.setattr(formula_ai_service, "Generation", fake)
        return fake
    return install


@pytest.fixture
def ai_service():
    return FormulaAIService(TEST_CONFIG)


class TestParseJson:

    def test_plain_json(self):
        assert parse_json_from_text('{"name": "麻黄汤"}') == {"name": "麻黄汤"}

    def test_fenced_json_with_trailing_commas(self):
        text = '说明文字\n```json\n{"name": "麻黄汤", "composition": ["麻黄", "桂枝",],}\n```'
        assert parse_json_from_text(text) == {"name": "麻黄汤", "composition": ["麻黄", "桂枝"]}

    def test_json_embedded_in_text(self):
        assert parse_json_from_text('结果如下：{"name": "白虎汤"} 以上。') == {"name": "白虎汤"}

    @pytest.mark.parametrize("text", ["", "没有JSON", "[1, 2]", "{broken"])
    def test_invalid(self, text):
        assert parse_json_from_text(text) is None


class TestIdentifyFormula:

    def test_identify(self, ai_service, fake_generation):
        payload = {
            "name": "麻杏石甘汤",
            "source": "《伤寒论》",
            "composition": ["麻黄", "杏仁", "石膏", "炙甘草"],
            "effect": "辛凉疏表，清肺平喘。",
        }
        fake = fake_generation(content=f"```json\n{json.dumps(payload, ensure_ascii=False)}\n```")

        formula = asyncio.run(ai_service.identify_formula(parse_formula_input("麻黄 杏仁 石膏")))

        assert formula.name == "麻杏石甘汤"
        assert formula.source == "伤寒论"
        assert formula.is_ai_generated
        assert formula.id.startswith("ai-")
        assert fake.calls[0]["enable_search"] is True
        assert fake.calls[0]["result_format"] == "message"
        assert fake.calls[0]["api_key"] == "test-key"
        assert "麻黄、杏仁、石膏" in fake.calls[0]["messages"][0]["content"]

    def test_identify_unparseable(self, ai_service, fake_generation):
        fake_generation(content="抱歉，无法识别。")
        assert asyncio.run(ai_service.identify_formula(parse_formula_input("麻黄"))) is None

    def test_identify_call_failure(self, ai_service, fake_generation):
        fake_generation(error=ConnectionError("network down"))
        assert asyncio.run(ai_service.identify_formula(parse_formula_input("麻黄"))) is None

    def test_identify_empty_input(self, ai_service, fake_generation):
        fake = fake_generation(content="{}")
        assert asyncio.run(ai_service.identify_formula([])) is None
        assert fake.calls == []

    def test_without_api_key(self, fake_generation):
        fake = fake_generation(content="{}")
        service = FormulaAIService({"dashscope_api_key": ""})

        assert not service.available
        assert asyncio.run(service.identify_formula(parse_formula_input("麻黄"))) is None
        assert fake.calls == []


class TestFormulaAnalysis:

    def test_analysis_prompt(self, ai_service, fake_generation, mahuang_formula):
        fake = fake_generation(content="## 加减变化分析\n加石膏清热。")
        herbs = parse_formula_input("麻黄9g 桂枝6g 杏仁9g 甘草3g 石膏30g")
        match = compare_formula_with_input(herbs, mahuang_formula)

        text = asyncio.run(ai_service.generate_formula_analysis(herbs, match))

        assert text.startswith("## 加减变化分析")
        prompt = fake.calls[0]["messages"][0]["content"]
        assert "麻黄9g，桂枝6g，杏仁9g，甘草3g，石膏30g" in prompt
        assert "麻黄汤" in prompt
        assert fake.calls[0]["enable_search"] is False

    def test_analysis_falls_back_on_error(self, ai_service, fake_generation, mahuang_formula):
        fake_generation(status_code=500)
        herbs = parse_formula_input("麻黄 桂枝")
        match = compare_formula_with_input(herbs, mahuang_formula)

        assert asyncio.run(ai_service.generate_formula_analysis(herbs, match)) == ANALYSIS_UNAVAILABLE

    def test_analysis_timeout(self, fake_generation, mahuang_formula):
        fake_generation(content="太慢了", delay=0.5)
        service = FormulaAIService({**TEST_CONFIG, "model_timeout": 0.05})
        herbs = parse_formula_input("麻黄 桂枝")
        match = compare_formula_with_input(herbs, mahuang_formula)

        assert asyncio.run(service.generate_formula_analysis(herbs, match)) == ANALYSIS_UNAVAILABLE


class TestCallModel:

    def test_unavailable_raises(self):
        service = FormulaAIService({"dashscope_api_key": ""})
        with pytest.raises(AIServiceUnavailableError):
            asyncio.run(service._call_model("你好"))

    @pytest.mark.regression
    @pytest.mark.parametrize("choices", [[{"unexpected": 1}], [{"message": None}], ["text"]])
    def test_malformed_reply_raises_service_error(self, ai_service, monkeypatch, choices):
        reply = SimpleNamespace(status_code=200, output=SimpleNamespace(choices=choices))
        monkeypatch.setattr(formula_ai_service, "Generation", SimpleNamespace(call=lambda **kwargs: reply))

        with pytest.raises(AIServiceError) as exc_info:
            asyncio.run(ai_service._call_model("你好"))
        assert not isinstance(exc_info.value, LookupError)

    def test_timeout_raises(self, fake_generation):
        fake_generation(content="", delay=0.5)
        service = FormulaAIService({**TEST_CONFIG, "model_timeout": 0.05})
        with pytest.raises(AIServiceTimeoutError):
            asyncio.run(service._call_model("你好"))


class TestAdminImport:

    def test_parse_raw_formula_text(self, ai_service, fake_generation):
        fake_generation(content='{"name": "四物汤", "composition": ["熟地", "当归", "白芍", "川芎"], '
                                '"standardDosage": "熟地:12 当归:9 白芍:9 川芎:6"}')

        payload = asyncio.run(ai_service.parse_raw_formula_text("四物汤：熟地、当归、白芍、川芎"))
        assert payload["name"] == "四物汤"

    def test_parse_raw_formula_text_invalid(self, ai_service, fake_generation):
        fake_generation(content="无法解析")
        with pytest.raises(AIServiceError):
            asyncio.run(ai_service.parse_raw_formula_text("乱码"))

    def test_crawl_formula(self, ai_service, fake_generation):
        fake_generation(content='{"name": "二陈汤", "source": "太平惠民和剂局方", '
                                '"composition": "半夏、橘红、茯苓、甘草", "standardDosage": "半夏:15 茯苓:9"}')

        formula = asyncio.run(ai_service.crawl_formula("二陈汤"))

        assert formula.id.startswith("crawl-")
        assert formula.source == "和剂局方"
        assert formula.composition == ("半夏", "橘红", "茯苓", "甘草")
        assert formula.standard_dosage == {"半夏": 15.0, "茯苓": 9.0}

    def test_crawl_herb(self, ai_service, fake_generation):
        fake_generation(content='{"effect": "发汗解表", "paozhi": "生用", "taste": "辛，温", "unknown": "x"}')

        detail = asyncio.run(ai_service.crawl_herb("麻黄"))
        assert detail.effect == "发汗解表"
        assert detail.taste == "辛，温"

    def test_crawl_herb_without_effect(self, ai_service, fake_generation):
        fake_generation(content='{"paozhi": "生用"}')
        assert asyncio.run(ai_service.crawl_herb("麻黄")) is None


class TestMalformedPayload:
    """AI返回的字段类型不符时不抛出异常"""

    @pytest.mark.regression
    @pytest.mark.parametrize("payload", [
        '{"name": "某方", "composition": 5}',
        '{"name": "某方", "composition": null}',
        '{"name": "某方", "composition": {"麻黄": 9}}',
    ])
    def test_identify_returns_none(self, ai_service, fake_generation, payload):
        fake_generation(content=payload)
        assert asyncio.run(ai_service.identify_formula(parse_formula_input("麻黄"))) is None

    @pytest.mark.regression
    @pytest.mark.parametrize("dosage", ['["麻黄:9"]', '9', 'true'])
    def test_identify_ignores_bad_dosage(self, ai_service, fake_generation, dosage):
        fake_generation(content=f'{{"name": "某方", "source": 3, "composition": ["麻黄", "杏仁"], "standardDosage": {dosage}}}')

        formula = asyncio.run(ai_service.identify_formula(parse_formula_input("麻黄 杏仁")))

        assert formula.composition == ("麻黄", "杏仁")
        assert formula.standard_dosage is None
        assert formula.source == "未知"

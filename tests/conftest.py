"""
pytest配置文件 - 测试框架基础配置
"""
import os
import sys

import pytest

# 添加项目根目录到Python路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tcm_formula.core.formula_database.formula_repository import FormulaRepository
from tcm_formula.core.formula_matching.models import HerbDetail, StandardFormula


@pytest.fixture
def mahuang_formula():
    """麻黄汤（无标准剂量）"""
    return StandardFormula(
        id="formula-a",
        name="麻黄汤",
        source="伤寒论",
        composition=("麻黄", "桂枝", "杏仁", "甘草"),
    )


@pytest.fixture
def mahuang_formula_with_dosage():
    """麻黄汤（含标准剂量）"""
    return StandardFormula(
        id="formula-a",
        name="麻黄汤",
        source="伤寒论",
        composition=("麻黄", "桂枝", "杏仁", "甘草"),
        standard_dosage={"麻黄": 9, "桂枝": 6, "杏仁": 9, "甘草": 3},
    )


@pytest.fixture
def baihu_formula():
    """白虎汤"""
    return StandardFormula(
        id="formula-b",
        name="白虎汤",
        source="伤寒论",
        composition=("石膏", "知母", "甘草", "粳米"),
    )


@pytest.fixture
def formula_repository(tmp_path):
    """临时方剂库（含种子数据）"""
    return FormulaRepository(tmp_path / "formulas.sqlite")


class FakeAIService:
    """替代 DashScope 的AI服务"""

    def __init__(self, identified=None, analysis="加减分析", raw_payload=None, crawled=None, herb=None):
        self.identified = identified
        self.analysis = analysis
        self.raw_payload = raw_payload or {}
        self.crawled = crawled
        self.herb = herb
        self.identify_calls = []
        self.analysis_calls = []

    @property
    def available(self):
        return True

    async def identify_formula(self, input_herbs):
        self.identify_calls.append(list(input_herbs))
        return self.identified

    async def generate_formula_analysis(self, input_herbs, primary_match):
        self.analysis_calls.append((list(input_herbs), primary_match))
        return self.analysis

    async def parse_raw_formula_text(self, raw_text):
        return self.raw_payload

    async def crawl_formula(self, name):
        return self.crawled

    async def crawl_herb(self, name):
        return self.herb


@pytest.fixture
def fake_ai_service():
    return FakeAIService()


@pytest.fixture
def make_ai_service():
    """按需构造AI服务替身"""
    return FakeAIService


@pytest.fixture
def sample_herb_detail():
    return HerbDetail(effect="发汗散寒，宣肺平喘。", paozhi="生用或蜜炙用。", taste="辛、微苦，温")


def pytest_configure(config):
    """pytest启动配置"""
    # 添加自定义标记
    config.addinivalue_line("markers", "regression: 防回归测试标记")

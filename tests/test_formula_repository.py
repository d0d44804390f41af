#!/usr/bin/env python3
"""
方剂库测试
种子数据、快照发布、方剂与药物信息的增删改
"""

import threading

import pytest

from tcm_formula.core.formula_database.formula_builder import (
    CUSTOM_SOURCE,
    build_formula_from_form,
    formula_from_payload,
    normalize_standard_dosage,
    split_composition,
)
from tcm_formula.core.formula_database.formula_repository import FormulaRepository
from tcm_formula.core.formula_database.seed_formulas import CLASSIC_FORMULAS, HERB_INFO
from tcm_formula.core.formula_matching.models import HerbDetail, StandardFormula


class TestSeedAndSnapshot:

    def test_seeded_on_first_start(self, formula_repository):
        snapshot = formula_repository.snapshot()

        assert len(snapshot) == len(CLASSIC_FORMULAS)
        assert [f.id for f in snapshot] == [data["id"] for data in CLASSIC_FORMULAS]

        mahuang = snapshot.get("mahuang-tang")
        assert mahuang.name == "麻黄汤"
        assert mahuang.composition == ("麻黄", "桂枝", "杏仁", "甘草")
        assert mahuang.standard_dosage == {"麻黄": 9, "桂枝": 6, "杏仁": 9, "甘草": 3}

    def test_no_seed(self, tmp_path):
        repository = FormulaRepository(tmp_path / "empty.sqlite", seed=False)
        assert len(repository.snapshot()) == 0
        assert repository.list_herb_info() == {}

    def test_reopen_does_not_reseed(self, tmp_path):
        db_path = tmp_path / "formulas.sqlite"
        first = FormulaRepository(db_path)
        first.delete_formula("mahuang-tang")

        reopened = FormulaRepository(db_path)
        assert reopened.get_formula("mahuang-tang") is None
        assert len(reopened.snapshot()) == len(CLASSIC_FORMULAS) - 1

    def test_snapshot_unchanged_by_later_writes(self, formula_repository):
        before = formula_repository.snapshot()
        formula = build_formula_from_form(name="麻桂各半汤", composition="麻黄 桂枝 白芍 生姜 大枣 杏仁 甘草")

        formula_repository.add_formula(formula)
        after = formula_repository.snapshot()

        assert before.get(formula.id) is None
        assert len(before) == len(CLASSIC_FORMULAS)
        assert after.get(formula.id) == formula
        assert after.version > before.version

    def test_list_books(self, formula_repository):
        books = {item["source"]: item["count"] for item in formula_repository.list_books()}

        assert books["伤寒论"] == sum(1 for data in CLASSIC_FORMULAS if data["source"] == "伤寒论")
        assert sum(books.values()) == len(CLASSIC_FORMULAS)
        sources = [item["source"] for item in formula_repository.list_books()]
        assert sources == sorted(sources)


class TestFormulaWrites:

    def test_add_appends_to_end(self, formula_repository):
        formula = build_formula_from_form(name="三拗汤", composition="麻黄、杏仁、甘草", source="《局方》")
        formula_repository.add_formula(formula)

        snapshot = formula_repository.snapshot()
        assert snapshot.formulas[-1].id == formula.id
        assert snapshot.formulas[-1].source == "和剂局方"

    def test_add_duplicate_id(self, formula_repository):
        formula = build_formula_from_form(name="麻黄汤", composition="麻黄 桂枝", formula_id="mahuang-tang")
        with pytest.raises(ValueError):
            formula_repository.add_formula(formula)

    def test_update(self, formula_repository):
        formula = build_formula_from_form(
            name="麻黄汤",
            composition="麻黄 桂枝 杏仁 炙甘草",
            source="伤寒论",
            standard_dosage="麻黄:9 桂枝:6 杏仁:9 炙甘草:3",
            formula_id="mahuang-tang",
        )

        assert formula_repository.update_formula(formula)
        updated = formula_repository.get_formula("mahuang-tang")
        assert updated.composition == ("麻黄", "桂枝", "杏仁", "炙甘草")
        assert updated.standard_dosage["炙甘草"] == 3
        # 位置不变
        assert formula_repository.snapshot().formulas[0].id == "mahuang-tang"

    def test_update_missing(self, formula_repository):
        formula = build_formula_from_form(name="无名方", composition="麻黄", formula_id="missing")
        version = formula_repository.snapshot().version

        assert not formula_repository.update_formula(formula)
        assert formula_repository.snapshot().version == version

    def test_delete(self, formula_repository):
        assert formula_repository.delete_formula("baihu-tang")
        assert formula_repository.get_formula("baihu-tang") is None
        assert not formula_repository.delete_formula("baihu-tang")

    def test_concurrent_adds(self, formula_repository):
        formulas = [
            build_formula_from_form(name=f"测试方{i}", composition="麻黄 桂枝")
            for i in range(8)
        ]
        threads = [threading.Thread(target=formula_repository.add_formula, args=(f,)) for f in formulas]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = formula_repository.snapshot()
        assert len(snapshot) == len(CLASSIC_FORMULAS) + len(formulas)
        assert all(snapshot.get(f.id) for f in formulas)


class TestHerbInfo:

    def test_seeded_herb_info(self, formula_repository):
        detail = formula_repository.get_herb_info("麻黄")
        assert detail.effect == HERB_INFO["麻黄"]["effect"]
        assert len(formula_repository.list_herb_info()) == len(HERB_INFO)

    def test_upsert(self, formula_repository, sample_herb_detail):
        formula_repository.upsert_herb_info("麻黄", sample_herb_detail)
        assert formula_repository.get_herb_info("麻黄") == sample_herb_detail

        formula_repository.upsert_herb_info("紫苏叶", HerbDetail(effect="解表散寒，行气和胃。"))
        assert formula_repository.get_herb_info("紫苏叶").effect == "解表散寒，行气和胃。"

    def test_upsert_empty_name(self, formula_repository, sample_herb_detail):
        with pytest.raises(ValueError):
            formula_repository.upsert_herb_info("  ", sample_herb_detail)

    def test_unknown_herb(self, formula_repository):
        assert formula_repository.get_herb_info("不存在") is None


class TestFormulaBuilder:

    def test_split_composition(self):
        assert split_composition("熟地，山肉、山药,泽泻 丹皮") == ["熟地黄", "山茱萸", "山药", "泽泻", "牡丹皮"]
        assert split_composition(["元胡", " 川楝子 "]) == ["延胡索", "川楝子"]
        assert split_composition(None) == []

    def test_normalize_standard_dosage(self):
        assert normalize_standard_dosage("熟地:24 山药:12") == {"熟地黄": 24.0, "山药": 12.0}
        assert normalize_standard_dosage({"麻黄": "9", "桂枝": "适量"}) == {"麻黄": 9.0}
        assert normalize_standard_dosage("") is None
        assert normalize_standard_dosage("无剂量") is None

    def test_build_requires_name_and_composition(self):
        with pytest.raises(ValueError):
            build_formula_from_form(name="", composition="麻黄")
        with pytest.raises(ValueError):
            build_formula_from_form(name="麻黄汤", composition="  ")

    def test_build_defaults(self):
        formula = build_formula_from_form(name=" 麻桂汤 ", composition="麻黄 桂枝")

        assert formula.id.startswith("custom-")
        assert formula.name == "麻桂汤"
        assert formula.source == CUSTOM_SOURCE
        assert formula.standard_dosage is None
        assert not formula.is_ai_generated

    def test_formula_from_payload(self):
        formula = formula_from_payload(
            {"name": "六味地黄丸", "source": "《小儿药证直诀》",
             "composition": ["熟地", "山肉", "山药", "泽泻", "丹皮", "茯苓"],
             "standardDosage": "熟地:24 山肉:12"},
            formula_id="ai-test",
        )

        assert formula.id == "ai-test"
        assert formula.is_ai_generated
        assert formula.source == "小儿药证直诀"
        assert formula.composition[:2] == ("熟地黄", "山茱萸")
        assert formula.standard_dosage == {"熟地黄": 24.0, "山茱萸": 12.0}

    def test_formula_from_payload_incomplete(self):
        assert formula_from_payload({"name": "某方"}, formula_id="x") is None
        assert formula_from_payload({"composition": ["麻黄"]}, formula_id="x") is None

    @pytest.mark.regression
    @pytest.mark.parametrize("composition", [5, 3.5, {"麻黄": 9}, True])
    def test_split_composition_unsupported_shape(self, composition):
        assert split_composition(composition) == []

    @pytest.mark.regression
    @pytest.mark.parametrize("dosage", [["麻黄:9"], 9, ("麻黄", 9), True])
    def test_normalize_dosage_unsupported_shape(self, dosage):
        assert normalize_standard_dosage(dosage) is None


class TestStandardFormulaValue:
    """方剂值对象可哈希，剂量表与调用方隔离"""

    @pytest.mark.regression
    def test_hashable_with_dosage(self, formula_repository):
        snapshot = formula_repository.snapshot()
        mahuang = snapshot.get("mahuang-tang")

        assert mahuang.standard_dosage
        assert hash(mahuang) == hash(snapshot.get("mahuang-tang"))
        assert len(set(snapshot)) == len(snapshot)

    @pytest.mark.regression
    def test_dosage_copied_from_caller(self):
        dosage = {"麻黄": 9.0, "桂枝": 6.0}
        formula = StandardFormula(
            id="f", name="麻桂", source="未知",
            composition=["麻黄", "桂枝"], standard_dosage=dosage,
        )
        dosage["麻黄"] = 90.0

        assert formula.standard_dosage == {"麻黄": 9.0, "桂枝": 6.0}
        assert formula.composition == ("麻黄", "桂枝")

    def test_equality_compares_dosage(self):
        plain = StandardFormula(id="f", name="麻桂", source="未知", composition=("麻黄", "桂枝"))
        dosed = StandardFormula(
            id="f", name="麻桂", source="未知",
            composition=("麻黄", "桂枝"), standard_dosage={"麻黄": 9.0},
        )

        assert plain != dosed
        assert hash(plain) == hash(dosed)

#!/usr/bin/env python3
"""
方剂库
SQLite 存储经典方剂与管理端录入的方剂，检索时使用不可变快照

并发约定：
1. 写操作串行执行，每次写入后发布新的快照
2. 检索过程持有开始时的快照，不受并发写入影响
"""

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from tcm_formula.config.settings import PATHS
from tcm_formula.core.formula_matching.models import HerbDetail, StandardFormula

from .seed_formulas import CLASSIC_FORMULAS, HERB_INFO

logger = logging.getLogger(__name__)


class FormulaNotFoundError(LookupError):
    """方剂ID不存在"""


@dataclass(frozen=True)
class FormulaSnapshot:
    """方剂库快照"""
    version: int
    formulas: Tuple[StandardFormula, ...]

    def __iter__(self) -> Iterator[StandardFormula]:
        return iter(self.formulas)

    def __len__(self) -> int:
        return len(self.formulas)

    def get(self, formula_id: str) -> Optional[StandardFormula]:
        for formula in self.formulas:
            if formula.id == formula_id:
                return formula
        return None


class FormulaRepository:
    """方剂库"""

    def __init__(self, db_path: Union[str, Path, None] = None, seed: bool = True):
        self.db_path = Path(db_path or PATHS["formula_db"])
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._write_lock = threading.Lock()
        self._version = 0

        self._init_database()
        if seed:
            self._seed_if_empty()
        self._snapshot = self._load_snapshot()

        logger.info(f"✅ 方剂库初始化完成: {self.db_path} ({len(self._snapshot)}首方剂)")

    @contextmanager
    def _connection(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"方剂库操作失败: {e}")
            raise
        finally:
            conn.close()

    def _init_database(self):
        with self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS formulas (
                    id TEXT PRIMARY KEY,
                    position INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    source TEXT,
                    composition TEXT NOT NULL,
                    standard_dosage TEXT,
                    usage TEXT,
                    effect TEXT,
                    indications TEXT,
                    analysis TEXT,
                    is_ai_generated INTEGER DEFAULT 0,
                    pinyin TEXT,
                    category TEXT,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS herb_info (
                    name TEXT PRIMARY KEY,
                    detail TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

    def _seed_if_empty(self):
        with self._connection() as conn:
            count = conn.execute("SELECT COUNT(*) FROM formulas").fetchone()[0]
            if count:
                return
            for position, data in enumerate(CLASSIC_FORMULAS):
                self._insert(conn, StandardFormula.from_dict(data), position)
            for name, detail in HERB_INFO.items():
                conn.execute(
                    "INSERT OR IGNORE INTO herb_info (name, detail) VALUES (?, ?)",
                    (name, json.dumps(detail, ensure_ascii=False))
                )
        logger.info(f"📚 写入种子数据: {len(CLASSIC_FORMULAS)}首方剂, {len(HERB_INFO)}味药物")

    @staticmethod
    def _insert(conn: sqlite3.Connection, formula: StandardFormula, position: int):
        conn.execute("""
            INSERT INTO formulas (id, position, name, source, composition, standard_dosage,
                                  usage, effect, indications, analysis, is_ai_generated, pinyin, category)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            formula.id, position, formula.name, formula.source,
            json.dumps(list(formula.composition), ensure_ascii=False),
            json.dumps(formula.standard_dosage, ensure_ascii=False) if formula.standard_dosage else None,
            formula.usage, formula.effect, formula.indications, formula.analysis,
            int(formula.is_ai_generated), formula.pinyin, formula.category,
        ))

    @staticmethod
    def _row_to_formula(row: sqlite3.Row) -> StandardFormula:
        standard_dosage = json.loads(row['standard_dosage']) if row['standard_dosage'] else None
        return StandardFormula(
            id=row['id'],
            name=row['name'],
            source=row['source'] or '',
            composition=tuple(json.loads(row['composition'])),
            standard_dosage=standard_dosage,
            usage=row['usage'] or '',
            effect=row['effect'] or '',
            indications=row['indications'] or '',
            analysis=row['analysis'] or '',
            is_ai_generated=bool(row['is_ai_generated']),
            pinyin=row['pinyin'] or '',
            category=row['category'] or '',
        )

    def _load_snapshot(self) -> FormulaSnapshot:
        with self._connection() as conn:
            rows = conn.execute("SELECT * FROM formulas ORDER BY position").fetchall()
        self._version += 1
        return FormulaSnapshot(
            version=self._version,
            formulas=tuple(self._row_to_formula(row) for row in rows),
        )

    def _publish(self):
        self._snapshot = self._load_snapshot()
        logger.info(f"📦 发布方剂库快照 v{self._snapshot.version} ({len(self._snapshot)}首方剂)")

    # ---- 读 ----

    def snapshot(self) -> FormulaSnapshot:
        """当前快照，检索期间应始终使用同一份快照"""
        return self._snapshot

    def get_formula(self, formula_id: str) -> Optional[StandardFormula]:
        return self._snapshot.get(formula_id)

    def list_books(self) -> List[Dict[str, object]]:
        """按出处统计方剂数量"""
        counts: Dict[str, int] = {}
        for formula in self._snapshot:
            counts[formula.source] = counts.get(formula.source, 0) + 1
        return [{"source": source, "count": counts[source]} for source in sorted(counts)]

    # ---- 写 ----

    def add_formula(self, formula: StandardFormula) -> StandardFormula:
        """
        新增方剂

        Raises:
            ValueError: id 已存在
        """
        with self._write_lock:
            with self._connection() as conn:
                exists = conn.execute("SELECT 1 FROM formulas WHERE id = ?", (formula.id,)).fetchone()
                if exists:
                    raise ValueError(f"方剂ID已存在: {formula.id}")
                position = conn.execute("SELECT COALESCE(MAX(position), -1) + 1 FROM formulas").fetchone()[0]
                self._insert(conn, formula, position)
            self._publish()
        logger.info(f"➕ 新增方剂: {formula.name} ({formula.id})")
        return formula

    def update_formula(self, formula: StandardFormula) -> bool:
        """按 id 更新方剂，不存在时返回 False"""
        with self._write_lock:
            with self._connection() as conn:
                cursor = conn.execute("""
                    UPDATE formulas
                    SET name = ?, source = ?, composition = ?, standard_dosage = ?,
                        usage = ?, effect = ?, indications = ?, analysis = ?,
                        is_ai_generated = ?, pinyin = ?, category = ?,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                """, (
                    formula.name, formula.source,
                    json.dumps(list(formula.composition), ensure_ascii=False),
                    json.dumps(formula.standard_dosage, ensure_ascii=False) if formula.standard_dosage else None,
                    formula.usage, formula.effect, formula.indications, formula.analysis,
                    int(formula.is_ai_generated), formula.pinyin, formula.category,
                    formula.id,
                ))
                updated = cursor.rowcount > 0
            if updated:
                self._publish()
        if updated:
            logger.info(f"✏️ 更新方剂: {formula.name} ({formula.id})")
        return updated

    def delete_formula(self, formula_id: str) -> bool:
        with self._write_lock:
            with self._connection() as conn:
                deleted = conn.execute("DELETE FROM formulas WHERE id = ?", (formula_id,)).rowcount > 0
            if deleted:
                self._publish()
        if deleted:
            logger.info(f"🗑️ 删除方剂: {formula_id}")
        return deleted

    # ---- 药物信息 ----

    def get_herb_info(self, name: str) -> Optional[HerbDetail]:
        with self._connection() as conn:
            row = conn.execute("SELECT detail FROM herb_info WHERE name = ?", (name,)).fetchone()
        return HerbDetail.from_dict(json.loads(row['detail'])) if row else None

    def list_herb_info(self) -> Dict[str, HerbDetail]:
        with self._connection() as conn:
            rows = conn.execute("SELECT name, detail FROM herb_info ORDER BY name").fetchall()
        return {row['name']: HerbDetail.from_dict(json.loads(row['detail'])) for row in rows}

    def upsert_herb_info(self, name: str, detail: HerbDetail) -> None:
        if not name or not name.strip():
            raise ValueError("药名不能为空")
        with self._write_lock:
            with self._connection() as conn:
                conn.execute("""
                    INSERT INTO herb_info (name, detail) VALUES (?, ?)
                    ON CONFLICT(name) DO UPDATE SET detail = excluded.detail, updated_at = CURRENT_TIMESTAMP
                """, (name.strip(), json.dumps(detail.to_dict(), ensure_ascii=False)))
        logger.info(f"🌿 更新药物信息: {name}")


# 全局实例
_formula_repository = None


def get_formula_repository() -> FormulaRepository:
    """获取方剂库实例"""
    global _formula_repository
    if _formula_repository is None:
        _formula_repository = FormulaRepository()
    return _formula_repository

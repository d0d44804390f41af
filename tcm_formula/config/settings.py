"""
TCM 方剂识别系统 - 统一配置管理
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# 项目根目录
PROJECT_ROOT = Path(os.getenv("TCM_FORMULA_ROOT", Path(__file__).resolve().parents[2]))

# 加载环境变量
env_file = PROJECT_ROOT / "config" / ".env"
if env_file.exists():
    load_dotenv(env_file)

# 基础路径配置
PATHS = {
    "project_root": PROJECT_ROOT,
    "data_dir": PROJECT_ROOT / "data",
    "logs_dir": PROJECT_ROOT / "logs",
    "formula_db": Path(os.getenv("FORMULA_DB_PATH", PROJECT_ROOT / "data" / "formulas.sqlite")),
}

# API配置
API_CONFIG = {
    "host": os.getenv("HOST", "0.0.0.0"),
    "port": int(os.getenv("PORT", 8000)),
    "workers": int(os.getenv("WORKERS", 1)),
    "log_level": os.getenv("LOG_LEVEL", "INFO")
}

# AI模型配置
AI_CONFIG = {
    "dashscope_api_key": os.getenv("DASHSCOPE_API_KEY", ""),
    "default_model": os.getenv("AI_MODEL", "qwen-max"),
    "model_timeout": int(os.getenv("MODEL_TIMEOUT", 40)),
    # 是否启用AI识别与分析
    "enabled": os.getenv("AI_ENABLED", "true").lower() == "true",
}

# 方剂匹配阈值（经验值，可通过环境变量覆盖）
MATCHING_CONFIG = {
    "recall_weight": float(os.getenv("MATCH_RECALL_WEIGHT", 0.6)),
    "precision_weight": float(os.getenv("MATCH_PRECISION_WEIGHT", 0.4)),
    "noise_input_size": int(os.getenv("MATCH_NOISE_INPUT_SIZE", 4)),
    "noise_max_overlap": int(os.getenv("MATCH_NOISE_MAX_OVERLAP", 1)),
    "ratio_mismatch_threshold": float(os.getenv("MATCH_RATIO_MISMATCH_THRESHOLD", 0.85)),
    "combined_min_leftovers": int(os.getenv("MATCH_COMBINED_MIN_LEFTOVERS", 2)),
    "combined_min_explained": int(os.getenv("MATCH_COMBINED_MIN_EXPLAINED", 2)),
    "low_confidence_score": float(os.getenv("MATCH_LOW_CONFIDENCE_SCORE", 0.5)),
}

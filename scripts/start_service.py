#!/usr/bin/env python3
"""
TCM 方剂识别系统启动脚本
"""
import sys

import uvicorn

from tcm_formula.api.app import configure_logging, create_app
from tcm_formula.config.settings import API_CONFIG

if __name__ == "__main__":
    configure_logging()
    try:
        print("🚀 启动TCM方剂识别系统...")
        uvicorn.run(
            create_app(),
            host=API_CONFIG["host"],
            port=API_CONFIG["port"],
            log_level=API_CONFIG["log_level"].lower(),
        )
    except Exception as e:
        print(f"❌ 启动失败: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)

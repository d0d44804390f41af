#!/usr/bin/env python3
"""
TCM 方剂识别系统 - FastAPI 应用
"""

import logging

from fastapi import FastAPI

from tcm_formula import __version__
from tcm_formula.api.middleware.exception_handler import setup_exception_handlers
from tcm_formula.api.routes import formula_admin_routes, formula_routes
from tcm_formula.config.settings import API_CONFIG

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """创建应用并注册路由"""
    app = FastAPI(title="TCM 方剂识别系统", version=__version__)

    setup_exception_handlers(app)
    app.include_router(formula_routes.router)
    app.include_router(formula_admin_routes.router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    logger.info("✅ 方剂识别API已加载")
    return app


def configure_logging(level: str = API_CONFIG["log_level"]):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

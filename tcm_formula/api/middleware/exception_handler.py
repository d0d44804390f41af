#!/usr/bin/env python3
"""
全局异常处理中间件
统一处理所有API异常，确保响应格式一致
"""

import logging
import traceback

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tcm_formula.api.utils.api_response import APIResponse
from tcm_formula.core.ai_analysis.formula_ai_service import AIServiceError
from tcm_formula.core.formula_database.formula_repository import FormulaNotFoundError

logger = logging.getLogger(__name__)

# 映射状态码到错误代码
ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
    503: "SERVICE_UNAVAILABLE"
}


def setup_exception_handlers(app: FastAPI):
    """设置全局异常处理器"""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """HTTP异常处理器 - 统一响应格式"""
        logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail}")
        return APIResponse.error(
            code=ERROR_CODES.get(exc.status_code, "UNKNOWN_ERROR"),
            message=str(exc.detail),
            details=f"HTTP {exc.status_code}",
            status_code=exc.status_code
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(request: Request, exc: StarletteHTTPException):
        """Starlette HTTP异常处理器"""
        return await http_exception_handler(request, HTTPException(status_code=exc.status_code, detail=exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """请求参数校验失败"""
        logger.warning(f"Validation Error: {exc.errors()}")
        return APIResponse.error(
            code="VALIDATION_ERROR",
            message="请求参数不正确",
            details=str(exc.errors()),
            status_code=422
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        """值错误处理器"""
        logger.error(f"Value Error: {exc}")
        return APIResponse.error(
            code="INVALID_VALUE",
            message="提供的数据格式不正确",
            details=str(exc),
            status_code=400
        )

    @app.exception_handler(FormulaNotFoundError)
    async def formula_not_found_handler(request: Request, exc: FormulaNotFoundError):
        """资源不存在"""
        logger.warning(f"Formula Not Found: {exc}")
        return APIResponse.not_found("方剂")

    @app.exception_handler(AIServiceError)
    async def ai_service_error_handler(request: Request, exc: AIServiceError):
        """AI服务不可用"""
        logger.error(f"AI Service Error: {exc}")
        return APIResponse.error(
            code="SERVICE_UNAVAILABLE",
            message="AI服务暂时不可用，请稍后重试",
            details=str(exc),
            status_code=503
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """通用异常处理器 - 处理所有未捕获的异常"""
        logger.error(f"Unhandled Exception: {type(exc).__name__}: {exc}")
        logger.error(f"Traceback: {traceback.format_exc()}")

        # 生产环境不暴露详细错误信息
        error_details = str(exc) if logger.isEnabledFor(logging.DEBUG) else "内部服务器错误"
        return APIResponse.error(
            code="INTERNAL_ERROR",
            message="服务器内部错误，请稍后重试",
            details=error_details,
            status_code=500
        )

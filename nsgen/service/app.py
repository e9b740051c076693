"""FastAPI application entrypoint for nsgen service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..blocks import parse_blocks
from ..compiler import NamespaceCompiler, PassResult
from ..config import DEFAULT_MANIFEST
from ..directives import ALL_KINDS, IMPORT_KINDS
from ..errors import NamespaceError


class CompileRequest(BaseModel):
    blocks: List[Dict[str, Any]] = Field(default_factory=list)
    stage: Literal["pre", "full"] = "full"


class IssuePayload(BaseModel):
    location: str
    tag: str
    message: str


class CompileResponse(BaseModel):
    lines: List[str]
    issues: List[IssuePayload]


class HealthResponse(BaseModel):
    status: str


def _default_compiler() -> NamespaceCompiler:
    # Service mode never writes; the path only names the manifest.
    return NamespaceCompiler(Path(DEFAULT_MANIFEST))


def create_app(
    compiler_factory: Callable[[], NamespaceCompiler] = _default_compiler,
) -> FastAPI:
    """Create the FastAPI application exposing the directive compiler."""

    app = FastAPI(title="nsgen Service", version="1.0.0")

    async def get_compiler() -> NamespaceCompiler:
        return compiler_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/compile", response_model=CompileResponse)
    async def compile_blocks(
        payload: CompileRequest,
        compiler: NamespaceCompiler = Depends(get_compiler),
    ) -> CompileResponse:
        def _run_compile() -> PassResult:
            blocks, load_issues = parse_blocks(payload.blocks, source="request")
            kinds = IMPORT_KINDS if payload.stage == "pre" else ALL_KINDS
            result = compiler.compile(blocks, kinds)
            result.issues[:0] = load_issues
            return result

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_compile)
        return CompileResponse(
            lines=result.lines,
            issues=[
                IssuePayload(location=issue.location, tag=issue.tag, message=issue.message)
                for issue in result.issues
            ],
        )

    @app.exception_handler(NamespaceError)
    async def namespace_error_handler(
        _: Any, exc: NamespaceError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]

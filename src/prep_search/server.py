"""
FastAPI server for problem search.

Exposes company search, free-text semantic search, title search and
problem lookup over the DuckDB problem catalogue.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import SearchSettings, configure_logging
from .embeddings import EmbeddingProvider
from .errors import (
    CatalogueUnavailable,
    ProblemNotFound,
    SearchError,
    error_response,
)
from .llm import LanguageModel
from .models import (
    CompanySearchRequest,
    ProblemOut,
    QuerySearchRequest,
    TitleSearchRequest,
)
from .search import ProblemSearchService
from .search.ranker import QueryEmbedder
from .search.rewriter import CompletionModel
from .storage import DuckDBProblemStorage, ProblemRecord

logger = logging.getLogger(__name__)

app = FastAPI(title="PrepSearch", description="Semantic search for interview problems")


@dataclass(frozen=True)
class SearchDependencies:
    """Provider clients shared by every request of the process."""

    settings: SearchSettings
    embedding_provider: QueryEmbedder
    llm: CompletionModel


_settings: SearchSettings | None = None
_dependencies: SearchDependencies | None = None


def configure_dependencies(dependencies: SearchDependencies) -> None:
    global _settings, _dependencies
    _settings = dependencies.settings
    _dependencies = dependencies


def reset_dependencies() -> None:
    global _settings, _dependencies
    _settings = None
    _dependencies = None


def get_settings() -> SearchSettings:
    """Settings alone, enough for catalogue lookups that call no model."""
    global _settings
    if _settings is None:
        _settings = SearchSettings.from_env()
    return _settings


def get_dependencies() -> SearchDependencies:
    global _dependencies
    if _dependencies is None:
        settings = get_settings()
        _dependencies = SearchDependencies(
            settings=settings,
            embedding_provider=EmbeddingProvider.from_settings(settings),
            llm=LanguageModel.from_settings(settings),
        )
    return _dependencies


def _open_storage(settings: SearchSettings) -> DuckDBProblemStorage:
    db_path = settings.resolved_db_path()
    if not Path(db_path).exists():
        raise CatalogueUnavailable(f"No problem catalogue found at {db_path}")
    return DuckDBProblemStorage(db_path, read_only=True, initialize=False)


def _problems_payload(problems: list[ProblemRecord]) -> list[dict]:
    return [ProblemOut.from_record(problem).model_dump() for problem in problems]


@app.exception_handler(SearchError)
async def handle_search_error(request: Request, exc: SearchError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(error_response(exc), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Validation error") if errors else "Validation error"
    return JSONResponse(
        {"error": {"code": "VALIDATION_ERROR", "message": message}},
        status_code=400,
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("%s %s failed", request.method, request.url.path)
    return JSONResponse(error_response(exc), status_code=500)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.post("/api/dsa/search/company")
async def search_by_company(request: CompanySearchRequest):
    """Top problems for a company and role by title similarity."""
    deps = get_dependencies()
    storage = _open_storage(deps.settings)
    try:
        service = ProblemSearchService(
            storage,
            deps.embedding_provider,
            deps.llm,
            max_query_limit=deps.settings.max_query_limit,
        )
        problems = await asyncio.to_thread(
            service.rank_by_company, request.company_name, request.role
        )
    finally:
        storage.close()
    return {
        "company_name": request.company_name,
        "role": request.role,
        "problems": _problems_payload(problems),
    }


@app.post("/api/dsa/search/query")
async def search_by_query(request: QuerySearchRequest):
    """Free-text semantic search with LLM re-ranking."""
    deps = get_dependencies()
    storage = _open_storage(deps.settings)
    try:
        service = ProblemSearchService(
            storage,
            deps.embedding_provider,
            deps.llm,
            max_query_limit=deps.settings.max_query_limit,
        )
        problems = await asyncio.to_thread(
            service.rank_by_query, request.query, request.limit
        )
    finally:
        storage.close()
    return {"query": request.query, "problems": _problems_payload(problems)}


@app.post("/api/dsa/problems/search")
async def search_problems(request: TitleSearchRequest):
    """Substring search on titles, slugs and question ids."""
    storage = _open_storage(get_settings())
    try:
        problems = storage.search_problems_by_title(request.query, request.limit)
    finally:
        storage.close()
    return {"query": request.query, "problems": _problems_payload(problems)}


@app.get("/api/dsa/problems/{problem_id}")
async def get_problem(problem_id: str):
    storage = _open_storage(get_settings())
    try:
        problem = storage.find_problem_by_id(problem_id)
    finally:
        storage.close()
    if problem is None:
        raise ProblemNotFound(f"Problem not found: {problem_id}")
    return ProblemOut.from_record(problem).model_dump()


def run_server(host: str = "127.0.0.1", port: int = 8000, db_path: str | None = None):
    """Run the FastAPI server."""
    import uvicorn

    global _settings
    if db_path is not None:
        _settings = SearchSettings.from_env(db_path=db_path)
    configure_logging(get_settings().log_level)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()

from typing import Annotated

from rich.console import Console
from rich.table import Table
from typer import Argument, Exit, Option, Typer

from .config import SearchSettings, configure_logging
from .embeddings import EmbeddingProvider
from .errors import SearchError
from .indexing import EmbeddingBackfill, load_problems_file
from .search import ProblemSearchService
from .storage import DuckDBProblemStorage, ProblemRecord

app = Typer(help="Semantic search over interview coding problems.")

DbPathOption = Annotated[
    str | None,
    Option("--db-path", help="DuckDB file (defaults to PREP_SEARCH_DB_PATH)."),
]


def _settings(db_path: str | None) -> SearchSettings:
    settings = SearchSettings.from_env(db_path=db_path)
    configure_logging(settings.log_level)
    return settings


def _print_problems(console: Console, title: str, problems: list[ProblemRecord]) -> None:
    if not problems:
        console.print("[bold yellow]No matching problems.[/]")
        return
    table = Table(title=title, title_justify="left")
    table.add_column("#", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Difficulty")
    table.add_column("Tags")
    for rank, problem in enumerate(problems, start=1):
        table.add_row(
            str(rank),
            problem.frontend_question_id or problem.id,
            problem.title,
            problem.difficulty,
            ", ".join(problem.topic_tags),
        )
    console.print(table)


@app.command("import-problems")
def import_problems(
    path: Annotated[str, Argument(help="JSON file with an array of problems.")],
    db_path: DbPathOption = None,
) -> None:
    """Load a problem catalogue export into the database."""
    console = Console()
    settings = _settings(db_path)
    try:
        problems = load_problems_file(path)
    except ValueError as exc:
        console.print(f"[bold red]{exc}[/]")
        raise Exit(code=1)
    storage = DuckDBProblemStorage(settings.resolved_db_path())
    try:
        written = storage.upsert_problems(problems)
        total = storage.count_problems()
    finally:
        storage.close()
    console.print(f"[bold green]Imported {written} problems[/] ({total} in catalogue)")


@app.command("embed")
def embed(
    db_path: DbPathOption = None,
    force: Annotated[
        bool, Option("--force", help="Re-embed every title, not only missing ones.")
    ] = False,
) -> None:
    """Embed problem titles that have no stored vector."""
    console = Console()
    settings = _settings(db_path)
    try:
        provider = EmbeddingProvider.from_settings(settings)
    except ValueError as exc:
        console.print(f"[bold red]{exc}[/]")
        raise Exit(code=1)
    storage = DuckDBProblemStorage(settings.resolved_db_path())
    try:
        with console.status("Embedding problem titles..."):
            result = EmbeddingBackfill(storage, provider).run(force=force)
    finally:
        storage.close()
    console.print(
        f"[bold green]Wrote {result.embeddings_written} embeddings[/] "
        f"for {result.problems_seen} problems"
    )


def _open_service(settings: SearchSettings) -> tuple[DuckDBProblemStorage, ProblemSearchService]:
    storage = DuckDBProblemStorage(settings.resolved_db_path())
    try:
        service = ProblemSearchService.from_settings(settings, storage)
    except ValueError:
        storage.close()
        raise
    return storage, service


@app.command("search")
def search(
    query: Annotated[str, Argument(help='Free-text query, e.g. "swiggy sde1".')],
    limit: Annotated[int, Option("--limit", "-n", help="Maximum results.")] = 100,
    db_path: DbPathOption = None,
) -> None:
    """Free-text semantic search with LLM re-ranking."""
    console = Console()
    settings = _settings(db_path)
    try:
        storage, service = _open_service(settings)
    except ValueError as exc:
        console.print(f"[bold red]{exc}[/]")
        raise Exit(code=1)
    try:
        with console.status("Searching..."):
            problems = service.rank_by_query(query, limit)
    except SearchError as exc:
        console.print(f"[bold red]{exc.message}[/]")
        raise Exit(code=1)
    finally:
        storage.close()
    _print_problems(console, f"Results for {query!r}", problems)


@app.command("company")
def company(
    company_name: Annotated[str, Argument(help="Company name.")],
    role: Annotated[str, Option("--role", "-r", help="Role or level.")] = "SDE",
    db_path: DbPathOption = None,
) -> None:
    """Top problems for a company and role."""
    console = Console()
    settings = _settings(db_path)
    try:
        storage, service = _open_service(settings)
    except ValueError as exc:
        console.print(f"[bold red]{exc}[/]")
        raise Exit(code=1)
    try:
        with console.status("Searching..."):
            problems = service.rank_by_company(company_name, role)
    except SearchError as exc:
        console.print(f"[bold red]{exc.message}[/]")
        raise Exit(code=1)
    finally:
        storage.close()
    _print_problems(console, f"{company_name} {role}", problems)


@app.command("serve")
def serve(
    host: Annotated[str, Option("--host")] = "127.0.0.1",
    port: Annotated[int, Option("--port")] = 8000,
    db_path: DbPathOption = None,
) -> None:
    """Start the HTTP API."""
    from .server import run_server

    run_server(host=host, port=port, db_path=db_path)

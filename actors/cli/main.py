"""Stash CLI actor implemented with Typer."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable

import typer
from sqlalchemy.exc import SQLAlchemyError

from packages.stash_shared.config import StashSettings, load_settings
from packages.stash_shared.errors import StashError, exception_to_error
from packages.stash_shared.logging import configure_logging
from services.state.file_storage.service import (
    FileStorageService,
    build_file_storage_service,
)

SUCCESS_EXIT_CODE = 0
NOT_FOUND_EXIT_CODE = 1
DOMAIN_ERROR_EXIT_CODE = 3
DEPENDENCY_ERROR_EXIT_CODE = 4

_STDIN_SOURCE = "-"


@dataclass(frozen=True)
class CliConfig:
    """Global CLI runtime options propagated to service construction."""

    root: str | None
    database_url: str | None
    config_path: Path | None
    as_json: bool
    verbose: bool


def _serialize(value: Any) -> Any:
    """Convert result objects to JSON-serializable structures."""

    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return _serialize(value.value)
    if isinstance(value, (datetime, date, Path)):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _serialize(dataclasses.asdict(value))
    if isinstance(value, dict):
        return {str(key): _serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_serialize(item) for item in value]
    if hasattr(value, "model_dump"):
        return _serialize(value.model_dump(mode="python"))
    return str(value)


def _emit_output(result: Any, as_json: bool) -> None:
    """Render command output in requested format."""

    data = _serialize(result)
    if as_json:
        typer.echo(json.dumps(data, sort_keys=True, separators=(",", ":")))
        return
    if data is None:
        typer.echo("ok")
        return
    if isinstance(data, (dict, list)):
        typer.echo(json.dumps(data, indent=2, sort_keys=True))
        return
    typer.echo(str(data))


def _emit_error(exc: Exception, as_json: bool) -> None:
    """Render a normalized error to stderr."""

    detail = exception_to_error(exc)
    if as_json:
        typer.echo(
            json.dumps(
                {
                    "error": {
                        "code": detail.code,
                        "message": detail.message,
                        "category": detail.category.value,
                        "metadata": dict(detail.metadata),
                    }
                },
                sort_keys=True,
            ),
            err=True,
        )
        return
    typer.echo(f"error: {detail.message}", err=True)


def _settings_for(cfg: CliConfig) -> StashSettings:
    """Load settings with CLI overrides on top of env and YAML."""
    overrides: dict[str, Any] = {}
    if cfg.root is not None:
        overrides["filesystem"] = {"root_dir": cfg.root}
    if cfg.database_url is not None:
        overrides["sql"] = {"url": cfg.database_url}
    cli_params = {"components": {"substrate": overrides}} if overrides else None
    return load_settings(cli_params=cli_params, config_path=cfg.config_path)


def _run_command(cfg: CliConfig, invoke: Callable[[FileStorageService], Any]) -> Any:
    """Execute one service call and map errors to process semantics."""
    try:
        settings = _settings_for(cfg)
        configure_logging(
            level=settings.logging.level if cfg.verbose else "WARNING",
            json_output=settings.logging.json_output,
            service=settings.logging.service,
            environment=settings.logging.environment,
        )
        return invoke(build_file_storage_service(settings=settings))
    except StashError as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=DOMAIN_ERROR_EXIT_CODE) from exc
    except (OSError, SQLAlchemyError) as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=DEPENDENCY_ERROR_EXIT_CODE) from exc
    except ValueError as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=DOMAIN_ERROR_EXIT_CODE) from exc


def _require_config(ctx: typer.Context) -> CliConfig:
    """Return required CLI config from Typer context."""

    config = ctx.obj
    if not isinstance(config, CliConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


app = typer.Typer(no_args_is_help=True, help="Stash content-addressed file store")


@app.callback()
def main(
    ctx: typer.Context,
    root: str | None = typer.Option(
        None,
        help="Blob storage root (overrides components.substrate.filesystem.root_dir)",
    ),
    database_url: str | None = typer.Option(
        None,
        help="SQLAlchemy URL of the metadata store",
    ),
    config: Path | None = typer.Option(
        None, "--config", help="YAML config file path"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON output"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log at the configured level instead of WARNING"
    ),
) -> None:
    """Store global options for all commands."""

    ctx.obj = CliConfig(
        root=root,
        database_url=database_url,
        config_path=config,
        as_json=as_json,
        verbose=verbose,
    )


@app.command("import")
def import_command(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="File to import, or '-' for stdin"),
    virtual_path: str = typer.Argument(..., help="Virtual path to store it under"),
    extension: str = typer.Option(
        "", help="Stored extension when reading from stdin"
    ),
) -> None:
    """Move one file into the store. The source file is consumed."""
    cfg = _require_config(ctx)
    if source == _STDIN_SOURCE:
        content = typer.get_binary_stream("stdin").read()
        result = _run_command(
            cfg,
            lambda service: service.import_bytes(
                content=content, virtual_path=virtual_path, extension=extension
            ),
        )
    else:
        result = _run_command(
            cfg,
            lambda service: service.import_file(
                source_path=Path(source), virtual_path=virtual_path
            ),
        )
    _emit_output(result, cfg.as_json)


@app.command("resolve")
def resolve_command(
    ctx: typer.Context,
    virtual_path: str = typer.Argument(..., help="Virtual path to resolve"),
) -> None:
    """Print the physical path holding one virtual path's bytes."""
    cfg = _require_config(ctx)
    path = _run_command(cfg, lambda service: service.resolve(virtual_path=virtual_path))
    if path is None:
        if cfg.as_json:
            typer.echo(json.dumps({"virtual_path": virtual_path, "path": None}))
        else:
            typer.echo(f"not found: {virtual_path}", err=True)
        raise typer.Exit(code=NOT_FOUND_EXIT_CODE)
    if cfg.as_json:
        typer.echo(json.dumps({"virtual_path": virtual_path, "path": str(path)}))
        return
    typer.echo(str(path))


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    virtual_paths: list[str] = typer.Argument(..., help="Virtual paths to delete"),
) -> None:
    """Delete references; absent paths are reported but not an error."""
    cfg = _require_config(ctx)
    deleted = _run_command(
        cfg,
        lambda service: {
            path: service.delete_reference(virtual_path=path) for path in virtual_paths
        },
    )
    if cfg.as_json:
        _emit_output(deleted, as_json=True)
        return
    for path, existed in deleted.items():
        typer.echo(f"{'deleted' if existed else 'absent'}: {path}")


@app.command("migrate")
def migrate_command(ctx: typer.Context) -> None:
    """Move blobs from the legacy flat layout into sharded directories."""
    cfg = _require_config(ctx)
    report = _run_command(cfg, lambda service: service.migrate_layout())
    if cfg.as_json:
        _emit_output(report, as_json=True)
        return
    typer.echo(
        f"moved: {len(report.moved)}, "
        f"dropped duplicates: {len(report.dropped_duplicates)}, "
        f"skipped: {len(report.skipped)}"
    )


@app.command("clear")
def clear_command(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", help="Do not ask for confirmation"),
) -> None:
    """Delete every stored blob and every reference."""
    cfg = _require_config(ctx)
    if not yes:
        typer.confirm("Delete every stored blob and reference?", abort=True)
    removed = _run_command(cfg, lambda service: service.clear())
    _emit_output({"references_removed": removed}, cfg.as_json)


if __name__ == "__main__":
    app()

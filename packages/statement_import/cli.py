# ruff: noqa: I001
"""CLI for the ``statement_import`` package (``financier``).

Commands
--------
- ``import``: import a SEB statement CSV into the ledger.
- ``init-db``: create the ledger tables from the ORM metadata.
- ``add-account``: register an account so statements can be imported into it.
- ``accounts``: list registered accounts with their balances.

Environment variables are loaded from a local ``.env`` using ``python-dotenv``
before any command runs. The database URL comes from ``--database-url``, then
``DATABASE_URL``, then the ``databasePath`` entry of the config file.
"""

from __future__ import annotations

import os
import sys
import traceback
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from db.client import dispose_engine, get_engine, session_scope
from .config import Settings, load_config
from .errors import ConfigurationError, StatementImportError
from .logging_setup import configure_logging
from .models import BankCode, Currency, ImportResult, format_amount


# ---- Small module-level helpers used by CLI commands -------------------------


def _fail(message: str, exc: BaseException | None = None, *, verbose: bool = False) -> typer.Exit:
    print(f"Error: {message}", file=sys.stderr)
    if verbose and exc is not None:
        traceback.print_exception(exc, file=sys.stderr)
    return typer.Exit(code=1)


def _resolve_database_url(database_url: str | None) -> tuple[Settings, str]:
    settings = load_config()
    url = database_url or settings.database_url()
    if url.startswith("sqlite:///") and not os.getenv("DATABASE_URL") and database_url is None:
        settings.database_file.parent.mkdir(parents=True, exist_ok=True)
    return settings, url


def _print_summary(console: Console, result: ImportResult, *, dry_run: bool) -> None:
    stats = result.statistics
    title = "Import summary (dry run)" if dry_run else "Import summary"
    console.print(f"[bold]{title}[/bold]")
    console.print(f"  Total rows: {stats.total_rows}")
    console.print(f"  {'Would import' if dry_run else 'Imported'}: {stats.imported}")
    console.print(f"  Duplicates: {stats.duplicates}")
    console.print(f"  Failed: {stats.failed}")
    console.print(f"  Accounts: {', '.join(stats.accounts)}")
    if dry_run:
        console.print("Dry run: no changes were written.")

    if result.errors:
        console.print("[bold]Errors:[/bold]")
        for err in result.errors:
            where = f"Line {err.row}: " if err.row and not err.message.startswith("Line ") else ""
            console.print(f"  {where}{err.message}", markup=False)

    if result.duplicate_transactions:
        table = Table(title="Duplicate transactions")
        for col in ("Date", "Account", "External ID", "Amount", "Merchant"):
            table.add_column(col)
        for tx in result.duplicate_transactions:
            table.add_row(
                tx.date.isoformat(),
                tx.account_number,
                tx.external_id,
                format_amount(tx.amount, tx.currency),
                tx.merchant or "",
            )
        console.print(table)


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    name="financier",
    no_args_is_help=True,
    add_completion=False,
    help="Import bank CSV statements into the local ledger.",
)


@app.command("import")
def import_cmd(
    csv_file: Annotated[
        Path, typer.Argument(help="Path to the statement CSV.", dir_okay=False)
    ],
    *,
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be imported."),
    account: str | None = typer.Option(
        None, "--account", help="Import every transaction into this account id."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress and tracebacks."),
    show_duplicates: bool = typer.Option(
        False, "--show-duplicates", help="List transactions skipped as duplicates."
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var, then config)."
    ),
) -> None:
    """Import a statement CSV into the ledger."""

    if verbose:
        configure_logging(verbose=True)

    from .importer import import_statement

    try:
        settings, url = _resolve_database_url(database_url)
        with session_scope(database_url=url) as session:
            result = import_statement(
                csv_file,
                session=session,
                dry_run=dry_run,
                account_id=account,
                show_duplicates=show_duplicates,
                settings=settings.import_settings,
            )
    except FileNotFoundError as e:
        raise _fail(f"File not found: {csv_file}", e, verbose=verbose) from e
    except StatementImportError as e:
        raise _fail(e.message, e, verbose=verbose) from e
    except ConfigurationError as e:
        raise _fail(str(e), e, verbose=verbose) from e
    except (SQLAlchemyError, OSError) as e:
        raise _fail(f"Import failed: {e}", e, verbose=verbose) from e
    finally:
        dispose_engine()

    _print_summary(Console(), result, dry_run=dry_run)
    if not result.success:
        raise typer.Exit(code=1)


@app.command("init-db")
def init_db_cmd(
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var, then config)."
    ),
) -> None:
    """Create the ledger tables if they do not exist."""

    from db import metadata

    try:
        _settings, url = _resolve_database_url(database_url)
        metadata.create_all(get_engine(database_url=url))
    except (ConfigurationError, SQLAlchemyError) as e:
        raise _fail(str(e), e) from e
    finally:
        dispose_engine()
    typer.echo(f"Database ready: {url}")


@app.command("add-account")
def add_account_cmd(
    account_id: Annotated[str, typer.Argument(help="Account id, e.g. an IBAN.")],
    *,
    name: str | None = typer.Option(None, help="Display name."),
    currency: Currency = typer.Option(Currency.EUR, help="Account currency."),
    bank_code: BankCode = typer.Option(BankCode.SEB, help="Bank code."),
    opening_balance: str = typer.Option("0", help="Opening balance, e.g. 100.50."),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var, then config)."
    ),
) -> None:
    """Register an account."""

    from .persistence import create_account

    try:
        balance = Decimal(opening_balance.replace(",", "."))
    except InvalidOperation:
        raise typer.BadParameter(
            f"not a number: {opening_balance!r}", param_hint="--opening-balance"
        ) from None

    try:
        _settings, url = _resolve_database_url(database_url)
        with session_scope(database_url=url) as session:
            create_account(
                session,
                account_id,
                name=name,
                currency=currency,
                bank_code=bank_code,
                opening_balance=balance,
            )
    except ValueError as e:
        # ConfigurationError is a ValueError too
        raise _fail(str(e), e) from e
    except SQLAlchemyError as e:
        raise _fail(f"Could not create account: {e}", e) from e
    finally:
        dispose_engine()
    typer.echo(f"Created account {account_id}")


@app.command("accounts")
def accounts_cmd(
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var, then config)."
    ),
) -> None:
    """List accounts with their current balances."""

    from .persistence import list_accounts

    table = Table(title="Accounts")
    for col in ("ID", "Name", "Currency", "Bank", "Balance", "Active"):
        table.add_column(col)
    try:
        _settings, url = _resolve_database_url(database_url)
        with session_scope(database_url=url) as session:
            for acc in list_accounts(session):
                table.add_row(
                    acc.id,
                    acc.name,
                    acc.currency,
                    acc.bank_code,
                    (
                        format_amount(acc.current_balance, acc.currency)
                        if acc.current_balance is not None
                        else ""
                    ),
                    "yes" if acc.is_active else "no",
                )
    except (ConfigurationError, SQLAlchemyError) as e:
        raise _fail(str(e), e) from e
    finally:
        dispose_engine()
    Console().print(table)


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Warnings only unless the env var or --verbose asks for more
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    app()

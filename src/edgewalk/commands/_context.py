"""AppContext: the object every edgewalk command receives via ``@click.pass_obj``.

It owns the store handle for the invocation, opened only when a command
first touches :attr:`AppContext.store` (so ``--help`` never creates a
database file) and closed by the root group when the command finishes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from edgewalk.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from edgewalk.config.settings import EdgewalkSettings
    from edgewalk.infrastructure.store.store import DocumentStore
    from edgewalk.services.result import ServiceResult


class AppContext:
    """Settings, logging, and the lazily opened store for one CLI run."""

    def __init__(self, settings: EdgewalkSettings) -> None:
        from edgewalk.config.logging import configure_logging
        from edgewalk.services.telemetry import enable_telemetry

        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._store: DocumentStore | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def store(self) -> DocumentStore:
        if self._store is None:
            from edgewalk.infrastructure.database.engine import init_database
            from edgewalk.infrastructure.store.store import DocumentStore

            self._store = DocumentStore(
                init_database(self.settings.db_path, busy_timeout=self.settings.store.busy_timeout)
            )
        return self._store

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Success goes to stdout.  Warnings go to stderr in human mode (JSON
        carries them in the payload, ``-q`` drops them).  A failure goes to
        stderr and exits 1.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not (self.output.json_output or self.output.quiet):
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)

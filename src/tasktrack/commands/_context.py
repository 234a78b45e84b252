"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy backend initialization, the current
session id, and centralized result emission (stdout/stderr routing + exit
codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from tasktrack.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from tasktrack.config.settings import TrackSettings
    from tasktrack.infrastructure.backend import Backend
    from tasktrack.services.access import AccessService
    from tasktrack.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The backend is created lazily on first use so ``--help`` and
    ``--version`` never touch the database.
    """

    def __init__(self, settings: TrackSettings) -> None:
        self.settings = settings
        self._backend: Backend | None = None
        self._access: AccessService | None = None

        from tasktrack.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def backend(self) -> Backend:
        """The backend instance (created lazily on first access)."""
        if self._backend is None:
            from tasktrack.infrastructure.backend import Backend

            self._backend = Backend(self.settings)
        return self._backend

    @property
    def access(self) -> AccessService:
        """The access facade over the backend (created lazily)."""
        if self._access is None:
            from tasktrack.services.access import AccessService

            self._access = AccessService(self.backend)
        return self._access

    def close(self) -> None:
        """Release the database engine, if one was opened."""
        if self._backend is not None:
            self._backend.close()

    # ------------------------------------------------------------------
    # Session file
    # ------------------------------------------------------------------

    @property
    def session_id(self) -> int | None:
        """``--session`` / ``TASKTRACK_SESSION_ID``, else the stored login."""
        if self.settings.session_id is not None:
            return self.settings.session_id
        path = self.settings.session_file
        if not path.is_file():
            return None
        raw = path.read_text(encoding="utf-8").strip()
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring malformed session file %s", path)
            return None

    def remember_session(self, session_id: int) -> None:
        path = self.settings.session_file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"{session_id}\n", encoding="utf-8")

    def forget_session(self) -> None:
        self.settings.session_file.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

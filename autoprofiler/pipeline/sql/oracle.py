"""
SQL syntax oracle backed by the sqlfluff CLI

Each call writes the fragment to a private temporary directory, runs
`sqlfluff parse|format|lint` on it and removes the directory on every exit path.
"""
import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from autoprofiler.core.config import Settings, settings as default_settings
from autoprofiler.core.errors import OracleInvocationError
from autoprofiler.dtos import ValidationOutcome

logger = logging.getLogger(__name__)

# sqlfluff exit codes
EXIT_OK = 0
EXIT_VIOLATIONS = 1

FORMAT_VIOLATIONS_MARKER = "==== formatting violations ===="
PARSING_VIOLATIONS_MARKER = "==== parsing violations ===="


class SyntaxOracle(Protocol):
    """Ground-truth syntax checker and formatter for SQL fragments"""

    async def validate(self, sql: str) -> ValidationOutcome:
        ...

    async def format(self, sql: str) -> ValidationOutcome:
        ...


class SqlFluffOracle:
    """
    Runs the sqlfluff CLI as a subprocess

    Example:
        oracle = SqlFluffOracle(dialect="postgres")
        outcome = await oracle.validate("SELECT 1;")
    """

    def __init__(
        self,
        sqlfluff_path: str = "sqlfluff",
        dialect: str = "postgres",
        config_path: Optional[str] = None
    ):
        self.sqlfluff_path = sqlfluff_path
        self.dialect = dialect
        self.config_path = config_path or None

    def _command(self, command: str, file_path: Path) -> list[str]:
        args = [self.sqlfluff_path, command, str(file_path), f"--dialect={self.dialect}"]
        if self.config_path:
            args += ["--config", self.config_path]
        return args

    async def _run(self, command: str, sql: str) -> tuple[int, str, str]:
        """
        Run one sqlfluff command on the fragment

        Returns (exit code, combined process output, file content afterwards)
        """
        logger.debug(f"Running sqlfluff {command}")

        with tempfile.TemporaryDirectory(prefix="autoprofiler-") as tmp_dir:
            file_path = Path(tmp_dir) / "fragment.sql"
            file_path.write_text(sql, encoding="utf-8")

            try:
                process = await asyncio.create_subprocess_exec(
                    *self._command(command, file_path),
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE
                )
            except OSError as e:
                logger.error(f"Could not run sqlfluff {command}: {e}")
                raise OracleInvocationError(f"Could not run sqlfluff {command}: {e}") from e

            try:
                stdout, stderr = await process.communicate()
            except asyncio.CancelledError:
                process.kill()
                # Reap the child before its working directory goes away
                await asyncio.shield(process.wait())
                raise

            output = "\n".join(
                part.decode("utf-8", errors="replace").strip()
                for part in (stdout, stderr)
                if part and part.strip()
            )
            content = file_path.read_text(encoding="utf-8")

        if process.returncode not in (EXIT_OK, EXIT_VIOLATIONS):
            logger.error(f"sqlfluff {command} exited with {process.returncode}: {output}")
            raise OracleInvocationError(
                f"sqlfluff {command} exited with code {process.returncode}: {output}"
            )

        return process.returncode, output, content

    async def validate(self, sql: str) -> ValidationOutcome:
        """Check that the fragment parses in the configured dialect"""
        if not sql.strip():
            return ValidationOutcome.failure("empty SQL fragment")

        code, output, _ = await self._run("parse", sql)
        if code != EXIT_OK:
            return ValidationOutcome.failure(
                _parsing_violations(output) or "sqlfluff reported parsing violations"
            )
        return ValidationOutcome.success()

    async def format(self, sql: str) -> ValidationOutcome:
        """
        Reformat the fragment, returning the canonical text on success

        When sqlfluff leaves violations it cannot fix, the rewritten text is
        linted so the diagnostic names the remaining rules.
        """
        if not sql.strip():
            return ValidationOutcome.failure("empty SQL fragment")

        code, output, content = await self._run("format", sql)
        if code == EXIT_OK and FORMAT_VIOLATIONS_MARKER not in output:
            return ValidationOutcome.success(text=content)

        diagnostic = output
        if code == EXIT_VIOLATIONS and content.strip():
            _, lint_output, _ = await self._run("lint", content)
            if lint_output:
                diagnostic = f"{output}\n{lint_output}" if output else lint_output

        return ValidationOutcome.failure(diagnostic or "sqlfluff reported formatting violations")


def _parsing_violations(output: str) -> str:
    """Drop the parse tree sqlfluff prints ahead of its violation list"""
    index = output.find(PARSING_VIOLATIONS_MARKER)
    if index == -1:
        return output
    return output[index:]


def create_oracle(settings: Settings = default_settings) -> SqlFluffOracle:
    """Build the configured oracle"""
    return SqlFluffOracle(
        sqlfluff_path=settings.SQLFLUFF_PATH,
        dialect=settings.SQL_DIALECT,
        config_path=settings.SQLFLUFF_CONFIG or None
    )

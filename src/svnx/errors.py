"""Exception hierarchy for SVNX."""

from typing import Optional, Sequence


class SvnxError(Exception):
    """Base exception for SVNX errors."""

    pass


class RepositoryClientError(SvnxError):
    """A repository query failed."""

    pass


class InvalidRepositoryLocationError(RepositoryClientError):
    """Repository location is not a usable Subversion URL."""

    pass


class RepositoryUnavailableError(RepositoryClientError):
    """Repository could not be reached or described."""

    pass


class ContentUnavailableError(RepositoryClientError):
    """File content stream could not be opened or read."""

    pass


class SvnCommandError(RepositoryClientError):
    """An svn invocation exited with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stderr: Optional[str] = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        detail = self.stderr or "no error output"
        super().__init__(
            f"svn {self.command[1] if len(self.command) > 1 else ''} "
            f"failed with exit code {returncode}: {detail}"
        )


class RetrievalError(SvnxError):
    """Retrieval was requested with unusable arguments."""

    pass

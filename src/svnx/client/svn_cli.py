"""
Subversion command-line implementation of RepositoryClient.

Every query runs the ``svn`` executable non-interactively and parses its
``--xml`` output with lxml. File content is streamed from ``svn cat``
through a pipe so callers can stop reading early.
"""

import base64
import subprocess
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Sequence
from urllib.parse import quote, urlsplit

from lxml import etree

from svnx.constants import (
    DEFAULT_SVN_BINARY,
    SUPPORTED_URL_SCHEMES,
    SVN_PROPERTY_NOT_FOUND,
)
from svnx.errors import (
    ContentUnavailableError,
    InvalidRepositoryLocationError,
    RepositoryClientError,
    RepositoryUnavailableError,
    SvnCommandError,
)
from svnx.logging import get_logger, log_svn_call
from svnx.models import (
    ChangeAction,
    NodeKind,
    RawChangedPath,
    RawFileInfo,
    RawLogEntry,
    RepositoryInfo,
)

from .base import RepositoryClient

logger = get_logger("svnx.client.svn_cli")

_XML_PARSER = etree.XMLParser(resolve_entities=False, huge_tree=True)
_DATE_FORMATS = ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ")


def parse_svn_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an svn XML timestamp into an aware UTC datetime."""
    if not value:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    logger.warning(f"Unrecognized svn date format: {value}")
    return None


def _parse_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return value.strip().lower() == "true"


def _property_text(element) -> str:
    text = element.text or ""
    if element.get("encoding") == "base64":
        return base64.b64decode(text).decode("utf-8", errors="replace")
    return text


def validate_repository_url(url: str) -> str:
    """
    Check that a repository location is an svn-reachable URL.

    Returns:
        The URL without trailing slashes

    Raises:
        InvalidRepositoryLocationError: Empty location, unsupported scheme
            or missing host
    """
    if not url or not url.strip():
        raise InvalidRepositoryLocationError("Repository URL must not be empty")

    url = url.strip()
    parts = urlsplit(url)
    if parts.scheme.lower() not in SUPPORTED_URL_SCHEMES:
        raise InvalidRepositoryLocationError(
            f"Unsupported repository URL '{url}'. Expected one of: "
            + ", ".join(f"{scheme}://" for scheme in SUPPORTED_URL_SCHEMES)
        )
    if parts.scheme.lower() != "file" and not parts.netloc:
        raise InvalidRepositoryLocationError(f"Repository URL has no host: {url}")
    if parts.scheme.lower() == "file" and not parts.path:
        raise InvalidRepositoryLocationError(f"Repository URL has no path: {url}")

    return url.rstrip("/")


class _ContentStream:
    """Read-only view of ``svn cat`` output that remembers hitting EOF."""

    def __init__(self, raw):
        self._raw = raw
        self.eof = False

    def read(self, size: int = -1) -> bytes:
        data = self._raw.read() if size is None or size < 0 else self._raw.read(size)
        if size is None or size < 0 or len(data) < size:
            # BufferedReader.read(n) only returns short at end of stream
            self.eof = True
        return data


class SvnCommandClient(RepositoryClient):
    """RepositoryClient backed by the ``svn`` command-line client."""

    def __init__(
        self,
        url: str,
        svn_binary: str = DEFAULT_SVN_BINARY,
        timeout: Optional[float] = None,
    ):
        self.url = validate_repository_url(url)
        self.svn_binary = svn_binary
        self.timeout = timeout
        self._info: Optional[RepositoryInfo] = None
        self._processes: List[subprocess.Popen] = []
        self._closed = False

    def _check_open(self):
        if self._closed:
            raise RepositoryClientError("svn client is closed")

    def _run(self, command: str, args: Sequence[str], target: str) -> bytes:
        """Run one svn subcommand and return its stdout."""
        self._check_open()
        argv = [self.svn_binary, command, "--non-interactive", *args, target]
        started = time.monotonic()
        try:
            result = subprocess.run(argv, capture_output=True, timeout=self.timeout)
        except FileNotFoundError as e:
            log_svn_call(command, target, arguments=args, error=str(e))
            raise RepositoryUnavailableError(
                f"svn executable not found: {self.svn_binary}"
            ) from e
        except OSError as e:
            log_svn_call(command, target, arguments=args, error=str(e))
            raise RepositoryUnavailableError(
                f"Could not run svn executable {self.svn_binary}: {e}"
            ) from e
        except subprocess.TimeoutExpired as e:
            log_svn_call(
                command, target,
                duration=time.monotonic() - started,
                arguments=args,
                error=f"timed out after {self.timeout}s",
            )
            raise SvnCommandError(argv, -1, f"timed out after {self.timeout}s") from e

        stderr = result.stderr.decode("utf-8", errors="replace")
        log_svn_call(
            command,
            target,
            returncode=result.returncode,
            duration=time.monotonic() - started,
            arguments=args,
            error=stderr.strip() if result.returncode != 0 else None,
        )
        if result.returncode != 0:
            raise SvnCommandError(argv, result.returncode, stderr)
        return result.stdout

    def _run_xml(self, command: str, args: Sequence[str], target: str):
        output = self._run(command, ["--xml", *args], target)
        try:
            return etree.fromstring(output, parser=_XML_PARSER)
        except etree.XMLSyntaxError as e:
            raise RepositoryClientError(
                f"Malformed XML from svn {command} {target}: {e}"
            ) from e

    def _target(self, path: str, revision: int) -> str:
        """Build a peg-revision URL for a repository-root-relative path."""
        root_url = self.get_repository_info().root_url.rstrip("/")
        if not path.startswith("/"):
            path = "/" + path
        return f"{root_url}{quote(path, safe='/:~!$&()*+,;=')}@{revision}"

    def get_repository_info(self) -> RepositoryInfo:
        if self._info is not None:
            return self._info

        try:
            root = self._run_xml("info", ["-r", "HEAD"], self.url)
        except SvnCommandError as e:
            raise RepositoryUnavailableError(
                f"Could not read repository information for {self.url}: {e.stderr or e}"
            ) from e

        entry = root.find("entry")
        if entry is None or entry.get("revision") is None:
            raise RepositoryUnavailableError(
                f"No repository information returned for {self.url}"
            )

        self._info = RepositoryInfo(
            url=entry.findtext("url") or self.url,
            root_url=entry.findtext("repository/root") or self.url,
            latest_revision=int(entry.get("revision")),
            uuid=entry.findtext("repository/uuid"),
        )
        logger.debug(
            f"Repository {self._info.url} at r{self._info.latest_revision} "
            f"(root {self._info.root_url})"
        )
        return self._info

    def get_log(
        self,
        start: int,
        end: int,
        include_changed_paths: bool = True,
    ) -> List[RawLogEntry]:
        args = ["-r", f"{start}:{end}"]
        if include_changed_paths:
            args.append("--verbose")
        root = self._run_xml("log", args, self.url)
        try:
            return [
                self._parse_log_entry(element, include_changed_paths)
                for element in root.iter("logentry")
            ]
        except (TypeError, ValueError) as e:
            raise RepositoryClientError(
                f"Unexpected svn log output for r{start}-r{end}: {e}"
            ) from e

    @staticmethod
    def _parse_log_entry(element, include_changed_paths: bool) -> RawLogEntry:
        changed_paths = None
        if include_changed_paths:
            changed_paths = tuple(
                RawChangedPath(
                    action=ChangeAction.from_code(path.get("action", "")),
                    path=path.text or "",
                    node_kind=NodeKind.parse(path.get("kind")),
                    text_modified=_parse_bool(path.get("text-mods")),
                    props_modified=_parse_bool(path.get("prop-mods")),
                    copy_from_path=path.get("copyfrom-path"),
                    copy_from_revision=(
                        int(path.get("copyfrom-rev"))
                        if path.get("copyfrom-rev")
                        else None
                    ),
                )
                for path in element.iterfind("paths/path")
            )

        return RawLogEntry(
            revision=int(element.get("revision")),
            author=element.findtext("author") or "",
            date=parse_svn_date(element.findtext("date")),
            message=element.findtext("msg") or "",
            changed_paths=changed_paths,
        )

    def get_revision_properties(self, revision: int) -> Dict[str, str]:
        root = self._run_xml(
            "proplist", ["--revprop", "--verbose", "-r", str(revision)], self.url
        )
        return {
            prop.get("name"): _property_text(prop)
            for prop in root.iterfind("revprops/property")
        }

    def get_file_info(self, path: str, revision: int) -> RawFileInfo:
        root = self._run_xml("list", ["--depth", "empty"], self._target(path, revision))
        entry = root.find("list/entry")
        if entry is None:
            return RawFileInfo(size=None, node_kind=NodeKind.UNKNOWN)

        size_text = entry.findtext("size")
        return RawFileInfo(
            size=int(size_text) if size_text else None,
            node_kind=NodeKind.parse(entry.get("kind")),
        )

    def get_property(self, path: str, revision: int, name: str) -> Optional[str]:
        try:
            root = self._run_xml("propget", [name], self._target(path, revision))
        except SvnCommandError as e:
            if SVN_PROPERTY_NOT_FOUND in e.stderr:
                return None
            raise

        prop = root.find("target/property")
        if prop is None:
            return None
        return _property_text(prop)

    @contextmanager
    def open_content(self, path: str, revision: int) -> Iterator[_ContentStream]:
        self._check_open()
        target = self._target(path, revision)
        argv = [self.svn_binary, "cat", "--non-interactive", target]
        started = time.monotonic()
        try:
            process = subprocess.Popen(
                argv, stdout=subprocess.PIPE, stderr=subprocess.PIPE
            )
        except OSError as e:
            log_svn_call("cat", target, error=str(e))
            raise ContentUnavailableError(
                f"Could not start svn cat for {target}: {e}"
            ) from e

        self._processes.append(process)
        stream = _ContentStream(process.stdout)
        completed = False
        try:
            yield stream
            completed = True
        finally:
            returncode = self._finish(process, stream.eof)
            duration = time.monotonic() - started
            stderr = ""
            if stream.eof and returncode != 0:
                stderr = process.stderr.read().decode("utf-8", errors="replace").strip()
            process.stdout.close()
            process.stderr.close()
            if process in self._processes:
                self._processes.remove(process)
            log_svn_call(
                "cat", target,
                returncode=returncode if stream.eof else None,
                duration=duration,
                error=stderr or None,
            )

        if completed and stream.eof and returncode != 0:
            raise ContentUnavailableError(
                f"svn cat failed for {target} with exit code {returncode}: {stderr}"
            )

    def _finish(self, process: subprocess.Popen, drained: bool) -> int:
        """Wait for a drained ``svn cat`` or stop one that was read partially."""
        if drained:
            return process.wait()
        if process.poll() is None:
            process.terminate()
        try:
            return process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()
            return process.wait()

    def close(self) -> None:
        if self._closed:
            return
        for process in list(self._processes):
            self._finish(process, drained=False)
        self._processes.clear()
        self._closed = True
        logger.debug(f"Closed svn client for {self.url}")

import io
import subprocess
from datetime import datetime, timezone

import pytest

from svnx.client.svn_cli import (
    SvnCommandClient,
    parse_svn_date,
    validate_repository_url,
)
from svnx.errors import (
    ContentUnavailableError,
    InvalidRepositoryLocationError,
    RepositoryClientError,
    RepositoryUnavailableError,
    SvnCommandError,
)
from svnx.models import ChangeAction, NodeKind

URL = "svn://svn.example.com/repo/trunk"
ROOT = "svn://svn.example.com/repo"

INFO_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<info>
<entry kind="dir" path="trunk" revision="1234">
<url>svn://svn.example.com/repo/trunk</url>
<repository>
<root>svn://svn.example.com/repo</root>
<uuid>0a1b2c3d-0000-0000-0000-000000000000</uuid>
</repository>
</entry>
</info>
"""

LOG_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<log>
<logentry revision="11">
<author>alice</author>
<date>2024-03-01T10:15:30.123456Z</date>
<paths>
<path action="M" kind="file" text-mods="true" prop-mods="false">/trunk/a.txt</path>
<path action="A" kind="dir" copyfrom-path="/trunk" copyfrom-rev="10" text-mods="false" prop-mods="false">/branches/b1</path>
</paths>
<msg>Fix the thing</msg>
</logentry>
<logentry revision="12">
<date>2024-03-02T08:00:00.000000Z</date>
<msg></msg>
</logentry>
</log>
"""

PROPLIST_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<properties>
<revprops rev="11">
<property name="svn:log">Fix the thing</property>
<property name="svn:author">alice</property>
<property name="custom:note" encoding="base64">aMOpbGxv</property>
</revprops>
</properties>
"""

LIST_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<lists>
<list path="svn://svn.example.com/repo/trunk/a.txt@11">
<entry kind="file">
<name>a.txt</name>
<size>2048</size>
</entry>
</list>
</lists>
"""

PROPGET_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<properties>
<target path="svn://svn.example.com/repo/trunk/logo.png@11">
<property name="svn:mime-type">image/png</property>
</target>
</properties>
"""


def _completed(stdout=b"", returncode=0, stderr=b""):
    return subprocess.CompletedProcess(
        args=[], returncode=returncode, stdout=stdout, stderr=stderr
    )


@pytest.fixture
def run(mocker):
    return mocker.patch("svnx.client.svn_cli.subprocess.run")


@pytest.fixture
def client(run):
    run.return_value = _completed(INFO_XML)
    client = SvnCommandClient(URL)
    client.get_repository_info()
    run.reset_mock()
    return client


@pytest.mark.parametrize(
    "url",
    [
        "svn://host/repo",
        "svn+ssh://user@host/repo",
        "https://host/svn/repo/",
        "file:///var/svn/repo",
    ],
)
def test_validate_repository_url_accepts(url):
    assert validate_repository_url(url) == url.rstrip("/")


@pytest.mark.parametrize(
    "url", ["", "   ", "/var/svn/repo", "ftp://host/repo", "https:///repo", "file://"]
)
def test_validate_repository_url_rejects(url):
    with pytest.raises(InvalidRepositoryLocationError):
        validate_repository_url(url)


def test_parse_svn_date():
    assert parse_svn_date("2024-03-01T10:15:30.123456Z") == datetime(
        2024, 3, 1, 10, 15, 30, 123456, tzinfo=timezone.utc
    )
    assert parse_svn_date("2024-03-01T10:15:30Z").tzinfo == timezone.utc
    assert parse_svn_date(None) is None
    assert parse_svn_date("yesterday") is None


def test_get_repository_info(run):
    run.return_value = _completed(INFO_XML)
    client = SvnCommandClient(URL + "/")

    info = client.get_repository_info()
    client.get_repository_info()

    assert info.latest_revision == 1234
    assert info.root_url == ROOT
    assert info.url == URL
    assert info.uuid.startswith("0a1b2c3d")
    assert run.call_count == 1
    argv = run.call_args[0][0]
    assert argv == ["svn", "info", "--non-interactive", "--xml", "-r", "HEAD", URL]


def test_get_repository_info_failure(run):
    run.return_value = _completed(
        returncode=1, stderr=b"svn: E170013: Unable to connect to a repository"
    )

    with pytest.raises(RepositoryUnavailableError) as exc:
        SvnCommandClient(URL).get_repository_info()

    assert "E170013" in str(exc.value)


def test_missing_svn_executable(run):
    run.side_effect = FileNotFoundError("svn")

    with pytest.raises(RepositoryUnavailableError):
        SvnCommandClient(URL, svn_binary="/nope/svn").get_repository_info()


@pytest.mark.parametrize(
    "failure",
    [PermissionError(13, "Permission denied"), IsADirectoryError(21, "Is a directory")],
)
def test_unrunnable_svn_executable(run, failure):
    run.side_effect = failure

    with pytest.raises(RepositoryUnavailableError) as exc:
        SvnCommandClient(URL, svn_binary="/opt/svn").get_repository_info()

    assert "/opt/svn" in str(exc.value)


def test_unrunnable_svn_executable_during_log(client, run):
    run.side_effect = PermissionError(13, "Permission denied")

    with pytest.raises(RepositoryClientError):
        client.get_log(1, 10)


def test_timeout_becomes_command_error(run):
    run.side_effect = subprocess.TimeoutExpired(cmd="svn", timeout=1)

    with pytest.raises(SvnCommandError) as exc:
        SvnCommandClient(URL, timeout=1)._run("log", [], URL)

    assert exc.value.returncode == -1


def test_get_log_with_paths(client, run):
    run.return_value = _completed(LOG_XML)

    entries = client.get_log(11, 12)

    argv = run.call_args[0][0]
    assert argv[1] == "log"
    assert "-r" in argv and "11:12" in argv
    assert "--verbose" in argv

    first, second = entries
    assert first.revision == 11
    assert first.author == "alice"
    assert first.message == "Fix the thing"
    assert first.date.year == 2024

    modified, added = first.changed_paths
    assert modified.action == ChangeAction.MODIFY
    assert modified.node_kind == NodeKind.FILE
    assert modified.text_modified is True
    assert modified.props_modified is False
    assert added.action == ChangeAction.ADD
    assert added.copy_from_path == "/trunk"
    assert added.copy_from_revision == 10

    assert second.author == ""
    assert second.message == ""
    assert second.changed_paths == ()


def test_get_log_without_paths(client, run):
    run.return_value = _completed(LOG_XML)

    entries = client.get_log(11, 12, include_changed_paths=False)

    assert "--verbose" not in run.call_args[0][0]
    assert all(entry.changed_paths is None for entry in entries)


def test_get_log_failure(client, run):
    run.return_value = _completed(returncode=1, stderr=b"svn: E160006: No such revision")

    with pytest.raises(RepositoryClientError):
        client.get_log(11, 12)


def test_get_log_malformed_xml(client, run):
    run.return_value = _completed(b"<log><logentry")

    with pytest.raises(RepositoryClientError):
        client.get_log(11, 12)


def test_get_revision_properties(client, run):
    run.return_value = _completed(PROPLIST_XML)

    props = client.get_revision_properties(11)

    assert props == {
        "svn:log": "Fix the thing",
        "svn:author": "alice",
        "custom:note": "héllo",
    }
    assert "--revprop" in run.call_args[0][0]


def test_get_file_info(client, run):
    run.return_value = _completed(LIST_XML)

    info = client.get_file_info("/trunk/a.txt", 11)

    assert info.size == 2048
    assert info.node_kind == NodeKind.FILE
    assert run.call_args[0][0][-1] == ROOT + "/trunk/a.txt@11"


def test_target_quotes_paths(client, run):
    run.return_value = _completed(LIST_XML)

    client.get_file_info("/trunk/my file.txt", 3)

    assert run.call_args[0][0][-1] == ROOT + "/trunk/my%20file.txt@3"


def test_get_property(client, run):
    run.return_value = _completed(PROPGET_XML)

    assert client.get_property("/trunk/logo.png", 11, "svn:mime-type") == "image/png"


def test_get_property_missing(client, run):
    run.return_value = _completed(
        returncode=1,
        stderr=b"svn: warning: W200017: Property 'svn:mime-type' not found",
    )

    assert client.get_property("/trunk/a.txt", 11, "svn:mime-type") is None


def test_get_property_other_failure(client, run):
    run.return_value = _completed(returncode=1, stderr=b"svn: E170000: bad URL")

    with pytest.raises(SvnCommandError):
        client.get_property("/trunk/a.txt", 11, "svn:mime-type")


def _popen(mocker, data, returncode=0, stderr=b""):
    process = mocker.Mock()
    process.stdout = io.BytesIO(data)
    process.stderr = io.BytesIO(stderr)
    process.wait.return_value = returncode
    process.poll.return_value = None
    return mocker.patch("svnx.client.svn_cli.subprocess.Popen", return_value=process)


def test_open_content_drained(client, mocker):
    popen = _popen(mocker, b"hello world")

    with client.open_content("/trunk/a.txt", 11) as stream:
        assert stream.read() == b"hello world"

    process = popen.return_value
    process.wait.assert_called_once_with()
    process.terminate.assert_not_called()
    assert popen.call_args[0][0] == [
        "svn", "cat", "--non-interactive", ROOT + "/trunk/a.txt@11"
    ]


def test_open_content_partial_read_terminates(client, mocker):
    popen = _popen(mocker, b"x" * 100, returncode=-15)

    with client.open_content("/trunk/a.txt", 11) as stream:
        assert stream.read(10) == b"x" * 10

    popen.return_value.terminate.assert_called_once()


def test_open_content_failure(client, mocker):
    _popen(mocker, b"", returncode=1, stderr=b"svn: E195012: path not found")

    with pytest.raises(ContentUnavailableError):
        with client.open_content("/trunk/missing.txt", 11) as stream:
            stream.read()


def test_closed_client_rejects_queries(client, run):
    client.close()

    with pytest.raises(RepositoryClientError):
        client.get_log(1, 2)
    run.assert_not_called()

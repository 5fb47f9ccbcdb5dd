import pytest
import typer

from svnx.commands.shared.base_command import BaseCommand
from svnx.errors import RepositoryUnavailableError
from svnx.exporters.base import RevisionExporter
from svnx.models import ContentMode
from svnx.utils.config_store import ConfigStore


class ListExporter(RevisionExporter):
    def __init__(self):
        self.revisions = []

    def export(self, revisions):
        self.revisions = [r.revision for r in revisions]
        return len(self.revisions)


class DummyCommand(BaseCommand):
    pass


@pytest.fixture
def command(tmp_path):
    store = ConfigStore(base_dir=tmp_path)
    store.set_setting("preview_length", 40)
    return DummyCommand(config_store=store)


def test_setting_resolution(command):
    assert command.setting(None, "preview_length") == 40
    assert command.setting(7, "preview_length") == 7
    assert command.setting(None, "batch_size") == 1000


def test_build_options_from_settings(command):
    options = command.build_options(content="FULL", include_revision_properties=False)

    assert options.content_mode == ContentMode.FULL
    assert options.preview_length == 40
    assert options.include_revision_properties is False


def test_build_options_invalid(mocker, command):
    error = mocker.patch("svnx.commands.shared.base_command.error")

    with pytest.raises(typer.Exit):
        command.build_options(content="everything")
    with pytest.raises(typer.Exit):
        command.build_options(preview_length=0)

    assert error.call_count == 2


def test_create_client_uses_svn_binary(tmp_path):
    store = ConfigStore(base_dir=tmp_path)
    store.set_setting("svn_binary", "/opt/svn/bin/svn")

    client = DummyCommand(config_store=store).create_client("svn://host/repo")

    assert client.svn_binary == "/opt/svn/bin/svn"
    assert client.url == "svn://host/repo"


def test_run_export_streams_into_exporter(
    mocker, command, repository_factory, entry_factory
):
    client = repository_factory([entry_factory(r) for r in range(1, 8)])
    mocker.patch.object(command, "create_client", return_value=client)
    summary = mocker.patch("svnx.commands.shared.base_command.display_summary")
    exporter = ListExporter()

    count = command.run_export(
        "svn://svn.example.com/repo",
        exporter,
        command.build_options(),
        start=2,
        batch_size=3,
        show_progress=False,
    )

    assert count == 6
    assert exporter.revisions == [2, 3, 4, 5, 6, 7]
    assert client.log_ranges == [(2, 4), (5, 7)]
    assert client.closed
    summary.assert_not_called()


def test_run_export_with_progress(mocker, command, repository_factory, entry_factory):
    client = repository_factory([entry_factory(r) for r in range(1, 4)])
    mocker.patch.object(command, "create_client", return_value=client)
    listener = mocker.patch("svnx.commands.shared.base_command.TqdmProgressListener")
    summary = mocker.patch("svnx.commands.shared.base_command.display_summary")

    command.run_export(
        "svn://svn.example.com/repo", ListExporter(), command.build_options()
    )

    assert listener.return_value.call_count == 1
    listener.return_value.close.assert_called_once()
    rows = summary.call_args[0][1]
    assert rows["Exported"] == 3
    assert rows["Revisions"] == "1-3"


def test_run_export_repository_error(mocker, command, repository_factory):
    client = repository_factory()
    client.info_error = RepositoryUnavailableError("connection refused")
    mocker.patch.object(command, "create_client", return_value=client)
    error = mocker.patch("svnx.commands.shared.base_command.error")

    with pytest.raises(typer.Exit) as exc:
        command.run_export(
            "svn://svn.example.com/repo",
            ListExporter(),
            command.build_options(),
            show_progress=False,
        )

    assert exc.value.exit_code == 1
    error.assert_called_once()
    assert client.closed

"""Tests for download and upload commands."""

import json

import pytest

from sshv2.commands.transfer import download, upload
from sshv2.exceptions import TransferError
from sshv2.operations import BinaryData, ErrorPolicy


class TestDownload:
    """Tests for the download command."""

    def test_download_to_directory(self, password_config, session_factory, tmp_path, staging_dir):
        """Downloading into a directory keeps the remote file name."""
        code = download(password_config, "/var/log/app.log", tmp_path, session_factory=session_factory)
        assert code == 0
        assert (tmp_path / "app.log").read_bytes() == b"remote content"

    def test_download_to_file(self, password_config, session_factory, tmp_path, staging_dir):
        """An explicit file destination is used as-is."""
        dest = tmp_path / "copy.log"
        download(password_config, "/var/log/app.log", dest, session_factory=session_factory)
        assert dest.read_bytes() == b"remote content"

    def test_download_default_cwd(self, password_config, session_factory, tmp_path, staging_dir, monkeypatch):
        """Without a destination the file lands in the current directory."""
        monkeypatch.chdir(tmp_path)
        download(password_config, "/srv/data.csv", session_factory=session_factory)
        assert (tmp_path / "data.csv").exists()

    def test_file_name_override(self, password_config, session_factory, tmp_path, staging_dir, capsys):
        """--file-name renames the local copy and the record."""
        download(
            password_config, "/srv/data", tmp_path, "data.json", as_json=True,
            session_factory=session_factory,
        )
        record = json.loads(capsys.readouterr().out)
        assert record == {"fileName": "data.json", "remotePath": "/srv/data", "success": True}
        assert (tmp_path / "data.json").exists()

    def test_failure_under_continue(self, password_config, session_factory, mock_session, tmp_path, staging_dir, capsys):
        """A recorded failure returns 1 and writes nothing."""
        mock_session.download_file.side_effect = TransferError("remote file not found: /x", reason="not_found")

        code = download(
            password_config, "/x", tmp_path, policy=ErrorPolicy.CONTINUE, session_factory=session_factory
        )

        assert code == 1
        assert "remote file not found" in capsys.readouterr().err
        assert list(tmp_path.glob("x")) == []

    def test_unwritable_destination(self, password_config, session_factory, tmp_path, staging_dir):
        """A missing local directory is a TransferError, not a raw OSError."""
        dest = tmp_path / "missing" / "app.log"
        with pytest.raises(TransferError, match="Cannot write") as exc_info:
            download(password_config, "/var/log/app.log", dest, session_factory=session_factory)
        assert exc_info.value.reason == "io"

    def test_failure_under_halt(self, password_config, session_factory, mock_session, tmp_path, staging_dir):
        """Under HALT the transfer error propagates."""
        mock_session.download_file.side_effect = TransferError("denied", reason="permission")
        with pytest.raises(TransferError):
            download(password_config, "/x", tmp_path, session_factory=session_factory)


class TestUpload:
    """Tests for the upload command."""

    def test_upload_files(self, password_config, session_factory, mock_session, tmp_path, staging_dir, capsys):
        """Each source becomes one upload into the remote directory."""
        a = tmp_path / "a.txt"
        a.write_text("a")
        b = tmp_path / "b.txt"
        b.write_text("b")

        code = upload(
            password_config, [BinaryData.from_file(a), BinaryData.from_file(b)], "/srv",
            as_json=True, session_factory=session_factory,
        )

        assert code == 0
        remotes = [c.args[1] for c in mock_session.upload_file.call_args_list]
        assert remotes == ["/srv/a.txt", "/srv/b.txt"]
        lines = capsys.readouterr().out.splitlines()
        assert [json.loads(line)["remotePath"] for line in lines] == remotes
        mock_session.connect.assert_called_once()

    def test_upload_text(self, password_config, session_factory, mock_session, staging_dir, capsys):
        """Inline text needs a remote name."""
        code = upload(password_config, ["KEY=1"], "~/app", ".env", session_factory=session_factory)
        assert code == 0
        assert mock_session.upload_file.call_args.args[1] == "/home/user/app/.env"
        assert "Uploaded /home/user/app/.env" in capsys.readouterr().err

    def test_partial_failure(self, password_config, session_factory, mock_session, tmp_path, staging_dir, capsys):
        """Under CONTINUE one failed upload makes the command fail."""
        mock_session.upload_file.side_effect = [
            TransferError("permission denied: /srv/a", reason="permission"),
            None,
        ]

        code = upload(
            password_config, [b"a", b"b"], "/srv", "same.bin", ErrorPolicy.CONTINUE,
            session_factory=session_factory,
        )

        assert code == 1
        assert mock_session.upload_file.call_count == 2
        err = capsys.readouterr().err
        assert "permission denied" in err
        assert "Uploaded /srv/same.bin" in err

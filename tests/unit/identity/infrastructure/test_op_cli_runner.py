"""Unit tests for the op subprocess runner."""

import subprocess
from unittest.mock import patch

import pytest

from identity.infrastructure.onepassword_cli.runner import (
    CommandResult,
    OpCli,
    OpCliRunner,
)


@pytest.fixture
def completed():
    """Factory for CompletedProcess results."""

    def _make(returncode=0, stdout="", stderr=""):
        return subprocess.CompletedProcess(
            args=[], returncode=returncode, stdout=stdout, stderr=stderr
        )

    return _make


class TestCommandResult:
    """Tests for CommandResult."""

    def test_ok_only_on_zero_exit(self):
        """Only exit status 0 is success."""
        assert CommandResult(returncode=0).ok
        assert not CommandResult(returncode=1).ok


class TestOpCli:
    """Tests for OpCli."""

    def test_implements_runner_protocol(self):
        """OpCli should satisfy OpCliRunner."""
        assert isinstance(OpCli(), OpCliRunner)

    def test_runs_binary_with_args(self, completed):
        """The binary is prepended to the arguments."""
        with patch("subprocess.run", return_value=completed(stdout="{}")) as run:
            result = OpCli("/usr/local/bin/op").run(["vault", "list"])

        run.assert_called_once_with(
            ["/usr/local/bin/op", "vault", "list"],
            capture_output=True,
            text=True,
            check=False,
            env=None,
        )
        assert result == CommandResult(returncode=0, stdout="{}", stderr="")

    def test_reports_failure_without_raising(self, completed):
        """A non-zero exit is returned, not raised."""
        with patch("subprocess.run", return_value=completed(2, stderr="boom")):
            result = OpCli().run(["user", "get", "x"])

        assert result.returncode == 2
        assert result.stderr == "boom"

    def test_extra_env_is_merged(self, completed, monkeypatch):
        """Extra variables are layered over the inherited environment."""
        monkeypatch.setenv("INHERITED", "yes")

        with patch("subprocess.run", return_value=completed()) as run:
            OpCli(env={"OP_ACCOUNT": "acme"}).run(["whoami"])

        env = run.call_args.kwargs["env"]
        assert env["OP_ACCOUNT"] == "acme"
        assert env["INHERITED"] == "yes"

    def test_missing_binary_propagates_os_error(self):
        """Spawn failures surface as OSError."""
        with patch("subprocess.run", side_effect=FileNotFoundError("no op")):
            with pytest.raises(OSError):
                OpCli("missing-op").run(["whoami"])

    def test_none_output_normalized(self, completed):
        """Missing output streams become empty strings."""
        with patch("subprocess.run", return_value=completed(stdout=None, stderr=None)):
            result = OpCli().run(["vault", "delete", "v"])

        assert result.stdout == ""
        assert result.stderr == ""

"""Integration tests for the command-line interface.

Covers command dispatch, help output and the exit status produced for each
kind of workflow outcome. The Shopify CLI and the terminal prompts are
mocked.
"""

import json
import subprocess

import pytest
from unittest.mock import patch
from typer.testing import CliRunner

from themectl import __version__
from themectl.app import app
from themectl.models import Theme
from themectl.shopify import SyncSource

CONFIG = (
    "[environments.env1]\n"
    'store = "my-store.myshopify.com"\n'
    'password = "shptka_secret"\n'
)

THEMES_JSON = json.dumps([
    {"id": 1, "name": "Live", "role": "live"},
    {"id": 5, "name": "New", "role": "unpublished"},
    {"id": 3, "name": "Old", "role": "development"},
])


class TestCommandDispatch:
    """Test cases for help and unknown commands."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.mark.parametrize("args", [[], ["help"], ["--help"], ["-h"]])
    def test_help(self, runner, args):
        """Test that help is shown and exits 0."""
        result = runner.invoke(app, args)

        assert result.exit_code == 0
        for command in ("dev", "push", "list"):
            assert command in result.output

    def test_unknown_command(self, runner):
        """Test that an unknown command prints help and exits 1."""
        result = runner.invoke(app, ["deploy"])

        assert result.exit_code == 1
        assert "Unknown command: deploy" in result.output
        assert "list" in result.output

    def test_unknown_option(self, runner):
        """Test that an unknown leading option is handled like an unknown command."""
        result = runner.invoke(app, ["--foo"])

        assert result.exit_code == 1
        assert "Unknown command: --foo" in result.output
        assert "No such option" not in result.output

    def test_version(self, runner):
        """Test the --version flag."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"themectl {__version__}" in result.output


class TestCommands:
    """Test cases for dev, push and list end to end."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def store_dir(self, tmp_path, monkeypatch):
        """Working directory with a shopify.theme.toml."""
        (tmp_path / "shopify.theme.toml").write_text(CONFIG, encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("THEMECTL_SHOPIFY_BIN", raising=False)
        return tmp_path

    def _run_shopify(self, returncode=0):
        return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=THEMES_JSON, stderr="")

    def test_missing_config(self, runner, tmp_path, monkeypatch):
        """Test that a missing config file exits 1 with the expected format."""
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["dev"])

        assert result.exit_code == 1
        assert "shopify.theme.toml not found!" in result.output
        assert "[environments.env1]" in result.output

    @patch("themectl.shopify.subprocess.Popen")
    @patch("themectl.shopify.subprocess.run")
    @patch("themectl.app.RichPrompter")
    def test_dev_success(self, mock_prompter_cls, mock_run, mock_popen, runner, store_dir):
        """Test a full dev run ending with the server stopped by Ctrl+C."""
        prompter = mock_prompter_cls.return_value
        prompter.select.side_effect = self._answers(SyncSource.LIVE)
        prompter.confirm.return_value = True
        mock_run.return_value = self._run_shopify()
        mock_popen.return_value.wait.return_value = 130

        result = runner.invoke(app, ["dev"])

        assert result.exit_code == 0
        assert "Dev server stopped" in result.output
        pull_args = mock_run.call_args_list[1].args[0]
        assert pull_args[:3] == ["shopify", "theme", "pull"]
        dev_args = mock_popen.call_args.args[0]
        assert dev_args[dev_args.index("--theme") + 1] == "5"
        assert "shptka_secret" not in result.output

    @patch("themectl.shopify.subprocess.Popen")
    @patch("themectl.shopify.subprocess.run")
    @patch("themectl.app.RichPrompter")
    def test_dev_sync_failure_still_serves(self, mock_prompter_cls, mock_run, mock_popen, runner, store_dir):
        """Test that a failed pull is a warning and the server still starts."""
        prompter = mock_prompter_cls.return_value
        prompter.select.side_effect = self._answers(SyncSource.LIVE)
        prompter.confirm.return_value = True
        mock_run.side_effect = [self._run_shopify(), self._run_shopify(returncode=1)]
        mock_popen.return_value.wait.return_value = 0

        result = runner.invoke(app, ["dev"])

        assert result.exit_code == 0
        assert "Content sync had issues" in result.output
        mock_popen.assert_called_once()

    @patch("themectl.shopify.subprocess.Popen")
    @patch("themectl.shopify.subprocess.run")
    @patch("themectl.app.RichPrompter")
    def test_dev_server_failure(self, mock_prompter_cls, mock_run, mock_popen, runner, store_dir):
        """Test that a dev server crash exits 1."""
        prompter = mock_prompter_cls.return_value
        prompter.select.side_effect = self._answers(SyncSource.SKIP)
        prompter.confirm.return_value = True
        mock_run.return_value = self._run_shopify()
        mock_popen.return_value.wait.return_value = 1

        result = runner.invoke(app, ["dev"])

        assert result.exit_code == 1
        assert "Dev server error" in result.output

    @patch("themectl.shopify.subprocess.Popen")
    @patch("themectl.shopify.subprocess.run")
    @patch("themectl.app.RichPrompter")
    def test_dev_safety_violation(self, mock_prompter_cls, mock_run, mock_popen, runner, store_dir):
        """Test that a live candidate exits 1 before anything runs."""
        prompter = mock_prompter_cls.return_value
        prompter.select.return_value = Theme(id=1, name="Live", role="unpublished")
        mock_run.return_value = self._run_shopify()

        result = runner.invoke(app, ["dev"])

        assert result.exit_code == 1
        assert "BLOCKED" in result.output
        assert mock_run.call_count == 1
        mock_popen.assert_not_called()
        prompter.confirm.assert_not_called()

    @patch("themectl.shopify.subprocess.run")
    @patch("themectl.app.RichPrompter")
    def test_dev_declined(self, mock_prompter_cls, mock_run, runner, store_dir):
        """Test that declining the confirmation exits 0."""
        prompter = mock_prompter_cls.return_value
        prompter.select.side_effect = self._answers()
        prompter.confirm.return_value = False
        mock_run.return_value = self._run_shopify()

        result = runner.invoke(app, ["dev"])

        assert result.exit_code == 0
        assert "Aborted by user" in result.output
        assert mock_run.call_count == 1

    @patch("themectl.shopify.subprocess.run")
    def test_dev_only_live_theme(self, mock_run, runner, store_dir):
        """Test that a store with only the live theme exits 1 with advice."""
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout=json.dumps([{"id": 1, "name": "Live", "role": "live"}]), stderr="",
        )

        result = runner.invoke(app, ["dev"])

        assert result.exit_code == 1
        assert "No development themes found!" in result.output
        assert "duplicate --live" in result.output

    @patch("themectl.shopify.subprocess.run")
    @patch("themectl.app.RichPrompter")
    def test_push(self, mock_prompter_cls, mock_run, runner, store_dir):
        """Test pushing to the selected theme."""
        prompter = mock_prompter_cls.return_value
        prompter.select.side_effect = self._answers()
        prompter.confirm.return_value = True
        mock_run.return_value = self._run_shopify()

        result = runner.invoke(app, ["push"])

        assert result.exit_code == 0
        push_args = mock_run.call_args_list[1].args[0]
        assert push_args[:3] == ["shopify", "theme", "push"]
        assert push_args[push_args.index("--theme") + 1] == "5"

    @patch("themectl.shopify.subprocess.run")
    def test_list_json(self, mock_run, runner, store_dir, monkeypatch):
        """Test listing themes as JSON."""
        monkeypatch.setenv("THEMECTL_OUTPUT_FORMAT", "json")
        mock_run.return_value = self._run_shopify()

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert '"name": "New"' in result.output

    @patch("themectl.shopify.subprocess.run")
    def test_list_fetch_failure(self, mock_run, runner, store_dir, monkeypatch):
        """Test that a failing `shopify theme list` exits 1."""
        monkeypatch.setenv("THEMECTL_OUTPUT_FORMAT", "table")
        mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="Unauthorized")

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "Unauthorized" in result.output

    @staticmethod
    def _answers(sync_source=None):
        """Select answers: first menu entry, then the sync source."""
        answers = [lambda choices: choices[0].value]
        if sync_source is not None:
            answers.append(lambda choices: sync_source)

        def select(message, choices):
            return answers.pop(0)(choices)
        return select

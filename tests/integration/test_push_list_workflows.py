"""Integration tests for the push and list workflows."""

import json
from io import StringIO

import pytest
from unittest.mock import Mock

from rich.console import Console

from themectl.config import StoreCredentials
from themectl.exceptions import ErrorKind, PushError, ThemeFetchError
from themectl.models import Theme
from themectl.render import Display, OutputFormatter
from themectl.shopify import ShopifyCLI
from themectl.workflow import ListWorkflow, Outcome, PushWorkflow, WorkflowStep

LIVE = Theme(id=1, name="Live", role="live")
NEW = Theme(id=5, name="New", role="unpublished")
OLD = Theme(id=3, name="Old", role="development")


@pytest.fixture
def credentials():
    return StoreCredentials(store="my-store.myshopify.com", password="shptka_secret", environment="env1")


@pytest.fixture
def cli():
    cli = Mock(spec=ShopifyCLI)
    cli.list_themes.return_value = [OLD, LIVE, NEW]
    return cli


@pytest.fixture
def console():
    return Console(record=True, width=120, file=StringIO())


class TestPushWorkflow:
    """Integration tests for PushWorkflow."""

    @pytest.fixture
    def prompter(self):
        prompter = Mock()
        prompter.select.side_effect = lambda message, choices: choices[0].value
        prompter.confirm.return_value = True
        return prompter

    @pytest.fixture
    def workflow(self, prompter, credentials, cli, console):
        return PushWorkflow(
            prompter=prompter,
            display=Display(console),
            config_loader=lambda: credentials,
            cli_factory=Mock(return_value=cli),
        )

    def test_push_to_newest_theme(self, workflow, cli, prompter):
        """Test pushing to the first (newest) development theme."""
        result = workflow.run()

        assert result.outcome == Outcome.COMPLETED
        assert result.theme == NEW
        cli.push.assert_called_once_with(NEW)
        menu = prompter.select.call_args.args[1]
        assert [choice.value for choice in menu] == [NEW, OLD]

    def test_push_declined(self, workflow, cli, prompter):
        """Test that answering no pushes nothing."""
        prompter.confirm.return_value = False

        result = workflow.run()

        assert result.outcome == Outcome.CANCELLED
        cli.push.assert_not_called()

    def test_push_to_live_blocked(self, workflow, cli, prompter):
        """Test that a live candidate never reaches the push."""
        prompter.select.side_effect = None
        prompter.select.return_value = LIVE

        result = workflow.run()

        assert result.kind == ErrorKind.SAFETY_VIOLATION
        prompter.confirm.assert_not_called()
        cli.push.assert_not_called()

    def test_push_failure(self, workflow, cli):
        """Test that a failed push is fatal."""
        cli.push.side_effect = PushError("shopify theme push exited with status 1", returncode=1)

        result = workflow.run()

        assert result.outcome == Outcome.FAILED
        assert result.kind == ErrorKind.PUSH_FAILURE
        assert result.step == WorkflowStep.PUSH_THEME


class TestListWorkflow:
    """Integration tests for ListWorkflow."""

    @pytest.fixture
    def make_workflow(self, credentials, cli, console):
        def _make(output_format):
            return ListWorkflow(
                formatter=OutputFormatter(console),
                output_format=output_format,
                display=Display(console),
                config_loader=lambda: credentials,
                cli_factory=Mock(return_value=cli),
            )
        return _make

    def test_list_json_sorted(self, make_workflow, capsys):
        """Test that the listing is live first, then newest to oldest."""
        result = make_workflow("json").run()

        assert result.outcome == Outcome.COMPLETED
        data = json.loads(capsys.readouterr().out)
        assert [item["id"] for item in data] == [1, 5, 3]

    def test_list_table(self, make_workflow, console):
        """Test the table listing."""
        make_workflow("table").run()

        output = console.export_text()
        assert "SHOPIFY THEME LIST" in output
        assert "Total: 3 themes" in output

    def test_list_without_live_theme(self, make_workflow, cli, capsys):
        """Test that listing does not require a live theme."""
        cli.list_themes.return_value = [NEW, OLD]

        result = make_workflow("json").run()

        assert result.outcome == Outcome.COMPLETED
        assert [item["id"] for item in json.loads(capsys.readouterr().out)] == [5, 3]

    def test_list_fetch_failure(self, make_workflow, cli):
        """Test that a failed fetch fails the listing."""
        cli.list_themes.side_effect = ThemeFetchError("Failed to fetch themes: boom")

        result = make_workflow("json").run()

        assert result.outcome == Outcome.FAILED
        assert result.kind == ErrorKind.FETCH_FAILURE

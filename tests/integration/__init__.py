"""Integration tests for the theme CLI.

This package contains integration tests that validate complete user workflows
with the Shopify CLI mocked out.

Test Structure:
- test_dev_workflow.py: Safe dev workflow (select, verify, sync, serve)
- test_push_list_workflows.py: Push and list workflows
- test_cli.py: Command dispatch and exit codes
"""

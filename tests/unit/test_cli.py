"""
Tests for the command-line interface.
"""

import json
import os

import pytest
from click.testing import CliRunner

from conftest import FakeAsyncCosmosClient, FakeAsyncCredential, FakeCosmosClient
from cosmos_samples import __version__, cli as cli_module
from cosmos_samples.cli import cli
from cosmos_samples.samples import async_main, sync_main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name in ("ACCOUNT_HOST", "ACCOUNT_KEY") or name.startswith("COSMOS_SAMPLES_"):
            monkeypatch.delenv(name, raising=False)
    # Keep log records out of the command output
    monkeypatch.setattr(cli_module, "setup_logging", lambda **kwargs: None)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def sync_client(monkeypatch):
    client = FakeCosmosClient()
    monkeypatch.setattr(sync_main, "build_client", lambda account, credential=None: client)
    return client


@pytest.fixture
def async_client(monkeypatch):
    client = FakeAsyncCosmosClient()
    monkeypatch.setattr(async_main, "build_async_client", lambda account, credential=None: client)
    return client


class TestSampleCommands:

    def test_sync(self, runner, sync_client):
        result = runner.invoke(cli, ["sync", "--key", "k"])

        assert result.exit_code == 0, result.output
        summary = json.loads(result.output)
        assert summary["variant"] == "sync"
        assert summary["created"] == 4
        assert summary["read"] == 4
        assert summary["errors"] == []
        assert sync_client.closed

    def test_sync_options(self, runner, sync_client):
        result = runner.invoke(cli, [
            "sync", "--key", "k", "--database", "Db", "--container", "Families",
            "--query", "by-last-name", "--page-size", "2", "--no-read-back",
        ])

        assert result.exit_code == 0, result.output
        summary = json.loads(result.output)
        assert summary["read"] == 0
        assert summary["query_pages"] == 2
        container = sync_client.databases["Db"].containers["Families"]
        assert container.queries[0]["max_item_count"] == 2

    def test_sync_failure_exits_one(self, runner, sync_client, monkeypatch):
        def refuse(self, families):
            raise RuntimeError("boom")

        monkeypatch.setattr(sync_main.SyncSample, "create_families", refuse)

        result = runner.invoke(cli, ["sync", "--key", "k"])

        assert result.exit_code == 1
        summary = json.loads(result.output)
        assert summary["errors"][0]["operation"] == "get_started"
        assert summary["errors"][0]["message"] == "boom"
        assert sync_client.closed

    def test_async(self, runner, async_client):
        result = runner.invoke(cli, ["async", "--key", "k", "--count", "6", "--seed", "3"])

        assert result.exit_code == 0, result.output
        summary = json.loads(result.output)
        assert summary["variant"] == "async"
        assert summary["created"] == 6
        assert async_client.closed

    def test_passwordless(self, runner, async_client, monkeypatch):
        credential = FakeAsyncCredential()
        monkeypatch.setattr(async_main, "build_async_credential", lambda: credential)

        result = runner.invoke(cli, ["passwordless"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["created"] == 4
        assert async_client.created_databases == []
        assert credential.closed

    def test_metrics_file(self, runner, sync_client, tmp_path):
        metrics_file = tmp_path / "metrics.prom"

        result = runner.invoke(cli, ["sync", "--key", "k", "--metrics-file", str(metrics_file)])

        assert result.exit_code == 0, result.output
        content = metrics_file.read_text()
        assert 'cosmos_operations_total{operation="create_item"} 4.0' in content

    def test_config_file(self, runner, sync_client, tmp_path):
        config_file = tmp_path / "samples.yaml"
        config_file.write_text(
            "account:\n"
            "  key: file-key\n"
            "container:\n"
            "  database: FromFile\n"
        )

        result = runner.invoke(cli, ["sync", "-c", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "FromFile" in sync_client.databases

    def test_invalid_config_exits_two(self, runner, sync_client, tmp_path):
        config_file = tmp_path / "samples.yaml"
        config_file.write_text("container:\n  throughput: 100\n")

        result = runner.invoke(cli, ["sync", "-c", str(config_file)])

        assert result.exit_code == 2
        assert "Invalid configuration" in result.output
        assert sync_client.databases == {}

    def test_blank_query_exits_two(self, runner, sync_client):
        result = runner.invoke(cli, ["sync", "--key", "k", "--query", "   "])

        assert result.exit_code == 2
        assert "Invalid configuration" in result.output
        assert sync_client.databases == {}

    def test_async_aad_mode_uses_token_credential(self, runner, async_client, monkeypatch):
        credential = FakeAsyncCredential()
        monkeypatch.setattr(async_main, "build_async_credential", lambda: credential)
        monkeypatch.setenv("COSMOS_SAMPLES_AUTH", "aad")

        result = runner.invoke(cli, ["async", "--count", "1"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["created"] == 1
        assert credential.closed


class TestInfoCommands:

    def test_generate(self, runner):
        result = runner.invoke(cli, ["generate", "--count", "2", "--seed", "5"])

        assert result.exit_code == 0
        documents = json.loads(result.output)
        assert len(documents) == 2
        assert all("lastName" in document for document in documents)

    def test_generate_is_reproducible(self, runner):
        first = runner.invoke(cli, ["generate", "--seed", "5"]).output
        second = runner.invoke(cli, ["generate", "--seed", "5"]).output

        assert first == second

    def test_queries(self, runner):
        result = runner.invoke(cli, ["queries"])

        assert result.exit_code == 0
        assert "not-andersen:" in result.output
        assert "boys-without-district:" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["version"])

        assert result.output.strip() == f"cosmos-samples version {__version__}"

    def test_version_option(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert __version__ in result.output

import pytest
from click.testing import CliRunner

from conftest import InMemoryOrchestrator, InMemorySecretStore
from swarm_rotate.infrastructure.entrypoints.cli import App, cli


@pytest.fixture
def app():
    return App(
        store=InMemorySecretStore(["100-db-pass", "200-db-pass", "100-tls-key"]),
        orchestrator=InMemoryOrchestrator({"svc1": ["100-db-pass"]}),
        clock=lambda: 300,
    )


@pytest.fixture
def run(app):
    runner = CliRunner()

    def invoke(*args, **kwargs):
        return runner.invoke(cli, list(args), obj=app, **kwargs)

    return invoke


def test_help_short_flag(run):
    result = run("-h")
    assert result.exit_code == 0
    for command in ("commit", "clean", "purge", "latest", "add", "update", "rm", "active"):
        assert command in result.output


def test_subcommand_help(run):
    result = run("add", "-h")
    assert result.exit_code == 0
    assert "--self-secret" in result.output
    assert "--mode" in result.output


def test_commit_from_file(run, app, tmp_path):
    source = tmp_path / "db-pass"
    source.write_text("C")
    result = run("commit", str(source))
    assert result.exit_code == 0
    assert result.output.strip() == "300-db-pass"
    assert app.store.secrets["300-db-pass"] == b"C"


def test_commit_from_stdin(run, app):
    result = run("commit", "-", "--name", "api-key", input="token")
    assert result.exit_code == 0
    assert app.store.secrets["300-api-key"] == b"token"


def test_commit_missing_file(run, tmp_path):
    result = run("commit", str(tmp_path / "nope"))
    assert result.exit_code == 1
    assert "Error: file not found" in result.output


def test_latest_and_active(run):
    assert run("latest", "db-pass").output.strip() == "200-db-pass"
    assert run("active", "svc1", "db-pass").output.strip() == "100-db-pass"


def test_latest_unknown(run):
    result = run("latest", "ghost")
    assert result.exit_code == 1
    assert result.output.strip() == "Error: no committed secret named 'ghost'"


def test_update(run, app):
    result = run("update", "svc1", "-s", "db-pass", "-u", "33", "-g", "33", "--mode", "0640")
    assert result.exit_code == 0
    assert "- 100-db-pass" in result.output
    assert "+ 200-db-pass -> db-pass" in result.output
    [(service, operations)] = app.orchestrator.updates
    bind = operations[1]
    assert (bind.mount.uid, bind.mount.gid, bind.mount.mode) == (33, 33, 0o640)


def test_update_already_latest_exits_3(run, app):
    app.orchestrator.bound["svc1"] = ["200-db-pass"]
    result = run("update", "svc1", "--secret=db-pass")
    assert result.exit_code == 3
    assert "already uses the latest version 200-db-pass" in result.output
    assert app.orchestrator.updates == []


def test_add_self_secret_forces_0600(run, app):
    result = run("add", "svc1", "-x", "tls-key", "--mode", "0644")
    assert result.exit_code == 0
    [(_, [bind])] = app.orchestrator.updates
    assert bind.mount.mode == 0o600


def test_add_requires_a_secret(run):
    result = run("add", "svc1")
    assert result.exit_code == 1
    assert "at least one secret is required" in result.output


def test_bad_mode_is_usage_error(run):
    result = run("add", "svc1", "-s", "db-pass", "--mode", "999")
    assert result.exit_code == 2


def test_rm(run, app):
    result = run("rm", "svc1", "-s", "db-pass")
    assert result.exit_code == 0
    assert app.orchestrator.bound["svc1"] == []


def test_rm_has_no_mount_options(run):
    assert run("rm", "svc1", "-s", "db-pass", "-u", "1").exit_code == 2


def test_clean_and_purge(run, app):
    result = run("clean", "db-pass", "tls-key")
    assert result.exit_code == 0
    assert "100-db-pass" in result.output
    assert "nothing to clean for tls-key" in result.output
    assert set(app.store.secrets) == {"200-db-pass", "100-tls-key"}

    assert run("purge", "tls-key").exit_code == 0
    assert set(app.store.secrets) == {"200-db-pass"}


def test_clean_unknown_name_deletes_nothing(run, app):
    result = run("clean", "db-pass", "ghost")
    assert result.exit_code == 1
    assert app.store.deleted == []


def test_invalid_configuration(run, monkeypatch):
    monkeypatch.setenv("SWARM_ROTATE_TIMEOUT", "-1")
    result = run("latest", "db-pass")
    assert result.exit_code == 1
    assert "invalid configuration timeout" in result.output


def test_clean_reports_earlier_names_before_a_failing_one(run, app):
    app.store.secrets = {"100-tls": b"", "100-db": b"", "200-db": b""}
    app.store.delete_errors["100-db"] = "in use"
    result = run("clean", "tls", "db")
    assert result.exit_code == 1
    assert "nothing to clean for tls" in result.output
    assert "Error: failed to delete secret 100-db: in use" in result.output

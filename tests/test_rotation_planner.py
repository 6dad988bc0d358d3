import pytest

from swarm_rotate.domain.entities.rotation import (
    BindOperation,
    RotationAction,
    RotationRequest,
    SecretMount,
    UnbindOperation,
)
from swarm_rotate.domain.entities.secret_version import SecretVersionId
from swarm_rotate.domain.errors import (
    ActiveSecretNotFound,
    AlreadyLatest,
    DuplicateSecretRequest,
    InvalidSecretName,
    MissingArgument,
    SecretAlreadyBound,
    SecretNotFound,
)

ADD, UPDATE, REMOVE = RotationAction.ADD, RotationAction.UPDATE, RotationAction.REMOVE


def _id(text):
    return SecretVersionId.decode(text)


@pytest.fixture
def committed(store):
    for secret_id in ("100-db-pass", "200-db-pass", "150-api-key"):
        store.secrets[secret_id] = b"x"
    return store


def test_add_binds_latest_version(planner, committed):
    mount = SecretMount(uid=1000, gid=1000, mode=0o640)
    plan = planner.plan("svc1", [RotationRequest("db-pass", ADD, mount)])
    assert plan.service == "svc1"
    assert plan.operations == (BindOperation(_id("200-db-pass"), "db-pass", mount),)


def test_add_unknown_secret_fails(planner, committed):
    with pytest.raises(SecretNotFound):
        planner.plan("svc1", [RotationRequest("nope", ADD)])


def test_add_refuses_name_already_bound(planner, committed, orchestrator):
    orchestrator.bound["svc1"] = ["100-db-pass"]
    with pytest.raises(SecretAlreadyBound):
        planner.plan("svc1", [RotationRequest("db-pass", ADD)])


def test_remove_unbinds_active_version(planner, committed, orchestrator):
    orchestrator.bound["svc1"] = ["100-db-pass"]
    plan = planner.plan("svc1", [RotationRequest("db-pass", REMOVE)])
    assert plan.operations == (UnbindOperation(_id("100-db-pass")),)


def test_remove_without_binding_fails_and_emits_nothing(planner, committed):
    with pytest.raises(ActiveSecretNotFound):
        planner.plan("svc1", [RotationRequest("db-pass", REMOVE)])


def test_update_swaps_active_for_latest(planner, committed, orchestrator):
    orchestrator.bound["svc1"] = ["100-db-pass"]
    plan = planner.plan("svc1", [RotationRequest("db-pass", UPDATE)])
    assert plan.operations == (
        UnbindOperation(_id("100-db-pass")),
        BindOperation(_id("200-db-pass"), "db-pass", SecretMount()),
    )
    assert plan.unbinds == [UnbindOperation(_id("100-db-pass"))]
    assert [op.source for op in plan.binds] == [_id("200-db-pass")]


def test_update_when_already_latest_fails(planner, committed, orchestrator):
    orchestrator.bound["svc1"] = ["200-db-pass"]
    with pytest.raises(AlreadyLatest) as excinfo:
        planner.plan("svc1", [RotationRequest("db-pass", UPDATE)])
    assert excinfo.value.secret_id == "200-db-pass"


def test_update_without_binding_fails(planner, committed):
    with pytest.raises(ActiveSecretNotFound):
        planner.plan("svc1", [RotationRequest("db-pass", UPDATE)])


def test_update_without_committed_version_fails(planner, orchestrator):
    orchestrator.bound["svc1"] = ["100-db-pass"]
    with pytest.raises(SecretNotFound):
        planner.plan("svc1", [RotationRequest("db-pass", UPDATE)])


def test_one_failing_request_aborts_whole_plan(planner, committed, orchestrator):
    orchestrator.bound["svc1"] = ["100-db-pass"]
    requests = [
        RotationRequest("db-pass", UPDATE),
        RotationRequest("api-key", REMOVE),
    ]
    with pytest.raises(ActiveSecretNotFound):
        planner.plan("svc1", requests)
    assert orchestrator.updates == []


def test_operations_follow_request_order(planner, committed, orchestrator):
    orchestrator.bound["svc1"] = ["100-db-pass"]
    plan = planner.plan(
        "svc1",
        [RotationRequest("api-key", ADD), RotationRequest("db-pass", REMOVE)],
    )
    assert plan.operations == (
        BindOperation(_id("150-api-key"), "api-key", SecretMount()),
        UnbindOperation(_id("100-db-pass")),
    )


def test_empty_requests_rejected(planner):
    with pytest.raises(MissingArgument):
        planner.plan("svc1", [])


def test_blank_service_rejected(planner, committed):
    with pytest.raises(MissingArgument):
        planner.plan(" ", [RotationRequest("db-pass", ADD)])


def test_duplicate_names_rejected(planner, committed):
    with pytest.raises(DuplicateSecretRequest):
        planner.plan("svc1", [RotationRequest("db-pass", ADD), RotationRequest("db-pass", UPDATE)])


def test_invalid_name_rejected_before_any_lookup(planner, store):
    with pytest.raises(InvalidSecretName):
        planner.plan("svc1", [RotationRequest("bad name", ADD)])
    assert store.list_calls == 0


def test_restricted_mount_forces_0600():
    mount = SecretMount.restricted(uid=5, gid=6)
    assert (mount.uid, mount.gid, mount.mode) == (5, 6, 0o600)
    assert mount.octal_mode == "0600"
    assert SecretMount().octal_mode == "0644"

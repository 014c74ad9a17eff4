"""Tests for the provisioning saga state machine and compensation order."""

import logging

import pytest

from app.application.services.provisioning_saga import (
    IllegalSagaTransition,
    ProvisioningSaga,
)
from app.domain.enums import SagaState


async def _value(v):
    return v


def test_forward_path_is_legal() -> None:
    saga = ProvisioningSaga(subject="a@b.org")
    for state in (
        SagaState.ROLE_VERIFIED,
        SagaState.ACCOUNT_CREATED,
        SagaState.ROLE_BOUND,
        SagaState.PROFILE_CREATED,
        SagaState.COMMITTED,
    ):
        saga.transition(state)
    assert saga.state is SagaState.COMMITTED


def test_compensating_unreachable_before_account_exists() -> None:
    saga = ProvisioningSaga(subject="a@b.org")
    saga.transition(SagaState.ROLE_VERIFIED)
    assert not saga.can_transition(SagaState.COMPENSATING)
    with pytest.raises(IllegalSagaTransition):
        saga.transition(SagaState.COMPENSATING)


def test_skipping_a_step_is_illegal() -> None:
    saga = ProvisioningSaga(subject="a@b.org")
    with pytest.raises(IllegalSagaTransition):
        saga.transition(SagaState.ACCOUNT_CREATED)


async def test_failure_before_account_goes_straight_to_failed() -> None:
    saga = ProvisioningSaga(subject="a@b.org")

    async def boom():
        raise RuntimeError("role missing")

    with pytest.raises(RuntimeError, match="role missing"):
        await saga.run_step("verify_role", SagaState.ROLE_VERIFIED, boom)
    assert saga.state is SagaState.FAILED
    assert saga.steps == []


async def test_compensations_run_in_reverse_order() -> None:
    calls: list[str] = []
    saga = ProvisioningSaga(subject="a@b.org")

    def undo(name):
        async def _undo():
            calls.append(name)

        return _undo

    await saga.run_step("verify_role", SagaState.ROLE_VERIFIED, lambda: _value("role"))
    await saga.run_step(
        "create_account",
        SagaState.ACCOUNT_CREATED,
        lambda: _value("acc-1"),
        lambda acc: undo(f"delete_account:{acc}"),
    )
    await saga.run_step(
        "bind_role",
        SagaState.ROLE_BOUND,
        lambda: _value(None),
        lambda _: undo("delete_role_edge"),
    )

    async def profile_fails():
        raise ValueError("ward not in parish")

    with pytest.raises(ValueError):
        await saga.run_step("create_profile", SagaState.PROFILE_CREATED, profile_fails)

    assert calls == ["delete_role_edge", "delete_account:acc-1"]
    assert saga.state is SagaState.FAILED
    assert isinstance(saga.error, ValueError)


async def test_compensation_failure_is_logged_critical_and_original_error_kept(
    caplog: pytest.LogCaptureFixture,
) -> None:
    calls: list[str] = []
    saga = ProvisioningSaga(subject="orphan@b.org", kind="parishioner")

    async def delete_account():
        calls.append("delete_account")

    async def delete_edge():
        raise ConnectionError("db down")

    await saga.run_step("verify_role", SagaState.ROLE_VERIFIED, lambda: _value(None))
    await saga.run_step(
        "create_account",
        SagaState.ACCOUNT_CREATED,
        lambda: _value("acc"),
        lambda _: delete_account,
    )
    await saga.run_step(
        "bind_role", SagaState.ROLE_BOUND, lambda: _value(None), lambda _: delete_edge
    )

    async def profile_fails():
        raise RuntimeError("insert failed")

    with caplog.at_level(logging.WARNING):
        with pytest.raises(RuntimeError, match="insert failed"):
            await saga.run_step(
                "create_profile", SagaState.PROFILE_CREATED, profile_fails
            )

    critical = [r for r in caplog.records if r.levelno == logging.CRITICAL]
    assert len(critical) == 1
    assert "orphan@b.org" in critical[0].getMessage()
    assert "manual remediation" in critical[0].getMessage()
    # Later compensations still run.
    assert calls == ["delete_account"]
    assert [f.step for f in saga.compensation_failures] == ["bind_role"]
    assert saga.summary()["state"] == "failed"

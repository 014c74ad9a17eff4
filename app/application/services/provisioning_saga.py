"""Provisioning saga: ordered steps with compensations, driven by an explicit state machine.

    PENDING -> ROLE_VERIFIED -> ACCOUNT_CREATED -> ROLE_BOUND -> PROFILE_CREATED -> COMMITTED
    {ACCOUNT_CREATED, ROLE_BOUND, PROFILE_CREATED} -> COMPENSATING -> FAILED

A failure before ACCOUNT_CREATED goes straight to FAILED: nothing exists to
undo. Once the account exists every failure compensates the completed steps
in reverse order. A compensation that itself fails is logged CRITICAL and
recorded; the remaining compensations still run and the original error is
the one re-raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from app.domain.enums import SagaState

logger = logging.getLogger(__name__)

T = TypeVar("T")

Compensation = Callable[[], Awaitable[None]]

_TRANSITIONS: dict[SagaState, frozenset[SagaState]] = {
    SagaState.PENDING: frozenset({SagaState.ROLE_VERIFIED, SagaState.FAILED}),
    SagaState.ROLE_VERIFIED: frozenset({SagaState.ACCOUNT_CREATED, SagaState.FAILED}),
    SagaState.ACCOUNT_CREATED: frozenset({SagaState.ROLE_BOUND, SagaState.COMPENSATING}),
    SagaState.ROLE_BOUND: frozenset({SagaState.PROFILE_CREATED, SagaState.COMPENSATING}),
    SagaState.PROFILE_CREATED: frozenset({SagaState.COMMITTED, SagaState.COMPENSATING}),
    SagaState.COMPENSATING: frozenset({SagaState.FAILED}),
    SagaState.COMMITTED: frozenset(),
    SagaState.FAILED: frozenset(),
}

_COMPENSABLE = frozenset(
    {SagaState.ACCOUNT_CREATED, SagaState.ROLE_BOUND, SagaState.PROFILE_CREATED}
)


class IllegalSagaTransition(RuntimeError):
    """Programming error: a step tried to move the saga along an undefined edge."""


@dataclass
class SagaStep:
    """A completed step and the closure that undoes it (None when nothing to undo)."""

    name: str
    reached: SagaState
    compensation: Compensation | None = None


@dataclass
class CompensationFailure:
    step: str
    error: str


@dataclass
class ProvisioningSaga:
    """One provisioning run. ``subject`` (usually the e-mail) is used in log records."""

    subject: str
    kind: str = ""
    state: SagaState = SagaState.PENDING
    steps: list[SagaStep] = field(default_factory=list)
    compensation_failures: list[CompensationFailure] = field(default_factory=list)
    error: BaseException | None = None

    def can_transition(self, to: SagaState) -> bool:
        return to in _TRANSITIONS[self.state]

    def transition(self, to: SagaState) -> None:
        if not self.can_transition(to):
            raise IllegalSagaTransition(f"{self.state.value} -> {to.value}")
        logger.debug("Saga %s: %s -> %s", self.subject, self.state.value, to.value)
        self.state = to

    async def run_step(
        self,
        name: str,
        reached: SagaState,
        action: Callable[[], Awaitable[T]],
        compensation: Callable[[T], Compensation | None] | None = None,
    ) -> T:
        """Run action, move to ``reached`` and remember how to undo it.

        ``compensation`` receives the action's result and returns the undo
        closure, so the closure can capture ids created by the step.
        On failure the saga is aborted (compensated when needed) and the
        action's exception is re-raised unchanged.
        """
        if not self.can_transition(reached):
            raise IllegalSagaTransition(f"{self.state.value} -> {reached.value}")
        try:
            result = await action()
        except BaseException as exc:
            logger.warning(
                "Provisioning step '%s' failed for %s: %s",
                name,
                self.subject,
                exc,
            )
            await self.abort(exc)
            raise
        self.transition(reached)
        undo = compensation(result) if compensation is not None else None
        self.steps.append(SagaStep(name=name, reached=reached, compensation=undo))
        logger.info("Provisioning step '%s' completed for %s", name, self.subject)
        return result

    def commit(self) -> None:
        self.transition(SagaState.COMMITTED)

    async def abort(self, exc: BaseException) -> None:
        """Move to FAILED, compensating first when the account already exists."""
        self.error = exc
        if self.state in _COMPENSABLE:
            self.transition(SagaState.COMPENSATING)
            # Compensation must finish even if the caller's task is cancelled.
            await asyncio.shield(self.compensate())
        self.transition(SagaState.FAILED)

    async def compensate(self) -> None:
        """Run compensations of completed steps in reverse order."""
        for step in reversed(self.steps):
            if step.compensation is None:
                continue
            try:
                await step.compensation()
            except Exception as comp_exc:
                self.compensation_failures.append(
                    CompensationFailure(step=step.name, error=str(comp_exc))
                )
                logger.critical(
                    "Compensation of step '%s' failed for %s (kind=%s): %s. "
                    "Orphaned account requires manual remediation.",
                    step.name,
                    self.subject,
                    self.kind,
                    comp_exc,
                    exc_info=True,
                )
            else:
                logger.warning(
                    "Compensated step '%s' for %s", step.name, self.subject
                )

    @property
    def completed_steps(self) -> list[str]:
        return [s.name for s in self.steps]

    def summary(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "state": self.state.value,
            "steps": self.completed_steps,
            "compensation_failures": [f.step for f in self.compensation_failures],
        }

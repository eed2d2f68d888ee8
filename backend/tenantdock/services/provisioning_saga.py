"""
Provisioning saga.

Tenant provisioning spans a catalog transaction, DDL that commits on its
own, and writes through a second connection into the new schema. No single
transaction covers all of that, so each step that leaves something behind
registers the action that undoes it, and a failure replays those actions in
reverse order.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Compensation = Callable[[], Awaitable[Any]]


class ProvisioningState(str, Enum):
    VALIDATED = "validated"
    SCHEMA_CHECKED = "schema_checked"
    SCHEMA_CREATED = "schema_created"
    TENANT_RECORDED = "tenant_recorded"
    CONNECTION_BOUND = "connection_bound"
    MIGRATED = "migrated"
    ADMIN_SEEDED = "admin_seeded"
    SETTINGS_SEEDED = "settings_seeded"
    COMMITTED = "committed"


_ORDER = list(ProvisioningState)


@dataclass
class CompletedStep:
    state: ProvisioningState
    compensate: Compensation | None = None


@dataclass
class CompensationError:
    state: ProvisioningState
    error: Exception


@dataclass
class ProvisioningSaga:
    """Ordered record of completed provisioning steps and their undo actions."""

    schema_name: str
    state: ProvisioningState = ProvisioningState.VALIDATED
    completed: list[CompletedStep] = field(default_factory=list)

    def advance(self, state: ProvisioningState, compensate: Compensation | None = None) -> None:
        """Record that `state` was reached."""
        if _ORDER.index(state) <= _ORDER.index(self.state):
            raise RuntimeError(f"Cannot move from {self.state.value} to {state.value}")
        self.completed.append(CompletedStep(state, compensate))
        self.state = state
        logger.debug(f"[{self.schema_name}] {state.value}")

    async def run(
        self,
        state: ProvisioningState,
        action: Callable[[], Awaitable[Any]],
        compensate: Compensation | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Run a step and, once it succeeds, advance to `state`.

        A step that fails registers nothing: its own partial effects are the
        step's responsibility.
        """
        if timeout is None:
            result = await action()
        else:
            result = await asyncio.wait_for(action(), timeout)
        self.advance(state, compensate)
        return result

    async def compensate(self) -> list[CompensationError]:
        """Undo completed steps, newest first.

        Every compensation is attempted even if an earlier one fails; the
        failures are returned rather than raised.
        """
        errors = []
        for step in reversed(self.completed):
            if step.compensate is None:
                continue
            try:
                await step.compensate()
            except Exception as exc:
                logger.exception(f"[{self.schema_name}] compensation for {step.state.value} failed")
                errors.append(CompensationError(step.state, exc))
        self.completed.clear()
        return errors

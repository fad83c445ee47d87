from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

Context = Mapping[str, Any]
StepFn = Callable[[Context], Awaitable[Optional[Mapping[str, Any]]]]


class ProvisioningStepError(RuntimeError):
    """A fatal step failed; the steps after it were not run.

    Resources created by `completed_steps` are left in place (there is no rollback).
    """

    def __init__(self, *, flow: str, step: str, completed_steps: Sequence[str], cause: BaseException) -> None:
        super().__init__(f"{flow}: step {step!r} failed: {cause}")
        self.flow = flow
        self.step = step
        self.completed_steps = tuple(completed_steps)


@dataclass(frozen=True)
class ProvisioningStep:
    name: str
    run: StepFn
    fatal: bool = True


class ProvisioningOrchestrator:
    def __init__(self, name: str, steps: Sequence[ProvisioningStep]) -> None:
        self._name = name
        self._steps = tuple(steps)

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self._steps]

    async def run(self, initial_context: Optional[Context] = None) -> dict[str, Any]:
        """Run every step in order and return the accumulated context.

        Each step receives the context built so far and returns the keys it adds
        or replaces. A non-fatal step that raises is logged and skipped; a fatal
        one stops the flow with ProvisioningStepError.
        """

        context: dict[str, Any] = dict(initial_context or {})
        completed: list[str] = []
        total = len(self._steps)

        for index, step in enumerate(self._steps, start=1):
            logger.info("%s [%d/%d]: %s", self._name, index, total, step.name)
            try:
                updates = await step.run(context)
            except Exception as exc:
                if not step.fatal:
                    logger.error("%s: non-fatal step %r failed, continuing: %s", self._name, step.name, exc)
                    continue
                logger.exception("%s: step %r failed", self._name, step.name)
                raise ProvisioningStepError(
                    flow=self._name,
                    step=step.name,
                    completed_steps=completed,
                    cause=exc,
                ) from exc

            if updates:
                context = {**context, **updates}
            completed.append(step.name)

        logger.info("%s: completed %d step(s)", self._name, len(completed))
        return context

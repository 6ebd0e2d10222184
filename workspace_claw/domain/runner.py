"""ActionRunner — applies a parsed batch in order, one action at a time.

Later actions may rely on files or directories created by earlier ones, so
a batch never runs concurrently. Failures are reported per action; actions
that already succeeded stay applied.
"""

import sys
from typing import List, Optional

from workspace_claw.domain.action_parser import MAX_ACTIONS_PER_MESSAGE, parse_actions
from workspace_claw.domain.models import Action, ActionResult, BatchReport, action_label
from workspace_claw.ports.outbound import ActionExecutorPort, ApprovalPort


def _log(msg: str):
    print(msg, file=sys.stderr)


class ApproveAll:
    """ApprovalPort that lets every action through."""

    async def approve(self, action: Action) -> bool:
        return True


class ActionRunner:
    """Sequential batch execution on top of an ActionExecutorPort.

    There is no locking between runs: two batches started concurrently
    against the same workspace can interleave their writes. Callers that
    need exclusion must serialize runs themselves.
    """

    def __init__(
        self,
        executor: ActionExecutorPort,
        approval: Optional[ApprovalPort] = None,
        stop_on_failure: bool = True,
        max_actions: int = MAX_ACTIONS_PER_MESSAGE,
    ):
        self.executor = executor
        self.approval = approval or ApproveAll()
        self.stop_on_failure = stop_on_failure
        self.max_actions = max_actions

    async def run(self, actions: List[Action], root: str) -> BatchReport:
        """Execute ``actions`` in order under ``root`` and report each outcome."""
        report = BatchReport()
        halted = False

        for index, action in enumerate(actions):
            label = action_label(action)

            if halted:
                report.results.append(ActionResult(
                    action=action, success=False, skipped=True,
                    message=f"Skipped {label}: an earlier action failed",
                ))
                continue

            if index >= self.max_actions:
                report.results.append(ActionResult(
                    action=action, success=False, skipped=True,
                    message=f"Skipped {label}: only {self.max_actions} actions run per message",
                ))
                continue

            if not await self.approval.approve(action):
                _log(f"[runner] AUDIT: rejected {label}")
                report.results.append(ActionResult(
                    action=action, success=False, skipped=True,
                    message=f"Skipped {label}: not approved",
                ))
                continue

            try:
                message = await self.executor.execute(action, root)
            except Exception as e:
                _log(f"[runner] AUDIT: failed {label} — {e}")
                report.results.append(ActionResult(
                    action=action, success=False,
                    message=f"Failed to execute {label}: {e}",
                    error=type(e).__name__,
                ))
                halted = self.stop_on_failure
                continue

            _log(f"[runner] AUDIT: applied {label}")
            report.results.append(ActionResult(action=action, success=True, message=message))

        _log(f"[runner] batch done: {report.summary()}")
        return report

    async def run_text(self, text: str, root: str) -> BatchReport:
        """Parse LLM output and run whatever actions it contains."""
        return await self.run(parse_actions(text), root)

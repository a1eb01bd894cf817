import logging

import requests

from temposaurus.config import Settings
from temposaurus.errors import FatalStageError
from temposaurus.http_client import SessionFactory
from temposaurus.report import aggregate, render
from temposaurus.schemas import PipelineResult, PipelineState
from temposaurus.stages import enumerate_periods, fetch_approvals, resolve_identity


logger = logging.getLogger(__name__)


class PipelineRunner:
    def __init__(self, settings: Settings, session_factory: SessionFactory = requests.Session) -> None:
        self.settings = settings
        self.session_factory = session_factory
        self.state = PipelineState.START

    def run(self) -> PipelineResult:
        settings = self.settings
        self.state = PipelineState.START
        logger.info(
            "collecting timesheet approvals",
            extra={"date_from": settings.date_from, "date_to": settings.date_to},
        )

        try:
            logger.info("acquiring Atlassian user id")
            identity = resolve_identity(settings, self.session_factory)
            self._advance(PipelineState.IDENTITY_RESOLVED)
            logger.info("identity acquired: %s", identity.account_id, extra={"account_id": identity.account_id})

            logger.info("acquiring the list of time-sheet start/end dates")
            periods = enumerate_periods(settings, self.session_factory)
            self._advance(PipelineState.PERIODS_ENUMERATED)
        except FatalStageError as exc:
            self.state = PipelineState.ABORTED
            logger.error(
                "pipeline aborted: %s",
                exc,
                extra={"endpoint": exc.endpoint, "cause": exc.cause, "status": exc.status},
            )
            return PipelineResult(
                state=self.state,
                date_from=settings.date_from,
                date_to=settings.date_to,
                error=str(exc),
            )

        logger.info("found %d periods", len(periods), extra={"account_id": identity.account_id})

        approvals = fetch_approvals(settings, identity, periods, self.session_factory)
        self._advance(PipelineState.APPROVALS_COLLECTED)

        totals = aggregate(approvals)
        report = render(approvals, totals)
        self._advance(PipelineState.REPORTED)

        result = PipelineResult(
            state=PipelineState.DONE,
            date_from=settings.date_from,
            date_to=settings.date_to,
            identity=identity,
            approvals=tuple(approvals),
            totals=totals,
            report=report,
        )
        self._advance(PipelineState.DONE)
        logger.info(
            "report complete",
            extra={"periods": len(approvals), "degraded_periods": result.degraded_periods},
        )
        return result

    def _advance(self, state: PipelineState) -> None:
        logger.debug("pipeline state %s -> %s", self.state.value, state.value)
        self.state = state

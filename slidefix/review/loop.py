"""
Iterative review-and-fix loop.

Asks the language model to review the current deck, applies the fixes it
proposes, and repeats until the model has nothing left to fix, the user
stops, or the iteration cap is reached.
"""

import logging
from typing import Callable, Optional

from slidefix.config import ReviewRequest
from slidefix.errors import CollaboratorUnavailable, MalformedResponse
from slidefix.fixes.engine import apply_fixes
from slidefix.llm.base import TextGenerator
from slidefix.models import ApplyResult, Deck, LoopState, ReviewReport, StructuralAnalysis
from slidefix.recovery import Corrector, ai_corrector, analysis_from_value, recover_json
from slidefix.review.prompts import build_review_prompt

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 3

# (fixes_applied_this_round, next_iteration, max_iterations) -> keep going?
ConfirmCallback = Callable[[int, int, int], bool]
ProgressCallback = Callable[[int, StructuralAnalysis, ApplyResult], None]

_USE_GENERATOR = object()


class ConvergenceLoop:
    """
    Review-and-fix state machine.

    States:
        IDLE -> ANALYZING -> APPLYING -> AWAITING_CONTINUATION -> ANALYZING ...
        terminal: CONVERGED, CAPPED, USER_STOPPED, FAILED

    Every iteration builds a fresh review prompt from the deck as it stands,
    so the model always sees the effect of earlier fixes.
    """

    def __init__(
        self,
        generator: TextGenerator,
        confirm: ConfirmCallback,
        max_iterations: int = MAX_ITERATIONS,
        corrector=_USE_GENERATOR,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Initialize the loop.

        Args:
            generator: Backend asked for each analysis
            confirm: Asked once per round whether to continue
            max_iterations: Hard cap on analysis rounds (at most 3)
            corrector: JSON corrector for unparseable replies. Defaults to
                asking the same generator; pass None to disable.
            progress_callback: Called with (iteration, analysis, result)
                after every applied batch
        """
        if not 1 <= max_iterations <= MAX_ITERATIONS:
            raise ValueError(f"max_iterations must be between 1 and {MAX_ITERATIONS}")

        self.generator = generator
        self.confirm = confirm
        self.max_iterations = max_iterations
        self.corrector: Optional[Corrector] = (
            ai_corrector(generator) if corrector is _USE_GENERATOR else corrector
        )
        self.progress_callback = progress_callback
        self.state = LoopState.IDLE

    def analyze(self, deck: Deck, request: ReviewRequest) -> StructuralAnalysis:
        """
        Request and interpret one structural analysis of the deck.

        Raises:
            CollaboratorUnavailable: the generation call failed
            MalformedResponse: the reply could not be interpreted
        """
        self.state = LoopState.ANALYZING
        prompt = build_review_prompt(deck, request)
        try:
            response = self.generator.generate(prompt)
        except CollaboratorUnavailable:
            raise
        except Exception as e:
            name = getattr(self.generator, "name", "generator")
            raise CollaboratorUnavailable(f"{name} request failed: {e}") from e

        result = recover_json(response, self.corrector)
        analysis = analysis_from_value(result.value) if result.ok else None
        if analysis is None:
            raise MalformedResponse(response or "", result.error)
        return analysis

    def run(self, deck: Deck, request: Optional[ReviewRequest] = None) -> ReviewReport:
        """
        Run review rounds against the deck, mutating it in place.

        Args:
            deck: Deck to improve
            request: Focus areas and goal for the review

        Returns:
            ReviewReport describing how the loop ended

        Raises:
            CollaboratorUnavailable: with the partial report attached as
                ``report``; fixes from earlier rounds stay applied
        """
        request = request or ReviewRequest()
        report = ReviewReport()
        iteration = 0

        while True:
            iteration += 1
            report.iterations = iteration
            logger.info("[Review] Iteration %d/%d", iteration, self.max_iterations)

            try:
                analysis = self.analyze(deck, request)
            except MalformedResponse as e:
                logger.warning("[Review] Could not interpret analysis response")
                report.uninterpreted_response = e.raw
                self._finish(report, LoopState.CONVERGED)
                break
            except CollaboratorUnavailable as e:
                logger.error("[Review] Analysis request failed: %s", e)
                self._finish(report, LoopState.FAILED)
                e.report = report
                raise

            report.overall_assessment = analysis.overall_assessment
            if not analysis.fixes:
                logger.info("[Review] No more improvements needed")
                self._finish(report, LoopState.CONVERGED)
                break

            self.state = LoopState.APPLYING
            logger.info("[Review] Applying %d fixes", len(analysis.fixes))
            result = apply_fixes(deck, analysis.fixes)
            report.fixes_applied += result.applied
            report.guidance = list(result.guidance)
            report.failures.extend(result.failures)
            report.skipped.extend(result.skipped)

            if self.progress_callback:
                self.progress_callback(iteration, analysis, result)

            if iteration >= self.max_iterations:
                self._finish(report, LoopState.CAPPED)
                break

            self.state = LoopState.AWAITING_CONTINUATION
            if result.applied == 0:
                logger.info("[Review] No auto-applicable fixes this round")
                self._finish(report, LoopState.CONVERGED)
                break

            if not self.confirm(result.applied, iteration + 1, self.max_iterations):
                self._finish(report, LoopState.USER_STOPPED)
                break

        logger.info(
            "[Review] Finished (%s): %d fixes applied over %d iterations",
            report.state.value,
            report.fixes_applied,
            report.iterations,
        )
        return report

    def _finish(self, report: ReviewReport, state: LoopState) -> None:
        self.state = state
        report.state = state

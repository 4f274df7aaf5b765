import threading

from .outcome import ReportSummary, VerificationOutcome


class VerificationReport:
    """
    Append-only record of verification outcomes in the order they were
    recorded. Safe to record into from concurrent node verifications.
    """

    def __init__(self) -> None:
        self._outcomes: list[VerificationOutcome] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._outcomes)

    def __iter__(self):
        return iter(self.outcomes)

    @property
    def outcomes(self) -> tuple[VerificationOutcome, ...]:
        with self._lock:
            return tuple(self._outcomes)

    @property
    def all_passed(self) -> bool:
        return self.first_failure() is None

    def record(self, outcome: VerificationOutcome):
        with self._lock:
            self._outcomes.append(outcome)

    def first_failure(self) -> VerificationOutcome | None:
        for outcome in self.outcomes:
            if outcome.failed:
                return outcome

        return None

    def failures(self) -> list[VerificationOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]

    def summary(self) -> ReportSummary:
        outcomes = self.outcomes
        failed = len([outcome for outcome in outcomes if outcome.failed])

        return ReportSummary(
            total=len(outcomes),
            passed=len(outcomes) - failed,
            failed=failed,
        )

    def format_failure(self) -> str | None:
        if (failure := self.first_failure()) is None:
            return None

        return failure.describe()

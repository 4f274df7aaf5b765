from .outcome import (
    ReportSummary as ReportSummary,
    VerificationOutcome as VerificationOutcome,
)
from .report import VerificationReport as VerificationReport

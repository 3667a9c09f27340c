"""
Verification harness: run invoice scenarios through a UIDriver.

    from invoicedesk.harness import ScenarioRunner
    report = ScenarioRunner(driver).run_suite(VALID_INVOICE_SCENARIOS)
"""

from invoicedesk.harness.driver import DisplayPolicy, UIDriver
from invoicedesk.harness.runner import (
    ScenarioResult,
    ScenarioRunner,
    StepFailure,
    SuiteReport,
    run_scenario,
    run_suite,
)

__all__ = [
    "DisplayPolicy",
    "ScenarioResult",
    "ScenarioRunner",
    "StepFailure",
    "SuiteReport",
    "UIDriver",
    "run_scenario",
    "run_suite",
]

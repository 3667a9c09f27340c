"""
Verification Harness

Runs invoice scenarios against a UIDriver: computes the expected display
strings locally, drives the form, reads the rendered totals back and records
every difference with the step it happened in and the last UI state seen.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from invoicedesk.billing.catalog import DEFAULT_CATALOG, ProductCatalog
from invoicedesk.billing.scenarios import InvoiceScenario
from invoicedesk.billing.totals import InvoiceTotals, compute_totals
from invoicedesk.common.exceptions import (
    AssertionMismatchError,
    InvalidInputError,
    InvoiceDeskError,
    ScenarioSetupError,
    UICollaboratorError,
    UICollaboratorTimeoutError,
)
from invoicedesk.common.types import DisplayAmount, StepName
from invoicedesk.harness.driver import DisplayPolicy, UIDriver

logger = logging.getLogger(__name__)

DEFAULT_SCENARIO_TIMEOUT_S = 120.0

# Fields compared against the rendered totals, in display order
DISPLAYED_FIELDS = ("subtotal", "tax", "grand_total")


@dataclass(frozen=True)
class StepFailure:
    step: StepName
    error: InvoiceDeskError

    @property
    def kind(self) -> str:
        return type(self.error).__name__

    def describe(self) -> str:
        if isinstance(self.error, AssertionMismatchError):
            return (
                f"[{self.step}] {self.error.field}\n"
                f"    expected: {self.error.expected!r}\n"
                f"    actual:   {self.error.actual!r}"
            )
        return f"[{self.step}] {self.kind}: {self.error}"


@dataclass
class ScenarioResult:
    """Outcome of one scenario run"""

    scenario: InvoiceScenario
    totals: InvoiceTotals | None = None
    expected: dict[str, DisplayAmount] = field(default_factory=dict)
    actual: dict[str, DisplayAmount] = field(default_factory=dict)
    failures: list[StepFailure] = field(default_factory=list)
    last_state: dict[str, Any] = field(default_factory=dict)
    aborted: bool = False
    duration_seconds: float = 0.0

    @property
    def passed(self) -> bool:
        return not self.failures

    @property
    def mismatches(self) -> list[AssertionMismatchError]:
        return [f.error for f in self.failures if isinstance(f.error, AssertionMismatchError)]

    @property
    def failed_step(self) -> StepName | None:
        return self.failures[0].step if self.failures else None

    def diff(self) -> str:
        """Human-readable failure report, used as the pytest assertion message."""
        if self.passed:
            return f"✅ {self.scenario.name}: all totals match"

        lines = [f"❌ {self.scenario.name}: {len(self.failures)} problem(s)"]
        lines.extend(f"  {failure.describe()}" for failure in self.failures)
        if self.last_state:
            lines.append(f"  last UI state: {self.last_state}")
        return "\n".join(lines)


@dataclass
class SuiteReport:
    results: list[ScenarioResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    @property
    def all_passed(self) -> bool:
        return self.failed == 0

    def summary(self) -> str:
        width = max((len(r.scenario.name) for r in self.results), default=8)
        lines = [f"🧾 Invoice scenarios: {self.passed} passed, {self.failed} failed"]
        for result in self.results:
            status = "PASS" if result.passed else f"FAIL @ {result.failed_step}"
            lines.append(f"  {result.scenario.name:<{width}}  {status}")
        for result in self.results:
            if not result.passed:
                lines.append(result.diff())
        return "\n".join(lines)


class ScenarioRunner:
    """
    Drive invoice scenarios through a UIDriver and compare the results.

    Local validation always happens first: a scenario with an unknown product
    or a negative input never reaches the driver.
    """

    def __init__(
        self,
        driver: UIDriver,
        catalog: ProductCatalog = DEFAULT_CATALOG,
        policy: DisplayPolicy | None = None,
        scenario_timeout: float = DEFAULT_SCENARIO_TIMEOUT_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.driver = driver
        self.catalog = catalog
        self.policy = policy or DisplayPolicy()
        self.scenario_timeout = scenario_timeout
        self._clock = clock
        self._deadline = 0.0
        self._state: dict[str, Any] = {}

    # ===============================================================================
    # PUBLIC API
    # ===============================================================================

    def run_scenario(self, scenario: InvoiceScenario) -> ScenarioResult:
        started = self._clock()
        self._deadline = started + self.scenario_timeout
        self._state = {"scenario": scenario.name, "step": None, "items_added": 0}
        result = ScenarioResult(scenario=scenario)

        logger.info(f"🧾 [Harness] Running scenario: {scenario.name}")
        try:
            self._run(scenario, result)
        except (InvalidInputError, ScenarioSetupError, UICollaboratorError) as e:
            step = getattr(e, "step", None) or self._state.get("step") or "validate"
            if isinstance(e, UICollaboratorError):
                # Driver snapshot (url, rows) on top of what the harness tracked
                e.last_state = {**self._state, **e.last_state}
                self._state = dict(e.last_state)
            result.failures.append(StepFailure(step, e))
            result.aborted = True
            logger.warning(f"⚠️ [Harness] {scenario.name} aborted at {step}: {e}")

        result.last_state = dict(self._state)
        result.duration_seconds = self._clock() - started
        if result.passed:
            logger.info(f"✅ [Harness] {scenario.name} passed in {result.duration_seconds:.1f}s")
        else:
            logger.error(f"❌ [Harness] {result.diff()}")
        return result

    def run_suite(self, scenarios: Iterable[InvoiceScenario]) -> SuiteReport:
        """Run scenarios strictly one after another; one failure never stops the rest."""
        report = SuiteReport()
        for scenario in scenarios:
            report.results.append(self.run_scenario(scenario))
        logger.info(f"🧾 [Harness] Suite finished: {report.passed} passed, {report.failed} failed")
        return report

    def expected_for(self, scenario: InvoiceScenario) -> tuple[InvoiceTotals, dict[str, DisplayAmount]]:
        """Compute totals for a scenario without touching the UI."""
        items = [self.catalog.line_item(item.product, item.quantity) for item in scenario.items]
        totals = compute_totals(items, scenario.vat_rate, scenario.discount)
        formatted = totals.formatted()
        return totals, {key: formatted[key] for key in DISPLAYED_FIELDS}

    # ===============================================================================
    # STEPS
    # ===============================================================================

    def _run(self, scenario: InvoiceScenario, result: ScenarioResult) -> None:
        self._enter("validate")
        totals, computed = self.expected_for(scenario)
        result.totals = totals
        result.expected = self._pin(scenario, computed, result)

        self._enter("select_customer")
        self.driver.select_customer(scenario.customer)
        self._state["customer"] = scenario.customer

        for item in scenario.items:
            self._enter("add_item")
            self.driver.add_item(item.product, item.quantity)
            self._state["items_added"] += 1

        self._enter("set_tax_rate")
        self.driver.set_tax_rate(scenario.vat_rate)
        self._state["tax_rate"] = str(scenario.vat_rate)

        self._enter("read_totals")
        tax_hidden = self.policy.expects_hidden_tax(result.expected["tax"])
        result.actual = self._read_totals(result.expected, tax_hidden)
        for name in DISPLAYED_FIELDS:
            if name == "tax" and tax_hidden:
                mismatch = self._check_tax_hidden(result.actual["tax"])
            else:
                mismatch = self._compare(name, result.expected[name], result.actual[name])
            if mismatch:
                result.failures.append(StepFailure("read_totals", mismatch))

        if scenario.save:
            if result.failures:
                logger.info(f"⏭️ [Harness] Not saving {scenario.name}: totals did not match")
                return
            self._enter("save")
            self.driver.save()
            self._state["saved"] = True

    def _pin(
        self,
        scenario: InvoiceScenario,
        computed: dict[str, DisplayAmount],
        result: ScenarioResult,
    ) -> dict[str, DisplayAmount]:
        """Check literal expectations against the computed ones; the literal wins for the UI."""
        expected = dict(computed)
        for name, literal in scenario.pinned.items():
            if literal != computed[name]:
                result.failures.append(
                    StepFailure("compute", AssertionMismatchError("compute", name, literal, computed[name]))
                )
            expected[name] = literal
        return expected

    def _read_totals(self, expected: dict[str, DisplayAmount], tax_hidden: bool) -> dict[str, DisplayAmount]:
        settled = self.driver.settle_totals({name: expected[name] for name in DISPLAYED_FIELDS}, tax_hidden)
        self._state["settled"] = settled
        tax_visible = self.driver.is_tax_visible() if tax_hidden else True
        self._state["tax_visible"] = tax_visible
        # A hidden VAT line stands for the zero amount
        actual = {
            "subtotal": self.driver.get_displayed_subtotal(),
            "tax": self.driver.get_displayed_tax() if tax_visible else self.policy.zero_amount,
            "grand_total": self.driver.get_displayed_grand_total(),
        }
        self._state["displayed"] = dict(actual)
        return actual

    def _check_tax_hidden(self, displayed_tax: DisplayAmount) -> AssertionMismatchError | None:
        if not self._state["tax_visible"]:
            return None
        return AssertionMismatchError("read_totals", "tax_visible", "hidden", f"visible ({displayed_tax})")

    def _compare(self, name: str, expected: DisplayAmount, actual: DisplayAmount) -> AssertionMismatchError | None:
        if expected == actual:
            return None
        return AssertionMismatchError("read_totals", name, expected, actual)

    def _enter(self, step: StepName) -> None:
        if self._clock() > self._deadline:
            raise UICollaboratorTimeoutError(
                step,
                f"scenario deadline of {self.scenario_timeout:.0f}s exceeded before {step}",
                self._state,
            )
        self._state["step"] = step
        logger.debug(f"🧾 [Harness] → {step}")


def run_scenario(driver: UIDriver, scenario: InvoiceScenario, **runner_options: Any) -> ScenarioResult:
    return ScenarioRunner(driver, **runner_options).run_scenario(scenario)


def run_suite(driver: UIDriver, scenarios: Iterable[InvoiceScenario], **runner_options: Any) -> SuiteReport:
    return ScenarioRunner(driver, **runner_options).run_suite(scenarios)

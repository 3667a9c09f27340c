#!/usr/bin/env python3
"""
INVOICEDESK E2E - Run & Archive Report
===============================================================================
Runs the browser suite and, when it passes, keeps a timestamped copy of the
test artifacts with a zip, an HTML index and an optional email notification.

Run from the repository root:

    python -m scripts.run_and_archive_report -- -k invoice
"""

from __future__ import annotations

import html
import logging
import os
import shutil
import smtplib
import subprocess
import sys
from collections.abc import Mapping, Sequence
from datetime import datetime
from email.message import EmailMessage
from pathlib import Path
from urllib.parse import quote

from config.logging import configure_logging
from config.settings import load_settings

logger = logging.getLogger(__name__)

ARCHIVE_PREFIX = "e2e-report"
DEFAULT_SMTP_PORT = 587
SMTP_SSL_PORT = 465


class ReportArchiver:
    """
    Test run archiver

    Features:
    - Runs pytest on the e2e suite
    - Copies the artifacts directory into reports/<name>-<timestamp>/
    - Zips the archived copy
    - Regenerates reports/index.html, newest run first
    - Emails the zip when SMTP is configured
    """

    def __init__(
        self,
        reports_dir: str | Path = "reports",
        artifacts_dir: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.environ = dict(os.environ if environ is None else environ)
        self.reports_dir = Path(reports_dir)
        self.artifacts_dir = Path(artifacts_dir or load_settings(self.environ).artifacts_dir)

        self.smtp_enabled = all(self.environ.get(key) for key in ("SMTP_HOST", "SMTP_USER", "SMTP_PASS"))
        logger.info(f"📦 [Archiver] reports={self.reports_dir} artifacts={self.artifacts_dir} (SMTP: {self.smtp_enabled})")

    def run_tests(self, pytest_args: Sequence[str] = ()) -> int:
        """Run the e2e suite and return pytest's exit code."""
        cmd = [
            sys.executable,
            "-m",
            "pytest",
            "tests/e2e",
            "-m",
            "e2e",
            "--output",
            str(self.artifacts_dir),
            *pytest_args,
        ]
        env = {**self.environ, "E2E_ENABLED": self.environ.get("E2E_ENABLED", "1")}

        logger.info(f"🧪 [Archiver] Running: {' '.join(cmd)}")
        result = subprocess.run(cmd, check=False, env=env)
        return result.returncode

    def archive(self, now: datetime | None = None) -> Path | None:
        """
        Copy artifacts into a timestamped run directory and zip it.

        Returns:
            The zip path, or None when there was nothing to archive
        """
        if not self.artifacts_dir.is_dir():
            logger.warning(f"⚠️ [Archiver] No {self.artifacts_dir} directory found to archive")
            return None

        self.reports_dir.mkdir(parents=True, exist_ok=True)
        dest = self._run_dir(now or datetime.now())

        shutil.copytree(self.artifacts_dir, dest)
        logger.info(f"📁 [Archiver] Archived report to {dest}")

        zip_path = Path(shutil.make_archive(str(dest), "zip", root_dir=dest))
        logger.info(f"🗜️ [Archiver] Created zip: {zip_path} ({zip_path.stat().st_size:,} bytes)")

        self.write_index()
        return zip_path

    def _run_dir(self, now: datetime) -> Path:
        """Timestamped run directory; a second run in the same second gets a numeric suffix."""
        base = f"{ARCHIVE_PREFIX}-{now.strftime('%Y-%m-%dT%H-%M-%S')}"
        dest = self.reports_dir / base
        suffix = 2
        while dest.exists() or dest.with_suffix(".zip").exists():
            dest = self.reports_dir / f"{base}-{suffix}"
            suffix += 1
        return dest

    def list_runs(self) -> list[str]:
        """Archived run directories, newest first."""
        if not self.reports_dir.is_dir():
            return []
        names = [entry.name for entry in self.reports_dir.iterdir() if entry.is_dir()]
        return sorted(names, reverse=True)

    def write_index(self) -> Path:
        runs = self.list_runs()
        items = "\n".join(
            f'  <li><a href="{quote(name)}/">{html.escape(name)}</a> '
            f'(<a href="{quote(name)}.zip">zip</a>)</li>'
            for name in runs
        )
        index = self.reports_dir / "index.html"
        index.write_text(
            "<!doctype html>\n"
            "<html>\n"
            '<head><meta charset="utf-8"><title>InvoiceDesk E2E Reports</title></head>\n'
            "<body>\n"
            "<h1>InvoiceDesk E2E Reports</h1>\n"
            f"<ul>\n{items}\n</ul>\n"
            "</body>\n"
            "</html>\n",
            encoding="utf-8",
        )
        logger.info(f"📝 [Archiver] Updated reports index at {index} ({len(runs)} runs)")
        return index

    def send_notification(self, zip_path: Path) -> bool:
        """Email the zipped report; returns False when SMTP is not configured or sending fails."""
        if not self.smtp_enabled:
            logger.info("✉️ [Archiver] SMTP not configured; skipping email. Set SMTP_HOST, SMTP_USER, SMTP_PASS to enable.")
            return False

        host = self.environ["SMTP_HOST"]
        try:
            port = int(self.environ.get("SMTP_PORT") or DEFAULT_SMTP_PORT)
        except ValueError:
            logger.error(f"🔥 [Archiver] SMTP_PORT must be a number, got {self.environ['SMTP_PORT']!r}; skipping email")
            return False
        user = self.environ["SMTP_USER"]
        run_name = zip_path.stem

        message = EmailMessage()
        message["Subject"] = f"InvoiceDesk E2E Report - {run_name}"
        message["From"] = user
        message["To"] = self.environ.get("EMAIL_TO") or user
        message.set_content(f"Attached is the InvoiceDesk E2E test report for run {run_name}")
        message.add_attachment(zip_path.read_bytes(), maintype="application", subtype="zip", filename=zip_path.name)

        try:
            if port == SMTP_SSL_PORT:
                with smtplib.SMTP_SSL(host, port) as smtp:
                    smtp.login(user, self.environ["SMTP_PASS"])
                    smtp.send_message(message)
            else:
                with smtplib.SMTP(host, port) as smtp:
                    smtp.starttls()
                    smtp.login(user, self.environ["SMTP_PASS"])
                    smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"🔥 [Archiver] Failed to send email: {e}")
            return False

        logger.info(f"✉️ [Archiver] Email sent to {message['To']}")
        return True

    def run(self, pytest_args: Sequence[str] = (), run_tests: bool = True) -> int:
        if run_tests:
            exit_code = self.run_tests(pytest_args)
            if exit_code != 0:
                logger.error(f"❌ [Archiver] Tests exited with code {exit_code}; nothing archived")
                return exit_code

        zip_path = self.archive()
        if zip_path:
            self.send_notification(zip_path)
        return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Run the InvoiceDesk E2E suite and archive its report",
        epilog="Arguments after -- are passed to pytest",
    )
    parser.add_argument("--reports-dir", default="reports", help="Directory that collects archived runs")
    parser.add_argument("--artifacts-dir", help="pytest-playwright output directory (default: E2E_ARTIFACTS_DIR or test-results)")
    parser.add_argument("--no-run", action="store_true", help="Archive existing artifacts without running tests")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("pytest_args", nargs=argparse.REMAINDER, help="Extra pytest arguments (after --)")

    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else load_settings().log_level)

    pytest_args = list(args.pytest_args)
    if pytest_args[:1] == ["--"]:
        pytest_args = pytest_args[1:]

    archiver = ReportArchiver(reports_dir=args.reports_dir, artifacts_dir=args.artifacts_dir)
    return archiver.run(pytest_args, run_tests=not args.no_run)


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Diagnostic Logger for the route planning engine

Collects the non-fatal events of a planning run (dropped self-references,
suppressed default routes, skipped subnet routes) so the reporting layer can
explain why the plan looks the way it does.
"""

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("diagnostic")


def configure_logging(level: Optional[str] = None):
    """Configure root logging once for the CLI and the API server."""
    handlers = [logging.StreamHandler(sys.stdout)]

    report_dir = os.getenv("DIAGNOSTIC_REPORT_DIR")
    if report_dir:
        os.makedirs(report_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(report_dir, "diagnostic.log")))

    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format=LOG_FORMAT,
        handlers=handlers,
    )


class DiagnosticLogger:
    """Diagnostic events of a single planning run."""

    def __init__(self):
        self.start_time = datetime.now()
        self.errors = []
        self.warnings = []
        self.events = []

    def log_event(self, event: str, context: Optional[Dict[str, Any]] = None):
        """Record an expected resolution artifact (self-loop removal and the like)."""
        self.events.append({"event": event, "context": context or {}})
        logger.debug(f"{event}: {json.dumps(context or {}, sort_keys=True)}")

    def log_error(self, error_msg: str, context: Optional[Dict[str, Any]] = None):
        """Log an error with context."""
        self.errors.append({
            "timestamp": datetime.now().isoformat(),
            "error": error_msg,
            "context": context or {},
        })
        logger.error(f"ERROR: {error_msg}")
        if context:
            logger.error(f"Context: {json.dumps(context, indent=2, sort_keys=True)}")

    def log_warning(self, warning_msg: str, context: Optional[Dict[str, Any]] = None):
        """Log a warning with context."""
        self.warnings.append({
            "timestamp": datetime.now().isoformat(),
            "warning": warning_msg,
            "context": context or {},
        })
        logger.warning(f"WARNING: {warning_msg}")
        if context:
            logger.warning(f"Context: {json.dumps(context, indent=2, sort_keys=True)}")

    def log_success(self, success_msg: str):
        logger.info(f"SUCCESS: {success_msg}")

    def generate_report(self) -> Dict[str, Any]:
        """Summarize the run. Written to DIAGNOSTIC_REPORT_DIR when that is set."""
        report = {
            "start_time": self.start_time.isoformat(),
            "end_time": datetime.now().isoformat(),
            "events": self.events,
            "errors": self.errors,
            "warnings": self.warnings,
            "total_events": len(self.events),
            "total_errors": len(self.errors),
            "total_warnings": len(self.warnings),
        }

        report_dir = os.getenv("DIAGNOSTIC_REPORT_DIR")
        if report_dir:
            os.makedirs(report_dir, exist_ok=True)
            report_path = os.path.join(report_dir, "diagnostic_report.json")
            with open(report_path, "w") as f:
                json.dump(report, f, indent=2)
            logger.info(f"Diagnostic report saved to: {report_path}")

        return report

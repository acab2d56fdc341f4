"""
Scheduled escalation pass from the command line.

Usage:
  - Full run (escalate + notify): python scripts/run_escalation_scan.py
  - Scan only, no writes:         python scripts/run_escalation_scan.py --dry-run
  - One incident:                 python scripts/run_escalation_scan.py --incident <id>

Meant for cron / Cloud Scheduler; exits non-zero if any dispatch failed.
"""

import argparse
import asyncio
import json
import logging
import sys

from pawtriage.core.settings import settings
from pawtriage.models.triage import EscalationCheck
from pawtriage.services.triage_orchestrator import get_triage_orchestrator

logger = logging.getLogger("run_escalation_scan")


async def scan_only(incident_id=None):
    orchestrator = get_triage_orchestrator()
    check = EscalationCheck(check_all=incident_id is None, incident_id=incident_id)
    delayed = await orchestrator.monitor.evaluate(check)
    return [item.model_dump() for item in delayed]


async def run(incident_id=None):
    orchestrator = get_triage_orchestrator()
    if incident_id is None:
        summary = await orchestrator.run_scheduled_escalation()
        return summary.model_dump()
    result = await orchestrator.dispatcher.dispatch(incident_id)
    return {"escalated_ids": [], "dispatches": [result.model_dump()], "dispatch_failures": []}


def main():
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    parser = argparse.ArgumentParser(description="Escalate delayed incidents and notify responders")
    parser.add_argument("--dry-run", action="store_true", help="Only report delayed incidents")
    parser.add_argument("--incident", help="Restrict to one incident id")
    args = parser.parse_args()

    if args.dry_run:
        delayed = asyncio.run(scan_only(args.incident))
        print(json.dumps(delayed, indent=2))
        logger.info(f"Dry run: {len(delayed)} incidents past the escalation threshold")
        return

    summary = asyncio.run(run(args.incident))
    print(json.dumps(summary, indent=2))
    if summary["dispatch_failures"]:
        sys.exit(1)


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional

from packages.caselogic.assessment import CaseAssessment, assess_case
from packages.caselogic.claim_gate import ChatClaimPolicy
from packages.caselogic.drugs import classify_drug
from packages.caselogic.formatting import format_relative_time
from packages.caselogic.sla import sla_breakdown
from packages.core.config import PortalConfig, load_config
from packages.core.errors import ActionNotAllowed, ClaimConflictError, PortalError
from packages.core.portal_client import PortalClient
from packages.core.session import DoctorSession
from packages.workflow.case_actions import claim_case, load_case
from packages.workflow.chat_actions import open_chat


def build_session(config: PortalConfig) -> Optional[DoctorSession]:
    if not config.token or not config.doctor_id:
        return None
    return DoctorSession(doctor_id=config.doctor_id, token=config.token, session_id=config.session_id)


def format_pretty(assessment: Dict[str, Any]) -> str:
    lines = [f"{assessment.get('case_number', 'unknown')} | {assessment.get('status', 'unknown')}"]
    sla = assessment.get("sla_status") or "indeterminate"
    lines.append(f"sla: {sla} (waiting {assessment.get('wait_time') or 'unknown'})")
    lines.append(f"actions: {', '.join(assessment.get('actions') or []) or 'none'}")
    mode = assessment.get("diagnosis_mode", "submit")
    if mode == "update":
        lines.append(f"diagnosis: editable for {assessment.get('edit_minutes_remaining', 0)} more minutes")
    else:
        lines.append(f"diagnosis: {mode}")
    for med in assessment.get("medications") or []:
        lines.append(f"  - {med.get('name')} | {med.get('drugType')}")
    return "\n".join(lines)


def _emit(assessment: CaseAssessment, pretty: bool) -> None:
    payload = assessment.model_dump(mode="json")
    print(format_pretty(payload) if pretty else json.dumps(payload, indent=2))


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Doctor portal case tools.")
    parser.add_argument("--url", help="Base API URL; defaults to PORTAL_API_BASE_URL.")
    parser.add_argument("--pretty", action="store_true", help="Print human readable output.")
    parser.add_argument("--debug", action="store_true", help="Log HTTP traffic to stderr.")
    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("pending", "my-cases"):
        listing = sub.add_parser(name)
        listing.add_argument("--page", type=int, default=1)
        listing.add_argument("--page-size", type=int, default=10)
    sub.add_parser("show").add_argument("case_id")
    sub.add_parser("claim").add_argument("case_id")
    chat = sub.add_parser("chat")
    chat.add_argument("case_id")
    chat.add_argument("--policy", choices=["auto", "prompt"], help="Override PORTAL_CHAT_CLAIM_POLICY.")
    sub.add_parser("classify-drug").add_argument("names", nargs="+")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING, stream=sys.stderr)

    if args.command == "classify-drug":
        rows = [{"name": name, **classify_drug(name).to_dict()} for name in args.names]
        if args.pretty:
            print("\n".join(f"{row['name']} | {row['type']}" for row in rows))
        else:
            print(json.dumps(rows, indent=2))
        return 0

    config = load_config()
    if args.url:
        config = config.model_copy(update={"base_url": args.url.rstrip("/")})
    session = build_session(config)
    if session is None:
        print("PORTAL_TOKEN and PORTAL_DOCTOR_ID must be set", file=sys.stderr)
        return 1
    client = PortalClient(config, session)
    if args.debug:
        print(f"request_url={config.base_url}", file=sys.stderr)

    try:
        if args.command in ("pending", "my-cases"):
            fetch = client.get_pending_cases if args.command == "pending" else client.get_my_cases
            page = fetch(args.page, args.page_size)
            for case in page.data:
                _emit(assess_case(case, session.doctor_id, target_minutes=config.sla_target_minutes), args.pretty)
            sla = sla_breakdown(page.data, target_minutes=config.sla_target_minutes)
            print(
                f"page {page.page}/{page.total_pages} total={page.total} "
                f"on_track={sla['OnTrack']} at_risk={sla['AtRisk']} breached={sla['Breached']}",
                file=sys.stderr,
            )
        elif args.command == "show":
            _, assessment = load_case(client, args.case_id)
            _emit(assessment, args.pretty)
        elif args.command == "claim":
            case = claim_case(client, client.get_case(args.case_id))
            _emit(assess_case(case, session.doctor_id, target_minutes=config.sla_target_minutes), args.pretty)
        elif args.command == "chat":
            policy = ChatClaimPolicy(args.policy) if args.policy else config.chat_claim_policy
            view = open_chat(client, args.case_id, policy=policy)
            if view.notice:
                print(view.notice, file=sys.stderr)
            for message in view.messages:
                sender = message.sender_name or message.sender_id
                print(f"[{message.sender_role}] {sender} ({format_relative_time(message.created_at)}): {message.message}")
    except ClaimConflictError as exc:
        owner = exc.current_owner
        print(f"{exc}" + (f" Current owner: {owner}." if owner else ""), file=sys.stderr)
        return 2
    except ActionNotAllowed as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except PortalError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python
"""Run the expiry sweep directly against the database (cron-friendly).

Usage:
    python backend/scripts/sweep_expired.py            # delete expired documents / payment proofs
    python backend/scripts/sweep_expired.py --list     # only show what is due, change nothing
    python backend/scripts/sweep_expired.py --json     # machine readable report

Exit Codes:
  0 success (including nothing to do)
  2 at least one artifact could not be deleted (it stays scheduled for the next run)
"""
from __future__ import annotations
import os, sys, argparse, json

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from printdesk import create_app  # type: ignore
from printdesk.services.order_store import ARTIFACT_KINDS


def main(argv: list[str]) -> int:
    p = argparse.ArgumentParser(description='Delete order artifacts whose retention window has passed')
    p.add_argument('--list', action='store_true', help='List due artifacts without deleting')
    p.add_argument('--json', action='store_true', help='Print the report as JSON')
    args = p.parse_args(argv)

    app = create_app()
    with app.app_context():
        svc = app.extensions['printdesk']
        now = svc.clock()
        if args.list:
            due = {kind: [o.id for o in svc.store.find_expired(kind, now)] for kind in ARTIFACT_KINDS}
            if args.json:
                print(json.dumps(due, indent=2))
            else:
                for kind, ids in due.items():
                    print(f"{kind}: {len(ids)} due")
                    for order_id in ids:
                        print(f"  {order_id}")
            return 0
        report = svc.sweep(now)
        if args.json:
            print(json.dumps(report.to_json(), indent=2))
        else:
            print(f"files deleted: {len(report.deleted_files)}")
            print(f"payment proofs deleted: {len(report.deleted_payment_proofs)}")
            print(f"retired (nothing stored): {len(report.retired)}")
            print(f"skipped: {len(report.skipped)}")
            for item in report.failed:
                print(f"FAILED {item['kind']} {item['id']}: {item['reason']}", file=sys.stderr)
        return 2 if report.failed else 0


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main(sys.argv[1:]))

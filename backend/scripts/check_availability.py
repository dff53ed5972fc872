#!/usr/bin/env python3
"""Print what the voice agent would hear for an availability check.

Run from backend: python scripts/check_availability.py <restaurant_id> 2025-06-14 4 --time 20:00

Or with backend running:
  curl -s -X POST http://127.0.0.1:8000/restaurants/<id>/availability \
    -H 'Content-Type: application/json' -d '{"date": "2025-06-14", "party_size": 4}' | jq
"""
import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from dotenv import load_dotenv

load_dotenv(backend_dir / ".env")

from app.core.errors import ReservationError
from app.db.session import SessionLocal
from app.services.availability import describe_availability, describe_escalation
from app.services.reservations import ReservationService
from app.services.restaurant_service import load_restaurant_context
from app.services.zenchef import client_for


def main() -> int:
    parser = argparse.ArgumentParser(description="Check availability for a restaurant")
    parser.add_argument("restaurant_id")
    parser.add_argument("date", type=date.fromisoformat, help="YYYY-MM-DD")
    parser.add_argument("party_size", type=int)
    parser.add_argument("--time", default=None, help="HH:MM")
    parser.add_argument("--json", action="store_true", help="print the structured result instead of text")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logs (per-rule slot drops)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    db = SessionLocal()
    try:
        ctx = load_restaurant_context(db, args.restaurant_id)
    except ReservationError as e:
        print(f"Error: {e}")
        return 1
    finally:
        db.close()

    service = ReservationService(client_for(ctx.zenchef_id, ctx.api_token), ctx)
    try:
        result = service.check_availability(args.date, args.party_size, args.time)
    except ReservationError as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif result.requires_escalation:
        print(describe_escalation(args.date, args.party_size, ctx.max_escalation_seating, args.time))
    else:
        print(describe_availability(result, args.date, args.party_size, args.time))
    return 0


if __name__ == "__main__":
    sys.exit(main())

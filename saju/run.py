"""
CLI wrapper for get_saju().

Usage:
    saju --date YYYY-MM-DD --time HH:MM [--timezone ZONE | --latitude LAT] \
        --longitude LON [--tz-offset H] [--preset NAME] [--gender GENDER] \
        [--current-year Y] [--yearly-from Y --yearly-to Y] [--output PATH] [--verbose]

The time zone comes from --timezone, else from --latitude/--longitude,
else from --tz-offset, else Asia/Seoul.
"""

import argparse
import json
import logging
import sys
from datetime import datetime

from saju.astro_calendar import DateAdapter, resolve_zone
from saju.chart import get_saju, save_result, to_jsonable
from saju.errors import SajuError
from saju.pillars import PRESETS

DEFAULT_ZONE = "Asia/Seoul"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute a Saju (Four Pillars) chart.")
    parser.add_argument("--date", required=True, help="birth date, YYYY-MM-DD")
    parser.add_argument("--time", required=True, help="birth clock time, HH:MM (24h)")
    parser.add_argument("--timezone", default=None, help="IANA zone name")
    parser.add_argument("--latitude", type=float, default=None)
    parser.add_argument("--longitude", type=float, default=None)
    parser.add_argument("--tz-offset", dest="tz_offset", type=float, default=None,
                        help="standard UTC offset in hours")
    parser.add_argument("--preset", default="standard", choices=sorted(PRESETS))
    parser.add_argument("--gender", default=None, choices=["male", "female"])
    parser.add_argument("--current-year", dest="current_year", type=int, default=None)
    parser.add_argument("--yearly-from", dest="yearly_from", type=int, default=None)
    parser.add_argument("--yearly-to", dest="yearly_to", type=int, default=None)
    parser.add_argument("--output", default=None, help="also write the JSON result here")
    parser.add_argument("--verbose", action="store_true")
    return parser


def _zone(args):
    if args.timezone or (args.latitude is not None and args.longitude is not None):
        return resolve_zone(args.timezone, args.latitude, args.longitude)
    if args.tz_offset is not None:
        return args.tz_offset
    return DEFAULT_ZONE


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if (args.yearly_from is None) != (args.yearly_to is None):
        parser.error("--yearly-from and --yearly-to must be given together")

    try:
        civil = datetime.strptime(f"{args.date} {args.time}", "%Y-%m-%d %H:%M")
    except ValueError:
        parser.error(f"Invalid date/time: {args.date} {args.time}")

    adapter = DateAdapter()
    try:
        birth = adapter.create(civil.year, civil.month, civil.day, civil.hour, civil.minute,
                               zone=_zone(args))
        yearly_range = None
        if args.yearly_from is not None:
            yearly_range = (args.yearly_from, args.yearly_to)
        result = get_saju(
            adapter,
            birth,
            longitude=args.longitude,
            tz_offset=args.tz_offset,
            preset=args.preset,
            gender=args.gender,
            current_year=args.current_year,
            yearly_luck_range=yearly_range,
        )
    except SajuError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        save_result(result, args.output)

    print(json.dumps(to_jsonable(result), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Command line front end.

    qld-atar student "English=72" "Chemistry=85" "Tourism=B" ... [--range 5]
    qld-atar cohort results.xlsx [--variation 3] [--ranged] [--student NAME] [--out atars.csv]
    qld-atar summary results.csv [--out summary.xlsx]
    qld-atar equivalent "Chemistry" 80 "Physics" "English"
    qld-atar build-tables ./data
"""

import argparse
import logging
import sys

from . import config
from .calculator import apply_quick_range, calculate_rows, make_row
from .cohort import process_cohort
from .equivalent import equivalent_scores
from .errors import QldAtarError
from .export import (atars_table, export_table, ranged_atars_table, ranged_results_table,
                     results_table)
from .loader import load_cohort_file
from .reference import write_reference_tables
from .scaling_params import ScalingParameterStore
from .summary import school_summary

WIDTH = 70


def banner(title):
    print("=" * WIDTH)
    print(f"  {title}")
    print("=" * WIDTH)


def print_table(df):
    if df.empty:
        print("  (no rows)")
        return
    print(df.to_string(index=False))


def _load_store(args):
    settings = config.load_settings(data_dir=args.data_dir, variation=getattr(args, 'variation', None))
    return settings, ScalingParameterStore.default(settings)


# ============================================================
# Commands
# ============================================================
def cmd_student(args):
    _, store = _load_store(args)
    rows = []
    for item in args.results:
        if '=' not in item:
            raise QldAtarError(f"Expected SUBJECT=RESULT, got {item!r}")
        subject, result = item.rsplit('=', 1)
        subject = subject.strip()
        if store.get_by_display_name(subject) is None:
            print(f"  Warning: unknown subject {subject!r}")
        rows.append(make_row(store, subject, result.strip()))
    if args.range is not None:
        rows = apply_quick_range(rows, args.range)

    calc = calculate_rows(rows, store)

    banner("QLD ATAR Calculator - Single Student")
    print(f"\n{'Subject':45s} {'Result':>10s} {'Lower':>8s} {'Scaled':>8s} {'Upper':>8s}")
    print("-" * WIDTH)
    for row, scored in zip(rows, calc.row_scores):
        def fmt(r):
            if r is None:
                return '-'
            return f"{r.scaled_score:.1f}" if r.ok else 'Err'
        print(f"{row.subject:45s} {str(row.raw_result):>10s} {fmt(scored.lower):>8s} "
              f"{fmt(scored.result):>8s} {fmt(scored.upper):>8s}")
        if scored.result is not None and not scored.result.ok:
            print(f"    {scored.result.error}")

    print(f"\n  TE:   {calc.te}   (range {calc.lower_te} - {calc.upper_te})")
    atar = calc.atar if isinstance(calc.atar, str) else f"{calc.atar:.2f}"
    print(f"  ATAR: {atar}")
    if args.range is not None:
        print(f"  ATAR range: {calc.atar_range}")
    return 0


def _load_cohort(args, settings, store):
    cohort = load_cohort_file(args.file, strict=args.strict)
    for line, message in cohort.errors:
        print(f"  Row {line}: {message}")
    return process_cohort(cohort.students, store, settings.variation)


def cmd_cohort(args):
    settings, store = _load_store(args)
    result = _load_cohort(args, settings, store)
    outcomes = result.filter(args.student)

    if args.subjects:
        df = ranged_results_table(outcomes) if args.ranged else results_table(outcomes)
    else:
        df = ranged_atars_table(outcomes) if args.ranged else atars_table(outcomes)

    title = "Ranged " if args.ranged else ""
    banner(f"QLD ATAR Calculator - {title}Cohort ({len(outcomes)} students, variation {settings.variation})")
    print_table(df)
    for o in result.failures:
        print(f"  Failed: {o.name}: {o.error}")
    if args.out:
        export_table(df, args.out)
        print(f"\n  OUTPUT: {args.out}")
    return 0


def cmd_summary(args):
    settings, store = _load_store(args)
    result = _load_cohort(args, settings, store)
    summary = school_summary(result.outcomes)

    banner("QLD ATAR Calculator - School Summary")
    print(f"  Students:          {len(result)}")
    print(f"  ATAR eligible:     {summary.eligible_count}")
    print(f"  Median ATAR:       {summary.median_atar or 'N/A'}")
    if summary.empty:
        return 0
    print()
    print_table(summary.distribution)
    print()
    print_table(summary.histogram)
    if args.out:
        export_table(summary.distribution, args.out)
        print(f"\n  OUTPUT: {args.out}")
    return 0


def cmd_equivalent(args):
    _, store = _load_store(args)
    try:
        source_scaled, results = equivalent_scores(store, args.subject, args.score, args.compare)
    except (KeyError, ValueError) as e:
        raise QldAtarError(str(e).strip("'"))

    banner(f"Equivalent Scores: {args.subject} {args.score:g} -> scaled {source_scaled:.2f}")
    print(f"\n{'Subject':45s} {'Raw':>14s} {'Scaled':>8s}")
    print("-" * WIDTH)
    for name, eq in zip(args.compare, results):
        if eq is None:
            print(f"{name:45s} {'--':>14s}")
            continue
        note = eq.compare(args.score)
        print(f"{eq.subject:45s} {eq.raw_display:>14s} {eq.scaled_display:>8s}  {note}")
    return 0


def cmd_build_tables(args):
    general_path, applied_vet_path, rows = write_reference_tables(args.out_dir)

    banner("QTAC 2025 Reference Tables")
    print(f"\n{'Subject':50s} {'a':>10s} {'k':>10s} {'Max err':>8s}")
    print("-" * 80)
    for row in rows:
        if 'max_error' not in row:
            continue
        err = '-' if row['max_error'] is None else f"{row['max_error']:.2f}"
        print(f"{row['Subject_name']:50s} {row['a']:>10s} {row['k']:>10s} {err:>8s}")
    print(f"\n  OUTPUT: {general_path}")
    print(f"  OUTPUT: {applied_vet_path}")
    print(f"  Total subjects: {len(rows)}")
    return 0


# ============================================================
# Argument parsing
# ============================================================
def build_parser():
    parser = argparse.ArgumentParser(prog='qld-atar', description="QLD ATAR calculator")
    parser.add_argument('--data-dir', help="Directory holding the scaling CSVs "
                        f"(default: ${config.ENV_DATA_DIR} or the bundled tables)")
    parser.add_argument('-v', '--verbose', action='store_true', help="Log progress and skipped rows")
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('student', help="Calculate TE and ATAR for one student")
    p.add_argument('results', nargs='+', metavar='SUBJECT=RESULT')
    p.add_argument('--range', type=float, help="Quick range: +/- marks for General results")
    p.set_defaults(func=cmd_student)

    for name, func, helptext in (('cohort', cmd_cohort, "Calculate ATARs for a cohort file"),
                                 ('summary', cmd_summary, "School summary for a cohort file")):
        p = sub.add_parser(name, help=helptext)
        p.add_argument('file', help="CSV or Excel cohort results")
        p.add_argument('--variation', help="+/- marks for General results (0-100)")
        p.add_argument('--strict', action='store_true', help="Fail on any invalid row")
        p.add_argument('--out', help="Write the table to .csv or .xlsx")
        p.set_defaults(func=func)
        if name == 'cohort':
            p.add_argument('--ranged', action='store_true', help="Show TE/ATAR ranges")
            p.add_argument('--subjects', action='store_true', help="One row per subject")
            p.add_argument('--student', action='append', default=[], help="Only this student (repeatable)")

    p = sub.add_parser('equivalent', help="Equivalent raw results across subjects")
    p.add_argument('subject')
    p.add_argument('score', type=float)
    p.add_argument('compare', nargs='+')
    p.set_defaults(func=cmd_equivalent)

    p = sub.add_parser('build-tables', help="Write the scaling CSVs from the QTAC 2025 tables")
    p.add_argument('out_dir')
    p.set_defaults(func=cmd_build_tables)
    return parser


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    try:
        return args.func(args)
    except QldAtarError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

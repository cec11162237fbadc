"""
GP Works - CLI Entry Point

Commands:
    estimate   - Recompute an estimate, print totals, render PDF / Excel
    mb         - Render the measurement book for an estimate
    deduction  - Compute bill deductions, render the deduction slip
    booklet    - Re-impose an existing PDF for booklet printing
"""

import argparse
import logging
import sys
from pathlib import Path

from . import OUTPUT_DIR
from .billing.deductions import apply_deduction, compute_bill_gross
from .billing.schema import BillRecord, load_bill, parse_bill
from .billing.words import rupees_in_words
from .errors import ValidationError
from .estimate.dimensions import apply_global_dimensions
from .estimate.measurement_book import estimate_to_mb
from .estimate.quantities import recompute_document
from .estimate.schema import load_estimate
from .layout.booklet import apply_page_numbers, impose_booklet
from .settings import load_rules

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def _write(path: Path, data: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def cmd_estimate(args, rules):
    """Recompute an estimate and print the total chain."""
    input_path = Path(args.input)
    output_dir = Path(args.output)

    document = load_estimate(input_path)
    if args.dims:
        length, breadth, depth = args.dims
        document.items = apply_global_dimensions(document.items, length, breadth, depth)

    document, totals = recompute_document(document, rules.gst_percent, rules.lwc_percent)

    print(f"\nEstimate: {document.project.project_name or input_path.stem}")
    print(f"{'='*50}")
    print(f"Items:               {len(document.items)}")
    print(f"Total (itemwise):    {totals.itemwise_total:>14.2f}")
    print(f"GST @ {rules.gst_percent:g}%:          {totals.gst_amount:>14.2f}")
    print(f"Cost excluding LWC:  {totals.cost_excl_lwc:>14.2f}")
    print(f"LWC @ {rules.lwc_percent:g}%:           {totals.lwc_amount:>14.2f}")
    print(f"Cost including LWC:  {totals.cost_incl_lwc:>14.2f}")
    print(f"Contingency:         {totals.contingency:>14.2f}")
    print(f"Grand total:         {totals.grand_total:>14.2f}")
    print(f"Say: {rupees_in_words(totals.rounded_grand_total)}")

    if args.pdf:
        from .report.estimate_pdf import render_estimate_pdf

        pdf = render_estimate_pdf(
            document, totals,
            mode=args.mode,
            items_per_page=(rules.abstract_items_per_page if args.mode == "abstract"
                            else rules.estimate_items_per_page),
            gst_percent=rules.gst_percent,
            lwc_percent=rules.lwc_percent,
            agency=rules.agency,
        )
        path = _write(output_dir / f"{input_path.stem}_{args.mode}.pdf", pdf)
        print(f"\nPDF: {path}")

    if args.xlsx:
        from .report.excel_export import export_estimate_xlsx

        path = export_estimate_xlsx(
            output_dir / f"{input_path.stem}_abstract.xlsx", document, totals,
            gst_percent=rules.gst_percent, lwc_percent=rules.lwc_percent,
        )
        print(f"Excel: {path}")

    return 0


def cmd_mb(args, rules):
    """Render the measurement book for an estimate."""
    from .report.measurement_book_pdf import render_measurement_book

    input_path = Path(args.input)
    document, _ = recompute_document(load_estimate(input_path), rules.gst_percent, rules.lwc_percent)
    rows = estimate_to_mb(document.items)

    pdf = render_measurement_book(
        rows,
        document.project,
        items_per_page=rules.measurement_items_per_page,
        agency=rules.agency,
        financial_year=rules.financial_year,
        booklet=args.booklet,
    )
    suffix = "_mb_booklet.pdf" if args.booklet else "_mb.pdf"
    path = _write(Path(args.output) / f"{input_path.stem}{suffix}", pdf)

    print(f"\nMeasurement book: {len(rows)} rows")
    print(f"PDF: {path}")
    return 0


def _bill_from_args(args) -> BillRecord:
    if args.input:
        return load_bill(Path(args.input))
    if args.gross is None:
        raise ValidationError("either --input or --gross is required", "gross")

    rates = {
        name: value for name, value in (
            ("income_tax", args.income_tax),
            ("gst_tds", args.gst_tds),
            ("labour_cess", args.labour_cess),
            ("security_deposit", args.security_deposit),
        ) if value is not None
    }
    return parse_bill({"gross": args.gross, "bill_number": args.bill_number or "", "rates": rates})


def cmd_deduction(args, rules):
    """Compute bill deductions."""
    bill = _bill_from_args(args)

    gross = bill.gross
    if gross is None:
        abstract = compute_bill_gross(
            bill.actual_value, rules.cgst_percent, rules.sgst_percent, rules.bill_labour_cess_percent,
        )
        gross = float(abstract.gross_bill_amount)
        print(f"\nBill abstract: say {abstract.say_amount}, CGST {abstract.cgst_amount}, "
              f"SGST {abstract.sgst_amount}, cess {abstract.labour_cess_amount}")

    rates = bill.resolve_rates(rules.deduction_defaults)
    if not rules.is_usual_security_deposit(rates.security_deposit):
        choices = ", ".join(f"{c:g}%" for c in rules.security_deposit_choices)
        logger.warning(f"Security deposit {rates.security_deposit:g}% is not a usual choice ({choices})")

    result = apply_deduction(gross, rates)

    print(f"\nBill deduction: {bill.bill_number or '-'}")
    print(f"{'='*50}")
    print(f"Gross:              {result.gross:>12.2f}")
    print(f"Income tax:         {result.income_tax_amount:>12}")
    print(f"GST TDS:            {result.gst_tds_amount:>12}  "
          f"(CGST {result.cgst_amount:.2f} + SGST {result.sgst_amount:.2f})")
    print(f"Labour cess:        {result.labour_cess_amount:>12}")
    print(f"Security deposit:   {result.security_deposit_amount:>12}")
    print(f"Total deduction:    {result.total_deduction:>12}")
    print(f"Net payable:        {result.net_payable:>12.2f}")

    if args.pdf:
        from .report.deduction_pdf import render_deduction_slip

        pdf = render_deduction_slip(result, bill.info(), agency=rules.agency)
        name = f"deduction_{bill.bill_number or 'bill'}.pdf".replace("/", "-")
        path = _write(Path(args.output) / name, pdf)
        print(f"\nPDF: {path}")

    return 0


def cmd_booklet(args, rules):
    """Re-impose a PDF for saddle-stitch printing."""
    input_path = Path(args.input)
    pdf = input_path.read_bytes()

    if args.page_numbers:
        pdf = apply_page_numbers(pdf)
    booklet = impose_booklet(pdf)
    if not booklet:
        print(f"No pages in {input_path}")
        return 1

    output = Path(args.output) if args.output else input_path.with_name(f"{input_path.stem}_booklet.pdf")
    _write(output, booklet)
    print(f"Booklet: {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpworks",
        description="GP Works - Estimate, Measurement Book & Bill Deduction Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Totals and an abstract PDF for an estimate
  python -m gpworks estimate --input road.json --pdf --mode abstract

  # Measurement book, folded booklet
  python -m gpworks mb --input road.json --booklet

  # Deductions on a gross bill
  python -m gpworks deduction --gross 100000 --income-tax 2 --gst-tds 2 --pdf
        """
    )

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging')
    parser.add_argument('--rules', help='Rules YAML (default: rules/works_rules.yaml)')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Estimate command
    est_parser = subparsers.add_parser('estimate', help='Recompute an estimate')
    est_parser.add_argument('--input', '-i', required=True,
                            help='Estimate JSON/YAML file')
    est_parser.add_argument('--output', '-o', default=str(OUTPUT_DIR),
                            help='Output directory')
    est_parser.add_argument('--mode', choices=['detailed', 'abstract'], default='detailed',
                            help='Estimate sheet layout (default: detailed)')
    est_parser.add_argument('--dims', type=float, nargs=3, metavar=('L', 'B', 'D'),
                            help='Global road dimensions applied to area/volume items')
    est_parser.add_argument('--pdf', action='store_true', help='Render the estimate PDF')
    est_parser.add_argument('--xlsx', action='store_true', help='Export the abstract workbook')
    est_parser.set_defaults(func=cmd_estimate)

    # Measurement book command
    mb_parser = subparsers.add_parser('mb', help='Render the measurement book')
    mb_parser.add_argument('--input', '-i', required=True,
                           help='Estimate JSON/YAML file')
    mb_parser.add_argument('--output', '-o', default=str(OUTPUT_DIR),
                           help='Output directory')
    mb_parser.add_argument('--booklet', action='store_true',
                           help='Re-impose for saddle-stitch printing')
    mb_parser.set_defaults(func=cmd_mb)

    # Deduction command
    ded_parser = subparsers.add_parser('deduction', help='Compute bill deductions')
    ded_parser.add_argument('--input', '-i', help='Bill JSON/YAML file')
    ded_parser.add_argument('--gross', type=float, help='Gross bill amount')
    ded_parser.add_argument('--bill-number', help='Bill number')
    ded_parser.add_argument('--income-tax', type=float, help='Income tax %%')
    ded_parser.add_argument('--gst-tds', type=float, help='GST TDS %%')
    ded_parser.add_argument('--labour-cess', type=float, help='Labour welfare cess %%')
    ded_parser.add_argument('--security-deposit', type=float, help='Security deposit %%')
    ded_parser.add_argument('--output', '-o', default=str(OUTPUT_DIR),
                            help='Output directory')
    ded_parser.add_argument('--pdf', action='store_true', help='Render the deduction slip')
    ded_parser.set_defaults(func=cmd_deduction)

    # Booklet command
    booklet_parser = subparsers.add_parser('booklet', help='Impose a PDF as a booklet')
    booklet_parser.add_argument('--input', '-i', required=True, help='Source PDF')
    booklet_parser.add_argument('--output', '-o', help='Booklet PDF path')
    booklet_parser.add_argument('--page-numbers', action='store_true',
                                help="Stamp 'Page i of N' before imposing")
    booklet_parser.set_defaults(func=cmd_booklet)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 0

    rules = load_rules(Path(args.rules) if args.rules else None)

    try:
        return args.func(args, rules)
    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"File not found: {e.filename}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

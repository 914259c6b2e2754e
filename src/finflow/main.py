"""Command-line entry point."""
import sys
import argparse
from pathlib import Path

from finflow.config.manager import ConfigManager, Config
from finflow.config.settings import get_settings
from finflow.ledger.duplicates import DuplicateKind
from finflow.ledger.models import Category, TransactionType
from finflow.orchestrator.tracker import FinanceTracker
from finflow.utils.logger import configure_logging, default_data_dir
from finflow.utils.exceptions import FinFlowError

DUPLICATE_MESSAGES = {
    DuplicateKind.EXACT: "An identical transaction (same description and amount) already exists.",
    DuplicateKind.PARTIAL: "A transaction with the same description but a different amount already exists.",
}


def _build_tracker() -> FinanceTracker:
    """Load configuration and settings, then open the tracker."""
    settings = get_settings()
    config_manager = ConfigManager()
    config = config_manager.load_config() or Config(data_dir=str(default_data_dir()))

    logger = configure_logging(
        config.log_level or settings.log_level,
        Path(config.data_dir) / "logs",
        settings.log_max_file_size_mb,
        settings.log_backup_count
    )

    is_valid, message = config_manager.validate_config(config)
    if not is_valid:
        logger.warning(f"{message}; Gemini features are disabled")
        config.gemini_api_key = ""

    return FinanceTracker.from_config(config, settings)


def add_command(tracker: FinanceTracker, args) -> int:
    """Submit a transaction, asking before adding a duplicate."""
    result = tracker.workflow.submit(
        description=args.description,
        amount=args.amount,
        category=Category(args.category),
        type=TransactionType.INCOME if args.income else TransactionType.EXPENSE,
        recurring=args.recurring
    )

    if result.rejected:
        print("✗ A description and a valid non-negative amount are required")
        return 1

    if result.needs_confirmation:
        print(f"⚠ {DUPLICATE_MESSAGES[result.kind]}")
        if args.yes or _ask("Add it anyway? [y/N] "):
            txn = tracker.workflow.confirm()
        else:
            tracker.workflow.cancel()
            print("Cancelled.")
            return 0
    else:
        txn = result.candidate

    print(f"✓ Added {txn.description} ({_signed(txn)}) [{txn.id}]")
    return 0


def list_command(tracker: FinanceTracker, args) -> int:
    transactions = tracker.transactions
    if not transactions:
        print("No transactions recorded.")
        return 0

    print(f"{'Date':<12} {'Description':<30} {'Category':<16} {'Amount':>12}  Id")
    print("-" * 110)
    for txn in transactions:
        print(
            f"{txn.date.isoformat():<12} {txn.description[:30]:<30} "
            f"{txn.category.value:<16} {_signed(txn):>12}  {txn.id}"
        )
    return 0


def delete_command(tracker: FinanceTracker, args) -> int:
    if tracker.delete(args.id):
        print(f"✓ Deleted {args.id}")
        return 0
    print(f"✗ No transaction with id {args.id}")
    return 1


def summary_command(tracker: FinanceTracker, args) -> int:
    totals = tracker.totals
    print(f"Income:   {totals.income:>12.2f}")
    print(f"Expenses: {totals.expense:>12.2f}")
    print(f"Balance:  {totals.balance:>12.2f}")

    chart = tracker.chart_data()
    if chart:
        print("\nExpenses by category:")
        largest = max(value for _, value in chart)
        for category, value in chart:
            bar = "█" * max(1, round(20 * value / largest))
            print(f"  {category.value:<16} {value:>10.2f}  {bar}")
    return 0


def recurring_command(tracker: FinanceTracker, args) -> int:
    if args.remove:
        if tracker.remove_recurring(args.remove):
            print(f"✓ Removed recurring description: {args.remove}")
            return 0
        print(f"✗ Not a recurring description: {args.remove}")
        return 1

    suggestions = tracker.recurring_suggestions()
    if not suggestions:
        print("No recurring descriptions saved.")
    for description in suggestions:
        print(f"  • {description}")
    return 0


def import_command(tracker: FinanceTracker, args) -> int:
    path = Path(args.file)
    if not path.is_file():
        print(f"✗ File not found: {path}")
        return 1

    imported = tracker.import_file(path)
    if not imported:
        print("✗ No transactions imported")
        return 1
    print(f"✓ Imported {len(imported)} transactions from {path.name}")
    return 0


def analyze_command(tracker: FinanceTracker, args) -> int:
    report = tracker.analyze()
    if report is None:
        print("Add some transactions before requesting an analysis.")
        return 1

    print(report.summary)
    print("\nRecommendations:")
    for recommendation in report.recommendations:
        print(f"  • {recommendation}")
    print(f"\nSavings potential: {report.savings_potential}")
    return 0


COMMANDS = {
    "add": add_command,
    "list": list_command,
    "delete": delete_command,
    "summary": summary_command,
    "recurring": recurring_command,
    "import": import_command,
    "analyze": analyze_command,
}


def _signed(txn) -> str:
    sign = "-" if txn.is_expense else "+"
    return f"{sign}{txn.amount:.2f}"


def _ask(prompt: str) -> bool:
    try:
        return input(prompt).strip().lower() in ("y", "yes", "s", "si", "sí")
    except EOFError:
        return False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="FinFlow personal finance tracker")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Record a transaction")
    add.add_argument("description")
    add.add_argument("amount")
    add.add_argument(
        "--category",
        choices=[c.value for c in Category],
        default=Category.OTHER.value
    )
    add.add_argument("--income", action="store_true", help="Record income instead of an expense")
    add.add_argument("--recurring", action="store_true", help="Save the description for reuse")
    add.add_argument("--yes", "-y", action="store_true", help="Add duplicates without asking")

    subparsers.add_parser("list", help="List transactions, most recent first")

    delete = subparsers.add_parser("delete", help="Delete a transaction")
    delete.add_argument("id")

    subparsers.add_parser("summary", help="Show totals and expenses by category")

    recurring = subparsers.add_parser("recurring", help="List or remove recurring descriptions")
    recurring.add_argument("--remove", metavar="DESCRIPTION")

    import_ = subparsers.add_parser("import", help="Import transactions from a statement file")
    import_.add_argument("file")

    subparsers.add_parser("analyze", help="Ask Gemini for spending insights")

    return parser


def main(argv=None) -> int:
    """Main entry point for the FinFlow CLI."""
    args = build_parser().parse_args(argv)

    try:
        tracker = _build_tracker()
    except FinFlowError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    try:
        return COMMANDS[args.command](tracker, args)
    except FinFlowError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    finally:
        tracker.close()


if __name__ == "__main__":
    sys.exit(main())

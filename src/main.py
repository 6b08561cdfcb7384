import sys
from typing import List, Optional

from errors import ConfigurationError, InputSourceError
from log_setup import setup_logging
from payments_engine import PaymentsEngine
from report import write_accounts
from settings import Settings


EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_USAGE = 2


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if len(argv) != 1:
        print("Usage: python main.py <transactions.csv>", file=sys.stderr)
        return EXIT_USAGE

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(settings.log_level, settings.log_format)

    filepath = argv[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except InputSourceError as e:
        print(f"Error processing transactions: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    write_accounts(accounts, sys.stdout, sort_by_client=settings.sort_output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

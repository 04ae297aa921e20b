import sys
import logging
from typing import List, Optional

from errors import RecordDecodeError
from ledger_engine import LedgerEngine
from summary_writer import write_summaries

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    filepath = args[0]
    engine = LedgerEngine()

    # Consume the whole input before writing anything, so a bad row never yields a partial summary.
    try:
        engine.process_file(filepath)
    except RecordDecodeError as e:
        logger.error(f"Malformed input in {filepath}: {e}")
        return 1
    except OSError as e:
        logger.error(f"Failed to read {filepath}: {e}")
        return 1

    try:
        write_summaries(engine.snapshots(), sys.stdout)
        sys.stdout.flush()
    except (OSError, ArithmeticError) as e:
        logger.error(f"Failed to write summary: {e!r}")
        return 1

    stats = engine.stats
    print(f"Applied: {stats.applied}, Ignored: {stats.ignored}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())

import logging
from typing import List, TextIO

from ledger_engine import LedgerEngine
from models import AccountSnapshot, ProcessingStats
from record_source import TransactionReader

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds a transaction stream into a ledger engine, one record at a time.
    Each record is fully applied before the next one is read.
    """

    def __init__(self):
        self._ledger = LedgerEngine()

    @property
    def stats(self) -> ProcessingStats:
        return self._ledger.stats

    def process_file(self, filepath: str) -> List[AccountSnapshot]:
        """Process CSV file and return final account states."""
        with TransactionReader.from_path(filepath) as reader:
            return self._process(reader)

    def process_stream(self, stream: TextIO) -> List[AccountSnapshot]:
        """Process CSV text from an already open stream."""
        return self._process(TransactionReader(stream))

    def _process(self, reader: TransactionReader) -> List[AccountSnapshot]:
        logger.info("Starting transaction processing")

        self._ledger.apply_all(reader.records())
        self.stats.malformed += reader.malformed_count

        logger.info(f"Processing complete. {self.stats.summary()}")
        for result, count in self.stats.rejections.most_common():
            logger.info(f"  {result.value}: {count}")

        return self._ledger.snapshot()

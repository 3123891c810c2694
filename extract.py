"""
Main entry point for the PhonePe statement processing pipeline.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

from categorizer import TransactionCategorizer
from errors import StatementError, UnsupportedStatementError
from extractor import LineParser, StatementParser
from file_loader import DEFAULT_MAX_FILE_SIZE, FileLoader
from schema import ParseResult
from summary import cash_flow, category_totals, to_dataframe

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class StatementProcessor:
    """Runs a statement from PDF through text extraction and parsing."""

    def __init__(
        self,
        categorizer: Optional[TransactionCategorizer] = None,
        file_loader: Optional[FileLoader] = None,
    ):
        self.file_loader = file_loader or FileLoader()
        self.parser = StatementParser(LineParser(categorizer=categorizer))

    def process_file(self, file_path: Union[str, Path]) -> ParseResult:
        """
        Process a PhonePe PDF statement end-to-end.

        Args:
            file_path: Path to the statement PDF

        Returns:
            ParseResult with at least one transaction
        """
        logger.info(f"Starting processing of file: {file_path}")
        pages = self.file_loader.load_file(file_path)
        return self.process_text(pages)

    def process_bytes(self, data: bytes) -> ParseResult:
        return self.process_text(self.file_loader.extract_pages(data))

    def process_text(self, text: Union[str, List[str]]) -> ParseResult:
        """
        Parse extracted text, rejecting statements that yield nothing.

        Raises:
            UnsupportedStatementError: no transaction could be parsed
        """
        result = self.parser.parse(text)
        if not result.transactions:
            raise UnsupportedStatementError(
                f"No transactions found in {result.line_count} lines of text. "
                "Ensure it is a PhonePe UPI statement."
            )
        logger.info(
            f"Parsed {result.matched_count} transactions, "
            f"{result.unmatched_count} lines without a transaction"
        )
        return result


def configure_logging(verbose: bool = False, log_file: Optional[str] = None):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
    )


def print_summary(result: ParseResult, file_path: str):
    print(f"\nSummary:")
    print(f"- Source file: {file_path}")
    print(f"- Lines scanned: {result.line_count}")
    print(f"- Transactions found: {result.matched_count}")

    flow = cash_flow(result.transactions)
    print(f"- Total spent: ₹{flow['total_spent']}")
    print(f"- Total received: ₹{flow['total_received']}")

    totals = category_totals(result.transactions)
    if not totals.empty:
        print(f"\nSpending by Category:")
        for category, row in totals.iterrows():
            print(f"- {category}: ₹{row['total']} ({row['count']} transactions)")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description='Extract transactions from PhonePe PDF statements')
    parser.add_argument('file_path', help='Path to PhonePe statement PDF')
    parser.add_argument('-o', '--output', help='Output JSON file path')
    parser.add_argument('--csv', help='Also write transactions to this CSV file')
    parser.add_argument('--taxonomy', help='JSON file with category keywords')
    parser.add_argument('--max-size-mb', type=float, default=DEFAULT_MAX_FILE_SIZE / (1024 * 1024),
                        help='Largest accepted PDF size in megabytes')
    parser.add_argument('--log-file', help='Also write logs to this file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.log_file)

    if not Path(args.file_path).exists():
        print(f"Error: File not found - {args.file_path}")
        return 1

    try:
        categorizer = (
            TransactionCategorizer.from_file(args.taxonomy) if args.taxonomy else None
        )
        processor = StatementProcessor(
            categorizer=categorizer,
            file_loader=FileLoader(max_file_size=int(args.max_size_mb * 1024 * 1024)),
        )
        result = processor.process_file(args.file_path)
    except StatementError as e:
        logger.error(f"Processing failed: {str(e)}")
        print(f"Error: {str(e)}")
        return 1

    output_data = {
        'transactions': result.to_records(),
        'line_count': result.line_count,
        'matched_count': result.matched_count,
    }

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(output_data, f, indent=2, ensure_ascii=False)
        print(f"Results written to: {args.output}")
    else:
        print(json.dumps(output_data, indent=2, ensure_ascii=False))

    if args.csv:
        to_dataframe(result.transactions).to_csv(args.csv, index=False)
        print(f"CSV written to: {args.csv}")

    print_summary(result, args.file_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

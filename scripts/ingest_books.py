"""Ingest books from a CSV file into the catalogue."""
import argparse
import asyncio
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from pydantic import ValidationError

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.db.connection import close_pool, init_db, transaction
from app.entities import Author, Book, Category
from app.models.book_model import AuthorCreate, BookCreate
from app.repositories import author_repository, book_repository, category_repository


def parse_list_field(value) -> List[str]:
    """Split a ``;`` or ``,`` separated cell into trimmed, non-empty names."""
    if value is None or pd.isna(value):
        return []
    text = str(value).strip().strip("[]")
    separator = ";" if ";" in text else ","
    return [item.strip().strip("'\"") for item in text.split(separator) if item.strip().strip("'\"")]


def optional_text(row: pd.Series, column: str) -> Optional[str]:
    value = row.get(column)
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def optional_int(row: pd.Series, column: str) -> Optional[int]:
    text = optional_text(row, column)
    return int(float(text)) if text is not None else None


def optional_price(row: pd.Series, column: str) -> Optional[Decimal]:
    text = optional_text(row, column)
    if text is None:
        return None
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"Incorrect price in column {column}: {text}") from exc


def row_to_book(row: pd.Series) -> BookCreate:
    """Validate one CSV row as a book; raises ``ValueError`` or ``ValidationError``."""
    return BookCreate(
        title=optional_text(row, "title") or "",
        subtitle=optional_text(row, "subtitle"),
        description=optional_text(row, "description"),
        image_url=optional_text(row, "image_url"),
        issue_year=optional_int(row, "issue_year"),
        pages=optional_int(row, "pages"),
        is_hardcover=str(row.get("is_hardcover", "")).strip().lower() in ("1", "true", "yes"),
        author=AuthorCreate(
            first_name=optional_text(row, "author_first_name") or "",
            last_name=optional_text(row, "author_last_name") or "",
        ),
        base_price=optional_price(row, "base_price"),
        promo_price=optional_price(row, "promo_price"),
        units_in_stock=optional_int(row, "units_in_stock") or 0,
    )


async def resolve_categories(names: List[str], known: Dict[str, Category], conn) -> List[Category]:
    categories = []
    for name in names:
        key = name.casefold()
        if key not in known:
            known[key] = await category_repository.find_by_name(name) or await category_repository.save(
                Category(name=name), conn=conn
            )
        categories.append(known[key])
    return categories


async def ingest_books(csv_path: Path, batch_size: int = 100, limit: Optional[int] = None):
    """Ingest books from a CSV file, one transaction per batch."""
    if not csv_path.exists():
        print(f"CSV file not found: {csv_path}")
        return

    print(f"Starting book ingestion from {csv_path}")
    await init_db()
    df = pd.read_csv(csv_path, nrows=limit)
    print(f"Loaded {len(df)} rows from CSV")

    total_inserted = 0
    total_errors = 0
    known_categories: Dict[str, Category] = {}
    try:
        for batch_start in range(0, len(df), batch_size):
            batch = df.iloc[batch_start:batch_start + batch_size]
            async with transaction() as conn:
                for idx, row in batch.iterrows():
                    try:
                        dto = row_to_book(row)
                    except (ValueError, ValidationError) as e:
                        print(f"  Skipping row {idx}: {e}")
                        total_errors += 1
                        continue

                    author = await author_repository.find_by_name(
                        dto.author.first_name, dto.author.last_name, conn=conn
                    )
                    if author is None:
                        author = await author_repository.save(Author.from_dto(dto.author), conn=conn)
                    book = Book.from_dto(dto)
                    author.add_book(book)
                    for category in await resolve_categories(parse_list_field(row.get("categories")), known_categories, conn):
                        book.add_category(category)
                    await book_repository.save(book, conn=conn)
                    total_inserted += 1
            print(f"  Batch {batch_start // batch_size + 1} done (total: {total_inserted})")
    finally:
        await close_pool()

    print(f"Book ingestion complete, inserted {total_inserted} books")
    if total_errors > 0:
        print(f"Skipped rows: {total_errors}")


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Ingest books from CSV file into the database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Expected columns:
  title, subtitle, description, image_url, issue_year, pages, is_hardcover,
  author_first_name, author_last_name, base_price, promo_price,
  units_in_stock, categories (separated by ';')

Example:
  python scripts/ingest_books.py --csv books.csv --limit 1000
        """,
    )
    parser.add_argument("--csv", type=str, default="books.csv", help="Path to CSV file (default: books.csv)")
    parser.add_argument("--batch-size", type=int, default=100, help="Books per transaction (default: 100)")
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of books to ingest (default: all)")
    args = parser.parse_args()

    csv_path = Path(args.csv)
    if not csv_path.is_absolute():
        csv_path = Path(__file__).parent.parent / csv_path

    await ingest_books(csv_path=csv_path, batch_size=args.batch_size, limit=args.limit)


if __name__ == "__main__":
    asyncio.run(main())

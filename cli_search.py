"""Terminal client that reuses the in-process search pipeline."""
from __future__ import annotations

import argparse
from pathlib import Path
from time import perf_counter
from typing import Iterable

from catalog_search.config import settings
from catalog_search.search_service import SearchService
from catalog_search.store import CatalogStore

MAX_RESULTS = 100
GREEN = "\033[92m"
RED = "\033[91m"
RESET = "\033[0m"


def build_service(catalog: Path) -> SearchService:
    service = SearchService(CatalogStore())
    service.load(str(catalog))
    return service


def perform_query(service: SearchService, query: str, limit: int, explain: bool) -> None:
    start = perf_counter()
    result = service.search(query, limit)
    eta = (perf_counter() - start) * 1000
    color = GREEN if eta < 200 else RED
    intent = result.processed.intent
    print(
        f"Query: {query} | corrected: {result.processed.corrected!r} | "
        f"results: {result.count} | ETA: {color}{eta:.1f} ms{RESET}"
    )
    print(f"  intent: sort={intent.sort_by} filters={intent.filter_by}")
    for idx, item in enumerate(result.ranked[:MAX_RESULTS], start=1):
        product = item.product
        print(
            f"  {idx:02d}. score={item.score:.3f} | {product.brand} | "
            f"{product.price:.0f} {product.currency} | {product.title}"
        )
        if explain:
            parts = service.ranking.score_breakdown(product, result.processed)
            print("      " + " ".join(f"{name}={value:.3f}" for name, value in parts.items()))


def interactive_shell(service: SearchService, limit: int, explain: bool) -> None:
    print("Interactive catalog search. Type 'exit' to quit.")
    while True:
        try:
            query = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return
        if not query:
            continue
        if query.lower() in {"exit", "quit"}:
            return
        perform_query(service, query, limit, explain)


def batch_mode(service: SearchService, file_path: Path, limit: int, explain: bool) -> None:
    with file_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            query = line.strip()
            if not query:
                continue
            perform_query(service, query, limit, explain)


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="CLI client for the catalog search pipeline")
    parser.add_argument("query", nargs="?", help="Query string. If omitted, starts REPL mode.")
    parser.add_argument("--batch", type=Path, help="File with queries to execute line by line")
    parser.add_argument("--catalog", type=Path, default=Path(settings.catalog_path), help="Catalog JSON file")
    parser.add_argument("--limit", type=int, default=settings.default_results, help="Maximum results per query")
    parser.add_argument("--explain", action="store_true", help="Print the score breakdown of every hit")
    args = parser.parse_args(list(argv) if argv is not None else None)

    service = build_service(args.catalog)
    if args.batch:
        batch_mode(service, args.batch, args.limit, args.explain)
        return 0
    if args.query:
        perform_query(service, args.query, args.limit, args.explain)
        return 0
    interactive_shell(service, args.limit, args.explain)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

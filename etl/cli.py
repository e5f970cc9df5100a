import argparse
import json
import logging
import sys

from common.logging_setup import setup_logging
from common.settings import load_settings
from etl.indexers import INDEXERS, build_filter, get_indexer
from streaming.consumers import run_indexer_batch
from streaming.sinks import ConsoleSink


def read_batches(path: str) -> list:
    """A JSON batch, a JSON list of batches, or JSON lines of batches."""
    with open(path, "r") as f:
        text = f.read()
    try:
        doc = json.loads(text)
    except json.JSONDecodeError:
        return [json.loads(line) for line in text.splitlines() if line.strip()]
    return doc if isinstance(doc, list) else [doc]


def main(argv=None):
    p = argparse.ArgumentParser(description="Run a transform script over decoded block batches")
    p.add_argument("--indexer", choices=sorted(INDEXERS), required=True,
                   help="Transform script to run")
    p.add_argument("--input", default=None,
                   help="Batch file (JSON, JSON list or JSON lines)")
    p.add_argument("--config", default="config.yaml",
                   help="Path to config.yaml")
    p.add_argument("--print-filter", dest="print_filter", action="store_true",
                   help="Print the runtime event filter and sink options, then exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = p.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else None)
    settings = load_settings(args.config)
    indexer = get_indexer(args.indexer)

    if args.print_filter:
        contract = settings.contract(indexer.contract_role)
        print(json.dumps({
            "network": settings.network,
            "filter": build_filter(indexer, contract),
            "sinkOptions": indexer.sink_options(),
        }, indent=2))
        return 0

    if not args.input:
        p.error("--input is required unless --print-filter is given")

    sink = ConsoleSink()
    for batch in read_batches(args.input):
        sink(run_indexer_batch(indexer, batch, settings))
    print(f"Wrote {sink.written} outputs for {indexer.name} on {settings.network}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())

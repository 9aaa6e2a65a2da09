import argparse
import asyncio
import json
import sys
import threading
import time

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from config.config import Config
from models.errors import NTIAgentError
from models.search_request import Scenario, SearchRequest
from orchestrator.core import SearchOrchestrator
from orchestrator.domain_resolver import SOURCE_LABELS
from utils.view import answer_to_cards


def show_loading_animation(stop_event: threading.Event) -> None:
    """
    Show a loading animation in the console.

    Args:
        stop_event: A threading.Event that will be set to stop the animation
    """
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stderr.write(f'\r\033[93mSearching {char}\033[0m')
            sys.stderr.flush()
            time.sleep(0.1)

    # Clear the loading line
    sys.stderr.write('\r' + ' ' * 20 + '\r')
    sys.stderr.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search scientific and technical documents")
    parser.add_argument("topic", help="Research topic")
    parser.add_argument("-k", "--keywords", default="", help="Keywords, comma separated")
    parser.add_argument("--from", dest="period_from", default="", help="Period start, YYYY-MM-DD")
    parser.add_argument("--to", dest="period_to", default="", help="Period end, YYYY-MM-DD")
    parser.add_argument(
        "-s",
        "--source",
        action="append",
        default=[],
        choices=SOURCE_LABELS,
        help="Restrict search to a known source (repeatable, up to 5)",
    )
    parser.add_argument(
        "--auto-sources",
        action="store_true",
        help="Let the model propose the domains to search",
    )
    parser.add_argument("--doc-type", action="append", default=[], help="Document type (repeatable)")
    parser.add_argument("--language", action="append", default=[], help="Source language (repeatable)")
    parser.add_argument("--no-ru", action="store_true", help="Skip Russian titles and abstracts")
    parser.add_argument("--no-metrics", action="store_true", help="Skip metrics and relevance")
    parser.add_argument("-m", "--model", default=None, help="Model identifier")
    parser.add_argument("--cards", action="store_true", help="Print cards as JSON instead of the table")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if len(args.source) > 5:
        print("Error: at most 5 sources can be selected", file=sys.stderr)
        return 2

    request = SearchRequest(
        topic=args.topic,
        keywords=args.keywords,
        period_from=args.period_from,
        period_to=args.period_to,
        source_labels=tuple(args.source),
        scenario=Scenario.AUTO_SOURCES if args.auto_sources else Scenario.EXPLICIT_SOURCES,
        doc_types=tuple(args.doc_type),
        languages=tuple(args.language),
        need_translation=not args.no_ru,
        need_metrics=not args.no_metrics,
        model=args.model,
    )

    stop_animation = threading.Event()
    loading_thread = threading.Thread(target=show_loading_animation, args=(stop_animation,))
    loading_thread.daemon = True

    try:
        orchestrator = SearchOrchestrator.from_config(Config())
        loading_thread.start()
        outcome = asyncio.run(orchestrator.run(request))
    except NTIAgentError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        stop_animation.set()
        if loading_thread.is_alive():
            loading_thread.join()

    if outcome.notice:
        print(f"[{outcome.notice}]", file=sys.stderr)
    if outcome.domains:
        print(f"Domains: {', '.join(outcome.domains)}", file=sys.stderr)

    if args.cards:
        print(json.dumps(answer_to_cards(outcome.answer), ensure_ascii=False, indent=2))
    else:
        print(outcome.answer)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Command-line entry point for the lc assistant.

Ask a question directly::

    lc how do I list open ports

or pipe some context in and keep the conversation going between runs::

    dmesg | tail -n 20 | lc -m -q "what went wrong here?"
    lc -m "and how do I fix it?"
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import IO, List, Optional, Sequence

from . import __version__
from .config import SETTABLE_KEYS, Config
from .errors import (CompletionError, ConfigError, ConfigWriteError,
                     HistoryReadError, HistoryWriteError, UsageError)
from .llm import OpenAICompletionClient
from .memory import ConversationStore, Message
from .session import ChatSession, compose_query, read_piped_input

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_COMPLETION = 1
EXIT_USAGE = 2
EXIT_CONFIG = 3
EXIT_CONFIG_WRITE = 4
EXIT_HISTORY = 5


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lc",
        description="Ask a chat-completion model about the command line.",
    )
    parser.add_argument(
        "-q",
        "--query",
        default=None,
        help="Specify the query for the AI (can also be provided without -q).",
    )
    parser.add_argument(
        "-m",
        "--memory",
        action="store_true",
        help="Enable conversation memory.",
    )
    parser.add_argument(
        "--clear-memory",
        action="store_true",
        help="Clear the conversation memory.",
    )
    parser.add_argument(
        "--show-memory",
        action="store_true",
        help="Print the stored conversation memory.",
    )
    parser.add_argument(
        "--set",
        metavar="KEY=VALUE",
        default=None,
        help=f"Set a configuration value (valid keys: {', '.join(SETTABLE_KEYS)}).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("words", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def main(argv: Optional[Sequence[str]] = None, stdin: Optional[IO[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)
    logger.debug("Debug mode enabled")

    try:
        config = Config.load()
    except ConfigError as exc:
        _report(f"Failed to load config: {exc}")
        return EXIT_CONFIG
    logger.debug("Loaded config: %s", config.redacted())

    store = ConversationStore()

    if args.clear_memory:
        return _clear_memory(store)

    if args.show_memory:
        return _show_memory(store)

    if args.set is not None:
        return _set_config(config, args.set)

    try:
        query = compose_query(args.query, args.words, args.memory)
    except UsageError:
        parser.print_help()
        return EXIT_OK
    input_text = read_piped_input(sys.stdin if stdin is None else stdin)
    logger.debug("Query: %s", query)
    logger.debug("Input: %s", input_text)

    session = ChatSession(
        config=config,
        backend=OpenAICompletionClient.from_config(config),
        store=store,
    )
    try:
        session.ask(query, input_text, memory=args.memory, on_reply=print)
    except (CompletionError, HistoryWriteError) as exc:
        _report(str(exc))
        return EXIT_COMPLETION
    return EXIT_OK


def _report(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def _clear_memory(store: ConversationStore) -> int:
    try:
        removed = store.clear()
    except HistoryWriteError as exc:
        _report(str(exc))
        return EXIT_HISTORY
    if removed:
        print("Conversation memory has been cleared.")
    else:
        print("No conversation memory found.")
    return EXIT_OK


def _show_memory(store: ConversationStore) -> int:
    try:
        messages: List[Message] = store.load()
    except HistoryReadError as exc:
        _report(str(exc))
        return EXIT_HISTORY
    if not messages:
        print("<empty>")
    for message in messages:
        print(f"{message.role}: {message.content}")
    return EXIT_OK


def _set_config(config: Config, assignment: str) -> int:
    key, sep, value = assignment.partition("=")
    if not sep:
        _report("Invalid set argument. Use format: key=value")
        return EXIT_USAGE
    try:
        config.set_value(key, value)
    except ConfigError as exc:
        _report(str(exc))
        return EXIT_CONFIG
    except ConfigWriteError as exc:
        _report(str(exc))
        return EXIT_CONFIG_WRITE
    print(f"{key} set successfully.")
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

"""
Terminal chat surface for the Estate Assistant.

Renders the conversation engine's message log as chat bubbles and forwards
typed lines to it. Type /close (or send EOF) to close the widget.

Usage:
    python chat_console.py
    python chat_console.py --script "Tell me about market trends" "Any mortgage tips?"
"""
import sys
import argparse
import asyncio
import logging
import random
import threading
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from models.message import Message
from services.conversation_engine import ConversationEngine
from services.response_generator import ResponseGenerator
from config import ASSISTANT_NAME, FALLBACK_SEED, LOG_FORMAT, LOG_LEVEL, REPLY_DELAY_SECONDS
from logger import setup_logging

logger = logging.getLogger(__name__)

CLOSE_COMMAND = "/close"


class ConsoleRenderer:
    """Prints messages as they are appended and a typing indicator while composing."""

    def __init__(self, assistant_name: str = ASSISTANT_NAME, out: Optional[TextIO] = None):
        self.assistant_name = assistant_name
        self.out = out or sys.stdout
        self._rendered = 0
        self._typing_shown = False

    def __call__(self, messages: Tuple[Message, ...], awaiting_reply: bool) -> None:
        for message in messages[self._rendered:]:
            self._render(message)
        self._rendered = max(self._rendered, len(messages))

        if awaiting_reply and not self._typing_shown:
            self.out.write(f"{self.assistant_name} is typing...\n\n")
        self._typing_shown = awaiting_reply
        self.out.flush()

    def _render(self, message: Message) -> None:
        author = "You" if message.is_user else self.assistant_name
        self.out.write(f"{author} [{message.display_time()}]\n")
        for line in message.lines():
            self.out.write(f"  {line}\n")
        self.out.write("\n")


async def run_script(engine: ConversationEngine, questions: List[str]) -> None:
    """Submit each question in turn, waiting for the reply before the next."""
    for question in questions:
        engine.submit_user_message(question)
        await engine.wait_for_reply()
    engine.close()


class StdinReader:
    """
    Reads lines on a daemon thread and hands them to the event loop.

    The thread never holds up interpreter shutdown, so Ctrl-C exits even
    while it is blocked waiting for input.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdin
        self._queue: Optional[asyncio.Queue] = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._thread = threading.Thread(
            target=self._read_lines, args=(loop,), name="stdin-reader", daemon=True
        )
        self._thread.start()

    async def readline(self) -> Optional[str]:
        """Return the next line without its newline, or None at EOF."""
        if self._queue is None:
            self.start()
        return await self._queue.get()

    def _read_lines(self, loop: asyncio.AbstractEventLoop) -> None:
        while True:
            line = self.stream.readline()
            item = line.rstrip("\n") if line else None
            try:
                loop.call_soon_threadsafe(self._queue.put_nowait, item)
            except RuntimeError:
                # Event loop closed after the widget shut down
                return
            if item is None:
                return


async def run_interactive(engine: ConversationEngine, reader: Optional[StdinReader] = None,
                          out: Optional[TextIO] = None) -> None:
    """Read lines until /close or EOF."""
    reader = reader or StdinReader()
    out = out or sys.stdout
    while not engine.closed:
        out.write("> ")
        out.flush()
        line = await reader.readline()

        if line is None or line.strip() == CLOSE_COMMAND:
            engine.close()
            break

        engine.submit_user_message(line)
        await engine.wait_for_reply()


async def open_widget(args: argparse.Namespace) -> None:
    seed = args.seed if args.seed is not None else FALLBACK_SEED
    engine = ConversationEngine(
        generator=ResponseGenerator(random.Random(seed)),
        reply_delay=args.delay,
    )
    engine.subscribe(ConsoleRenderer())

    if args.script:
        await run_script(engine, args.script)
    else:
        await run_interactive(engine)


def main():
    """Main entry point for the terminal chat surface."""
    parser = argparse.ArgumentParser(
        description=f"Terminal chat with the {ASSISTANT_NAME}"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=REPLY_DELAY_SECONDS,
        help="Simulated reply latency in seconds (default: %(default)s)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the fallback reply RNG"
    )
    parser.add_argument(
        "--script",
        nargs="+",
        default=None,
        help="Questions to ask in order instead of reading stdin"
    )
    args = parser.parse_args()

    setup_logging(LOG_LEVEL, json_format=LOG_FORMAT == "json")

    try:
        asyncio.run(open_widget(args))
    except KeyboardInterrupt:
        logger.warning("Chat interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Conversation engine driving the simulated assistant's turn-taking."""
import asyncio
import itertools
import logging
import random
import uuid
from datetime import datetime
from typing import Any, Callable, List, Optional, Tuple

from models.message import Message, USER, ASSISTANT
from services.response_generator import ResponseGenerator
from config import REPLY_DELAY_SECONDS, FALLBACK_SEED

logger = logging.getLogger(__name__)

Listener = Callable[[Tuple[Message, ...], bool], None]
Scheduler = Callable[[float, Callable[[], None]], Any]


class ConversationEngine:
    """
    Owns the message log of one open chat widget.

    The engine alternates user and assistant turns. An accepted submission
    appends the user message, flips into the composing state and schedules
    the assistant reply after a fixed delay; submissions made while a reply
    is outstanding are dropped. All mutation happens on the event loop
    thread, so the awaiting_reply flag is the only gate needed.
    """

    GREETING = (
        "Hello! I'm your AI Real Estate Assistant. I can help you with property "
        "inquiries, market analysis, investment advice, and more. "
        "What would you like to know?"
    )

    def __init__(
        self,
        generator: Optional[ResponseGenerator] = None,
        reply_delay: float = REPLY_DELAY_SECONDS,
        scheduler: Optional[Scheduler] = None,
    ):
        """
        Initialize the engine and open a session.

        Args:
            generator: Response generator; defaults to one seeded from FALLBACK_SEED
            reply_delay: Simulated thinking latency in seconds
            scheduler: Callable (delay, callback) used to defer the reply.
                Defaults to call_later on the running asyncio loop.
        """
        if reply_delay < 0:
            raise ValueError("reply_delay must not be negative")

        self.generator = generator or ResponseGenerator(random.Random(FALLBACK_SEED))
        self.reply_delay = reply_delay
        self._scheduler = scheduler
        self._listeners: List[Listener] = []
        self._reply_waiters: List[asyncio.Future] = []
        self._notifying = False
        self._notify_pending = False

        self.session_id = ""
        self.closed = False
        self._messages: List[Message] = []
        self._awaiting_reply = False
        self._ids = itertools.count(1)

        self.initialize()

    def initialize(self) -> None:
        """
        Reset the log to the seed greeting and return to the idle state.

        A reply still scheduled for the previous session becomes a no-op.
        """
        self.session_id = self._generate_session_id()
        self.closed = False
        self._ids = itertools.count(1)
        self._messages = [self._new_message(self.GREETING, ASSISTANT)]
        self._awaiting_reply = False

        logger.info(
            f"Initialized chat session {self.session_id}",
            extra={"extra": {"session_id": self.session_id}}
        )
        self._release_waiters()
        self._notify()

    def submit_user_message(self, text: str) -> bool:
        """
        Append a user message and schedule the assistant reply.

        Empty or whitespace-only text, a submission while a reply is
        outstanding, and a submission after close are ignored.

        Args:
            text: Raw text from the input box

        Returns:
            True if the message was accepted, False if it was ignored
        """
        if self.closed:
            logger.debug(f"Ignoring submission to closed session {self.session_id}")
            return False

        user_text = text.strip() if text else ""
        if not user_text:
            logger.debug(f"Ignoring empty submission in session {self.session_id}")
            return False

        if self._awaiting_reply:
            logger.info(
                f"Ignoring submission while assistant is composing in session {self.session_id}",
                extra={"extra": {"session_id": self.session_id}}
            )
            return False

        # The scheduler must defer the callback; it runs before any state
        # change so a failing scheduler leaves the session idle.
        session_id = self.session_id
        schedule = self._resolve_scheduler()
        schedule(self.reply_delay, lambda: self._deliver_reply(session_id, user_text))

        self._messages.append(self._new_message(user_text, USER))
        self._awaiting_reply = True
        logger.info(
            f"Accepted user message in session {self.session_id}: {user_text[:50]}",
            extra={"extra": {"session_id": self.session_id, "message_count": len(self._messages)}}
        )
        self._notify()
        return True

    def get_messages(self) -> Tuple[Message, ...]:
        """Return an immutable snapshot of the message log."""
        return tuple(self._messages)

    def is_awaiting_reply(self) -> bool:
        """Return True while the assistant is composing a reply."""
        return self._awaiting_reply

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for state changes.

        The listener is called right away with the current state, then after
        every append and every awaiting_reply flip.

        Args:
            listener: Callable receiving (messages, awaiting_reply)

        Returns:
            Callable that removes the listener; safe to call more than once
        """
        self._listeners.append(listener)
        self._call_listener(listener, self.get_messages(), self._awaiting_reply)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """
        End the session.

        Pending replies are not cancelled; they become no-ops when they fire.
        """
        if self.closed:
            return
        self.closed = True
        self._listeners.clear()
        logger.info(
            f"Closed chat session {self.session_id}",
            extra={"extra": {"session_id": self.session_id}}
        )
        self._release_waiters()

    async def wait_for_reply(self) -> None:
        """Wait until the outstanding reply is appended or the session ends."""
        if not self._awaiting_reply or self.closed:
            return
        waiter = asyncio.get_running_loop().create_future()
        self._reply_waiters.append(waiter)
        await waiter

    def _deliver_reply(self, session_id: str, user_text: str) -> None:
        """Append the assistant reply for a submission; runs on the scheduler."""
        if self.closed or session_id != self.session_id:
            logger.debug(f"Dropping reply for ended session {session_id}")
            return

        reply = self.generator.generate(user_text)
        self._messages.append(self._new_message(reply, ASSISTANT))
        self._awaiting_reply = False
        logger.info(
            f"Delivered assistant reply in session {self.session_id}",
            extra={"extra": {"session_id": self.session_id, "message_count": len(self._messages)}}
        )
        self._release_waiters()
        self._notify()

    def _resolve_scheduler(self) -> Scheduler:
        if self._scheduler is not None:
            return self._scheduler
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError(
                "ConversationEngine needs a running event loop or an explicit scheduler"
            ) from None
        return loop.call_later

    def _notify(self) -> None:
        """
        Send the current (messages, awaiting_reply) pair to every listener.

        A change made by a listener during a round is not delivered
        re-entrantly; another full round runs once the current one ends, so
        every listener sees the states in order and ends on the latest one.
        """
        if self._notifying:
            self._notify_pending = True
            return

        self._notifying = True
        try:
            while True:
                self._notify_pending = False
                snapshot = self.get_messages()
                awaiting_reply = self._awaiting_reply
                for listener in list(self._listeners):
                    self._call_listener(listener, snapshot, awaiting_reply)
                if not self._notify_pending:
                    break
        finally:
            self._notifying = False

    def _call_listener(self, listener: Listener, messages: Tuple[Message, ...], awaiting_reply: bool) -> None:
        try:
            listener(messages, awaiting_reply)
        except Exception as e:
            logger.error(f"Listener failed in session {self.session_id}: {e}", exc_info=True)

    def _release_waiters(self) -> None:
        waiters, self._reply_waiters = self._reply_waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)

    def _new_message(self, text: str, sender: str) -> Message:
        return Message(id=next(self._ids), text=text, sender=sender, timestamp=datetime.now())

    def _generate_session_id(self) -> str:
        """
        Generate a unique session ID.

        Returns:
            Unique session ID string
        """
        return f"chat_{uuid.uuid4().hex[:12]}"

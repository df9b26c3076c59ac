"""Telegram Bot API long-polling transport."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

import httpx

from tgwol.core.router import Command, CommandRouter, HelpCommand, Reply, WakeCommand

logger = logging.getLogger(__name__)

API_URL = "https://api.telegram.org"


class TelegramError(Exception):
    """Raised when a Bot API call fails or returns ok=false."""


class TelegramClient:
    """Minimal synchronous Bot API client."""

    def __init__(
        self,
        token: str,
        base_url: str = API_URL,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/bot{token}"
        self._client = client or httpx.Client(timeout=httpx.Timeout(10.0, read=None))

    def close(self) -> None:
        self._client.close()

    def _call(self, method: str, payload: Optional[dict[str, Any]] = None) -> Any:
        try:
            resp = self._client.post(f"{self._url}/{method}", json=payload or {})
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise TelegramError(f"{method} failed: {exc}") from exc
        if not body.get("ok"):
            raise TelegramError(
                f"{method} failed: {body.get('error_code', resp.status_code)} "
                f"{body.get('description', '')}".rstrip()
            )
        return body["result"]

    def get_me(self) -> dict[str, Any]:
        result: dict[str, Any] = self._call("getMe")
        return result

    def get_updates(self, offset: Optional[int] = None, timeout: int = 30) -> list[dict[str, Any]]:
        payload: dict[str, Any] = {"timeout": timeout, "allowed_updates": ["message"]}
        if offset is not None:
            payload["offset"] = offset
        result: list[dict[str, Any]] = self._call("getUpdates", payload)
        return result

    def send_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = None,
        keyboard: Optional[list[str]] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode
        if keyboard:
            payload["reply_markup"] = {
                "keyboard": [[{"text": label}] for label in keyboard],
                "resize_keyboard": True,
            }
        result: dict[str, Any] = self._call("sendMessage", payload)
        return result


def parse_command(text: str, bot_username: Optional[str] = None) -> Optional[Command]:
    """
    Parse "/help" or "/wake <device>" from a message text.

    Returns:
        The Command, or None if the text is not a command for this bot
    """
    parts = text[1:].split(None, 1) if text.startswith("/") else []
    if not parts:
        return None
    rest = parts[1] if len(parts) > 1 else ""
    name, _, target = parts[0].partition("@")
    if target and bot_username and target.lower() != bot_username.lower():
        return None

    name = name.lower()
    if name == "help":
        return HelpCommand()
    if name == "wake":
        return WakeCommand(rest.strip())
    return None


def _deliver(
    client: TelegramClient,
    router: CommandRouter,
    chat_id: int,
    command: Command,
    sender_id: int,
) -> None:
    # Runs on a pool thread whose future is never collected; anything not
    # logged here is lost.
    try:
        reply: Reply = router.handle(command, sender_id)
    except Exception:
        logger.exception("Failed to handle %r from %d", command, sender_id)
        reply = Reply("Something went wrong handling that command.")
    try:
        client.send_message(
            chat_id, reply.text, parse_mode=reply.parse_mode, keyboard=reply.keyboard
        )
    except TelegramError as exc:
        logger.error("Failed to reply to chat %d: %s", chat_id, exc)


def run_polling(
    client: TelegramClient,
    router: CommandRouter,
    poll_timeout: int = 30,
    max_workers: int = 4,
    retry_delay: float = 5.0,
    stop: Optional[threading.Event] = None,
) -> None:
    """
    Poll getUpdates and dispatch each command message to a worker thread.

    Runs until ``stop`` is set.
    """
    stop = stop or threading.Event()
    bot_username: Optional[str] = None
    try:
        bot_username = client.get_me().get("username")
        logger.info("Polling as @%s", bot_username)
    except TelegramError as exc:
        logger.warning("getMe failed, /cmd@bot suffixes will not be checked: %s", exc)

    offset: Optional[int] = None
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="tgwol") as pool:
        while not stop.is_set():
            try:
                updates = client.get_updates(offset=offset, timeout=poll_timeout)
            except TelegramError as exc:
                logger.error("Polling failed (%s), retrying in %.0f s", exc, retry_delay)
                stop.wait(retry_delay)
                continue

            for update in updates:
                offset = update["update_id"] + 1
                message = update.get("message") or {}
                text = message.get("text")
                sender = message.get("from")
                if not text or not sender:
                    continue
                command = parse_command(text, bot_username)
                if command is None:
                    continue
                logger.debug("Update %d: %r from %d", update["update_id"], command, sender["id"])
                pool.submit(_deliver, client, router, message["chat"]["id"], command, sender["id"])

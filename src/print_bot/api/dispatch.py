"""Dispatch Telegram updates to the message router."""

from print_bot.api.telegram_models import TelegramUpdate, to_inbound_event
from print_bot.containers import AppContainer

PRIVATE_BOT_TEXT = "Este bot é privado."


def is_user_allowed(user_id: int, allowed: set[int] | None) -> bool:
    """Return true when the user is allowed to interact with the bot."""
    return allowed is None or user_id in allowed


async def dispatch_update(
    container: AppContainer,
    update: TelegramUpdate,
    allowed_user_ids: set[int] | None,
) -> str:
    """Route one update and return a short status label."""
    message = update.message
    if message is None:
        return "ignored"
    if not is_user_allowed(message.from_user.id, allowed_user_ids):
        await container.transport.send_message(str(message.chat.id), PRIVATE_BOT_TEXT)
        return "forbidden"
    await container.router.handle(to_inbound_event(message))
    return "ok"

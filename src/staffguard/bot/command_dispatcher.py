"""
Slash command dispatcher.

Every command goes through the same three steps:

1. **Authorize**: the route's :class:`AuthorizationLevel` is checked against
   the invoking user. A rejection is answered ephemerally and nothing else
   happens.
2. **Execute**: the route's handler runs and returns a :class:`CommandResponse`.
3. **Respond**: the response is sent exactly once. An exception escaping a
   handler is logged and answered with a generic failure message instead.

The table of routes lives in :mod:`staffguard.bot.command_handlers`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

import discord

from staffguard.state.app_state import AppState
from staffguard.util.discord_utils import role_ids_of
from staffguard.util.logger import get_logger

logger = get_logger("command_dispatcher")

GENERIC_FAILURE_MESSAGE = "❌ Something went wrong while running this command."
GUILD_ONLY_MESSAGE = "❌ This command can only be used in a server."


class AuthorizationLevel(Enum):
    """Who may run a command."""

    OWNER = "owner"
    HEAD_STAFF = "head_staff"
    STAFF = "staff"


REJECTION_MESSAGES = {
    AuthorizationLevel.OWNER: "❌ Only the bot owner can use this command.",
    AuthorizationLevel.HEAD_STAFF: "❌ Only the bot owner and head staff can manage staff roles.",
    AuthorizationLevel.STAFF: "❌ You don't have permission to use this command.",
}


@dataclass(slots=True)
class CommandResponse:
    """What a handler wants sent back to the invoking user."""

    content: Optional[str] = None
    embed: Optional[discord.Embed] = None
    ephemeral: bool = False

    @classmethod
    def error(cls, message: str) -> "CommandResponse":
        return cls(content=message, ephemeral=True)


Handler = Callable[..., Awaitable[CommandResponse]]


@dataclass(frozen=True, slots=True)
class CommandRoute:
    """A command name bound to its handler and required authorization.

    Attributes:
        name: Slash command name.
        handler: ``async (state, ctx, **options) -> CommandResponse``.
        authorization: Tier the invoking user must belong to.
    """

    name: str
    handler: Handler
    authorization: AuthorizationLevel


class CommandDispatcher:
    """Routes slash commands to handlers through an authorization check."""

    def __init__(self, state: AppState, routes: Optional[Iterable[CommandRoute]] = None):
        self.state = state
        if routes is None:
            from staffguard.bot.command_handlers import DEFAULT_ROUTES
            routes = DEFAULT_ROUTES
        self.routes: Dict[str, CommandRoute] = {}
        for route in routes:
            self.register(route)

    def register(self, route: CommandRoute) -> None:
        if route.name in self.routes:
            raise ValueError(f"Command {route.name!r} is already registered")
        self.routes[route.name] = route

    def is_authorized(self, level: AuthorizationLevel, ctx: Any) -> bool:
        actor = ctx.user
        staff = self.state.staff
        if level is AuthorizationLevel.OWNER:
            return staff.is_owner(actor.id)
        if level is AuthorizationLevel.HEAD_STAFF:
            return staff.is_head_staff(actor.id)
        return staff.is_staff(actor.id, ctx.guild.id, role_ids_of(actor))

    async def dispatch(self, name: str, ctx: Any, **options: Any) -> CommandResponse:
        """Authorize, execute and answer one command invocation.

        Returns the response that was sent, which tests and callers can inspect.
        """
        route = self.routes.get(name)
        if route is None:
            logger.error("[COMMAND DISPATCHER] No route registered for /%s", name)
            response = CommandResponse.error(GENERIC_FAILURE_MESSAGE)
        elif ctx.guild is None:
            response = CommandResponse.error(GUILD_ONLY_MESSAGE)
        elif not self.is_authorized(route.authorization, ctx):
            logger.info("[COMMAND DISPATCHER] Rejected /%s from %s (%s required)", name, ctx.user.id, route.authorization.value)
            response = CommandResponse.error(REJECTION_MESSAGES[route.authorization])
        else:
            response = await self.execute(route, ctx, options)

        await self.send_response(ctx, response)
        return response

    async def execute(self, route: CommandRoute, ctx: Any, options: Dict[str, Any]) -> CommandResponse:
        try:
            response = await route.handler(self.state, ctx, **options)
        except Exception as exc:
            logger.exception("[COMMAND DISPATCHER] Unhandled error in /%s: %s", route.name, exc)
            return CommandResponse.error(GENERIC_FAILURE_MESSAGE)

        if response is None:
            logger.error("[COMMAND DISPATCHER] Handler for /%s returned no response", route.name)
            return CommandResponse.error(GENERIC_FAILURE_MESSAGE)
        return response

    @staticmethod
    async def send_response(ctx: Any, response: CommandResponse) -> None:
        kwargs: Dict[str, Any] = {"ephemeral": response.ephemeral}
        if response.content is not None:
            kwargs["content"] = response.content
        if response.embed is not None:
            kwargs["embed"] = response.embed
        try:
            await ctx.respond(**kwargs)
        except Exception as exc:
            logger.error("[COMMAND DISPATCHER] Failed to send response: %s", exc)

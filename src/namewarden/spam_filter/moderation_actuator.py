"""Enforcement for a detected impersonation: best-effort DM, then ban."""

from __future__ import annotations

from typing import Iterable, Protocol, Tuple

from namewarden.datatypes.spam_filter_datatypes import MemberIdentity
from namewarden.errors import BanError, DeliveryError
from namewarden.util.logger import get_logger

logger = get_logger("moderation_actuator")

# Discord caps audit log reasons at 512 characters
MAX_REASON_LENGTH = 512


class EnforcementTarget(Protocol):
    async def ban(self, member: MemberIdentity, reason: str) -> None: ...

    async def direct_message(self, member: MemberIdentity, text: str) -> None: ...


class ModerationActuator:
    """Notifies and bans a matched member.

    The DM goes first because the bot can no longer reach a user once they
    are banned. Neither step raises: a failed DM never prevents the ban, and
    a failed ban is only logged. ``apply`` returning True means enforcement
    was attempted, not that the member is gone.
    """

    def __init__(self, escalation_contact_ids: Iterable[int]) -> None:
        self.escalation_contact_ids: Tuple[int, ...] = tuple(escalation_contact_ids)

    def build_notice(self, server_name: str) -> str:
        contacts = " or ".join(f"<@{contact_id}>" for contact_id in self.escalation_contact_ids)
        notice = f"You were auto-banned from the {server_name} server."
        if contacts:
            notice += f" If you believe this was a mistake, please contact {contacts}."
        return notice

    @staticmethod
    def build_debug_message(candidate: MemberIdentity) -> str:
        return f"Nickname: {candidate.display_name}. Username: {candidate.audit_tag}."

    def build_ban_reason(self, candidate: MemberIdentity, matched_evidence: str) -> str:
        reason = (
            f"Auto-banned by username spam filter. {self.build_debug_message(candidate)} "
            f"Matched: {matched_evidence!r}."
        )
        return reason[:MAX_REASON_LENGTH]

    async def apply(
        self,
        candidate: MemberIdentity,
        matched_evidence: str,
        directory: EnforcementTarget,
        server_name: str,
    ) -> bool:
        debug_message = self.build_debug_message(candidate)

        try:
            await directory.direct_message(candidate, self.build_notice(server_name))
        except DeliveryError as exc:
            # Users that have blocked the bot or disabled DMs cannot receive a DM from the bot
            logger.info("Unable to message user before auto-banning them. %s %s", debug_message, exc)

        try:
            await directory.ban(candidate, self.build_ban_reason(candidate, matched_evidence))
        except BanError as exc:
            logger.error("Unable to auto-ban user. %s %s", debug_message, exc)
        else:
            logger.info("Auto-banned user. %s", debug_message)

        return True

"""Accumulates resolver effects and attachments into a :class:`ParsedMsg`."""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import MsgAttachment, ParsedMsg
from .resolver import AppendAddresses, FieldEffect, OfferSentTime, SetField


@dataclass
class MessageBuilder:
    """Mutable accumulator owned by a single parse call."""

    subject: str | None = None
    sender_name: str | None = None
    sender_email: str | None = None
    recipients: list[str] = field(default_factory=list)
    cc_recipients: list[str] = field(default_factory=list)
    sent_time: str | None = None
    body_text: str | None = None
    body_html: str | None = None
    body_rtf: str | None = None
    attachments: list[MsgAttachment] = field(default_factory=list)

    def apply(self, effect: FieldEffect | None) -> None:
        """Fold one resolver effect into the builder.  ``None`` is a no-op."""
        if effect is None:
            return
        if isinstance(effect, SetField):
            setattr(self, effect.field.value, effect.value)
        elif isinstance(effect, AppendAddresses):
            getattr(self, effect.field.value).extend(effect.values)
        elif isinstance(effect, OfferSentTime):
            # Header and delivery time only fill a gap; submit time wins.
            if self.sent_time is None or effect.priority.overrides:
                self.sent_time = effect.value
        else:
            raise TypeError(f"Unsupported field effect: {effect!r}")

    def add_attachment(self, attachment: MsgAttachment) -> None:
        self.attachments.append(attachment)

    def build(self) -> ParsedMsg:
        return ParsedMsg(
            subject=self.subject,
            sender_name=self.sender_name,
            sender_email=self.sender_email,
            recipients=tuple(self.recipients),
            cc_recipients=tuple(self.cc_recipients),
            sent_time=self.sent_time,
            body_text=self.body_text,
            body_html=self.body_html,
            body_rtf=self.body_rtf,
            attachments=tuple(self.attachments),
        )

"""Moderation decisions for a single ad."""

from __future__ import annotations

import enum
import logging
import pathlib
from dataclasses import dataclass
from typing import Iterable

import yaml

from adreview.client.api import ModerationClient, ModerationClientError
from adreview.client.models import Ad

logger = logging.getLogger(__name__)

REASONS_PATH = pathlib.Path(__file__).with_name("reasons.yml")
OTHER_REASON = "Другое"


def load_reasons() -> dict[str, list[str]]:
    data = yaml.safe_load(REASONS_PATH.read_text(encoding="utf-8"))
    return {kind: [str(item) for item in items] for kind, items in data.items()}


_REASONS = load_reasons()
REJECT_REASONS: tuple[str, ...] = tuple(_REASONS["reject"])
CHANGES_REASONS: tuple[str, ...] = tuple(_REASONS["request_changes"])


class FormState(str, enum.Enum):
    IDLE = "idle"
    REJECT_OPEN = "reject"
    CHANGES_OPEN = "changes"


_FORM_REASONS = {
    FormState.IDLE: (),
    FormState.REJECT_OPEN: REJECT_REASONS,
    FormState.CHANGES_OPEN: CHANGES_REASONS,
}
_MISSING_REASON_MESSAGES = {
    FormState.REJECT_OPEN: "Укажите причину отклонения!",
    FormState.CHANGES_OPEN: "Укажите причину запроса изменений!",
}


class MissingReasonError(ValueError):
    """Raised when a reject or request-changes form is submitted without a reason."""


class ModerationForm:
    """Reason checklist, free-text reason and comment for the open form.

    At most one of the reject and request-changes forms is open at a time.
    """

    def __init__(self) -> None:
        self.state = FormState.IDLE
        self.reasons: list[str] = []
        self.other_reason = ""
        self.comment = ""

    @classmethod
    def from_submission(
        cls,
        state: FormState,
        reasons: Iterable[str] = (),
        other_reason: str = "",
        comment: str = "",
    ) -> "ModerationForm":
        form = cls()
        form.open(state)
        for reason in reasons:
            if reason not in form.reasons:
                form.toggle_reason(reason)
        form.other_reason = other_reason or ""
        form.comment = comment or ""
        return form

    @property
    def available_reasons(self) -> tuple[str, ...]:
        return _FORM_REASONS[self.state]

    @property
    def wants_other(self) -> bool:
        return OTHER_REASON in self.reasons

    def open(self, state: FormState) -> None:
        self.state = state
        offered = self.available_reasons
        self.reasons = [reason for reason in self.reasons if reason in offered]

    def toggle_reject(self) -> None:
        self.open(FormState.IDLE if self.state is FormState.REJECT_OPEN else FormState.REJECT_OPEN)

    def toggle_changes(self) -> None:
        self.open(FormState.IDLE if self.state is FormState.CHANGES_OPEN else FormState.CHANGES_OPEN)

    def toggle_reason(self, reason: str) -> None:
        if reason not in self.available_reasons:
            raise ValueError(f"Reason {reason!r} is not offered by the {self.state.value} form")
        if reason in self.reasons:
            self.reasons.remove(reason)
        else:
            self.reasons.append(reason)

    def effective_reason(self) -> str:
        if self.wants_other:
            return self.other_reason.strip()
        return ", ".join(self.reasons)

    def clear(self) -> None:
        self.state = FormState.IDLE
        self.reasons = []
        self.other_reason = ""
        self.comment = ""


@dataclass(frozen=True, slots=True)
class ActionAvailability:
    approve: bool
    reject: bool
    request_changes: bool

    def allows(self, state: FormState) -> bool:
        if state is FormState.REJECT_OPEN:
            return self.reject
        if state is FormState.CHANGES_OPEN:
            return self.request_changes
        return True


def action_availability(ad: Ad) -> ActionAvailability:
    """Which buttons to enable. Only a hint: the backend has the final say."""
    return ActionAvailability(
        approve=ad.status != "approved",
        reject=ad.status != "rejected",
        request_changes=ad.status != "draft",
    )


class ModerationSubmitter:
    def __init__(self, client: ModerationClient, ad_id: int, *, ad: Ad | None = None) -> None:
        self.client = client
        self.ad_id = ad_id
        self.ad = ad
        self.form = ModerationForm()

    async def refresh(self) -> Ad | None:
        try:
            self.ad = await self.client.get_ad(self.ad_id)
        except ModerationClientError as exc:
            logger.warning("Failed to load ad %s: %s", self.ad_id, exc)
        return self.ad

    async def approve(self) -> bool:
        try:
            await self.client.approve(self.ad_id)
        except ModerationClientError as exc:
            logger.warning("Failed to approve ad %s: %s", self.ad_id, exc)
            return False
        logger.info("Approved ad %s", self.ad_id)
        await self.refresh()
        return True

    def validate(self) -> str:
        if self.form.state is FormState.IDLE:
            raise RuntimeError("No moderation form is open")
        reason = self.form.effective_reason()
        if not reason:
            raise MissingReasonError(_MISSING_REASON_MESSAGES[self.form.state])
        return reason

    async def submit(self) -> bool:
        """Send the open form. Raises MissingReasonError before any request."""
        reason = self.validate()
        comment = self.form.comment
        try:
            if self.form.state is FormState.REJECT_OPEN:
                await self.client.reject(self.ad_id, reason, comment)
            else:
                await self.client.request_changes(self.ad_id, reason, comment)
        except ModerationClientError as exc:
            logger.warning("Failed to submit %s for ad %s: %s", self.form.state.value, self.ad_id, exc)
            return False
        logger.info("Submitted %s for ad %s reason=%s", self.form.state.value, self.ad_id, reason)
        self.form.clear()
        await self.refresh()
        return True

"""State holder for the group list panel.

The controller keeps two lists: ``groups`` (everything the gateway returned)
and ``filtered_groups`` (the subset whose name matches the search query).
Writes go to the gateway first; only a confirmed write is mirrored into
both lists, so there is never anything to roll back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from group_admin.client.gateway import GatewayClient, GatewayError
from group_admin.modules.groups.schemas import Group, MembershipField
from group_admin.modules.posts.schemas import Post

logger = logging.getLogger(__name__)

_datetime_adapter = TypeAdapter(datetime)


class CapabilityDisabledError(Exception):
    """Raised when an operation is invoked on a panel that does not offer it."""


class Popup(str, Enum):
    ADD_MEMBER = "add_member"
    ADD_PERMISSION = "add_permission"


@dataclass
class ViewCapabilities:
    """Which parts of the panel are enabled.

    ``manage_users`` covers adding/removing entries in ``users``,
    ``manage_members`` the same for ``members``, ``show_posts`` the
    per-member posts lookup.
    """

    manage_users: bool = True
    manage_members: bool = True
    show_posts: bool = True


@dataclass
class PendingDelete:
    field: MembershipField
    group_id: str
    value: str


@dataclass
class PendingIntent:
    """The single editing slot: one popup or one delete prompt at a time."""

    group_id: Optional[str] = None
    input_value: str = ""
    popup: Optional[Popup] = None
    delete: Optional[PendingDelete] = None


def format_date(value: Optional[str]) -> str:
    if not value:
        return "N/A"
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError:
        return value
    return parsed.strftime("%c")


def filter_groups(groups: List[Group], query: str) -> List[Group]:
    needle = query.lower()
    return [group for group in groups if needle in group.name.lower()]


class GroupListController:
    def __init__(
        self,
        gateway: GatewayClient,
        capabilities: Optional[ViewCapabilities] = None,
    ) -> None:
        self.gateway = gateway
        self.capabilities = capabilities or ViewCapabilities()
        self.groups: List[Group] = []
        self.filtered_groups: List[Group] = []
        self.search_query = ""
        self.loading = True
        self.error: Optional[str] = None
        self.success_message = ""
        self.intent = PendingIntent()
        self.posts_by_member: Dict[str, List[Post]] = {}
        self.selected_member: Optional[str] = None

    # Loading and searching

    def load(self) -> bool:
        try:
            groups = self.gateway.fetch_groups()
        except GatewayError as exc:
            self._fail(exc)
            self.loading = False
            return False
        self.groups = list(groups)
        self.filtered_groups = filter_groups(self.groups, self.search_query)
        self.loading = False
        return True

    def search(self, term: str) -> List[Group]:
        self.search_query = term.lower()
        self.filtered_groups = filter_groups(self.groups, self.search_query)
        return self.filtered_groups

    def find_group(self, group_id: str) -> Optional[Group]:
        return next((group for group in self.groups if group.id == group_id), None)

    # Popup workflow

    def open_popup(self, group_id: str, kind: Popup = Popup.ADD_MEMBER) -> None:
        self._require(self._capability_for(kind))
        self.intent = PendingIntent(group_id=group_id, popup=kind)

    def set_input(self, text: str) -> None:
        self.intent.input_value = text

    def confirm(self) -> bool:
        """Submit the open popup's input."""
        intent = self.intent
        if intent.popup is None or intent.group_id is None:
            return False
        if intent.popup is Popup.ADD_MEMBER:
            return self.add_member(intent.group_id, intent.input_value)
        return self.add_permission(intent.group_id, intent.input_value)

    def cancel(self) -> None:
        self.intent = PendingIntent()

    def _close_popup(self) -> None:
        self.intent.group_id = None
        self.intent.popup = None
        self.intent.input_value = ""

    # Writes

    def add_member(self, group_id: str, value: str) -> bool:
        """Add ``value`` to the group's users."""
        self._require(self.capabilities.manage_users)
        return self._add(group_id, value, MembershipField.USERS, self.gateway.add_member)

    def add_permission(self, group_id: str, value: str) -> bool:
        """Add ``value`` to the group's members."""
        self._require(self.capabilities.manage_members)
        return self._add(group_id, value, MembershipField.MEMBERS, self.gateway.add_permission)

    def request_delete_user(self, group_id: str, user: str) -> None:
        self._require(self.capabilities.manage_users)
        self.intent = PendingIntent(delete=PendingDelete(MembershipField.USERS, group_id, user))

    def request_delete_member(self, group_id: str, member: str) -> None:
        self._require(self.capabilities.manage_members)
        self.intent = PendingIntent(delete=PendingDelete(MembershipField.MEMBERS, group_id, member))

    def confirm_delete(self) -> bool:
        pending = self.intent.delete
        if pending is None:
            return False
        self.intent = PendingIntent()
        if pending.field is MembershipField.USERS:
            send = self.gateway.delete_user
        else:
            send = self.gateway.delete_member
        try:
            send(pending.group_id, pending.value)
        except GatewayError as exc:
            self._fail(exc)
            return False
        self._apply(pending.group_id, lambda group: _without(group, pending.field, pending.value))
        return True

    # Posts

    def select_member(self, member: str) -> None:
        self.selected_member = member
        if self.capabilities.show_posts:
            self.load_posts_for(member)

    def load_posts_for(self, member: str) -> bool:
        self._require(self.capabilities.show_posts)
        try:
            posts = self.gateway.fetch_member_posts(member)
        except GatewayError as exc:
            self._fail(exc)
            return False
        self.posts_by_member[member] = posts
        return True

    # Rendering

    def render(self) -> str:
        if self.loading:
            return "Loading..."
        if self.error:
            return f"Error: {self.error}"

        lines = ["Group List"]
        if self.search_query:
            lines.append(f"Search: {self.search_query}")
        if self.success_message:
            lines.append(self.success_message)
        for group in self.filtered_groups:
            lines.extend(self._render_group(group))
        lines.extend(self._render_intent())
        if self.capabilities.show_posts and self.selected_member in self.posts_by_member:
            lines.extend(self._render_posts(self.selected_member))
        return "\n".join(lines)

    def _render_group(self, group: Group) -> List[str]:
        lines = [
            f"Name: {group.name}",
            f"Created: {format_date(group.created)}",
        ]
        if self.capabilities.manage_members:
            lines.append("Members:")
            lines.extend(f"  {member}" for member in group.members or ["No members"])
        if self.capabilities.manage_users:
            lines.append("Users:")
            lines.extend(f"  {user}" for user in group.users or ["No users"])
        return lines

    def _render_intent(self) -> List[str]:
        intent = self.intent
        if intent.popup is not None:
            group = self.find_group(intent.group_id)
            name = group.name if group else intent.group_id
            return [f"Input for {name}: {intent.input_value}", "[Confirm] [Cancel]"]
        if intent.delete is not None:
            pending = intent.delete
            group = self.find_group(pending.group_id)
            name = group.name if group else pending.group_id
            label = "user" if pending.field is MembershipField.USERS else "member"
            return [f"Delete {label} {pending.value} from {name}?", "[Confirm] [Cancel]"]
        return []

    def _render_posts(self, member: str) -> List[str]:
        posts = self.posts_by_member[member]
        lines = [f"Posts for {member}:"]
        if not posts:
            return lines + ["  No posts"]
        for post in posts:
            categories = post.categories
            if isinstance(categories, list):
                categories = ", ".join(categories)
            lines.append(f"  {post.id}: {categories or 'Uncategorized'}")
        return lines

    # Internals

    def _add(
        self,
        group_id: str,
        value: str,
        field: MembershipField,
        send: Callable[[str, str], str],
    ) -> bool:
        try:
            send(group_id, value)
        except GatewayError as exc:
            self._fail(exc)
            return False
        # A group id we do not hold simply matches nothing here
        self._apply(group_id, lambda group: _with(group, field, value))
        group = self.find_group(group_id)
        self.success_message = f"Success! Input for group {group.name if group else group_id}: {value}"
        self._close_popup()
        return True

    def _apply(self, group_id: str, change: Callable[[Group], Group]) -> None:
        """Replace the matching group in both lists."""
        self.groups = [change(group) if group.id == group_id else group for group in self.groups]
        self.filtered_groups = [
            change(group) if group.id == group_id else group for group in self.filtered_groups
        ]

    def _fail(self, exc: GatewayError) -> None:
        logger.warning(f"Panel action failed: {exc.message}")
        self.error = exc.message

    def _capability_for(self, kind: Popup) -> bool:
        if kind is Popup.ADD_MEMBER:
            return self.capabilities.manage_users
        return self.capabilities.manage_members

    @staticmethod
    def _require(enabled: bool) -> None:
        if not enabled:
            raise CapabilityDisabledError("This panel does not offer that action")


def _with(group: Group, field: MembershipField, value: str) -> Group:
    values = getattr(group, field.value)
    if value in values:
        return group
    return group.model_copy(update={field.value: values + [value]})


def _without(group: Group, field: MembershipField, value: str) -> Group:
    values = getattr(group, field.value)
    return group.model_copy(update={field.value: [item for item in values if item != value]})

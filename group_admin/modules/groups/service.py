import logging
from typing import Any, List, Optional

from supabase import Client

from group_admin.config import settings
from group_admin.core.errors import DocumentStoreError, describe_exception
from group_admin.modules.groups.models import REMOVE_FUNCTION, UNION_FUNCTION
from group_admin.modules.groups.schemas import Group, MembershipField

logger = logging.getLogger(__name__)

GROUP_COLUMNS = "id, name, users, members, created"


class GroupService:
    """One database call per operation; set semantics live in the database functions."""

    def __init__(self, supabase: Client, table: Optional[str] = None):
        self.supabase = supabase
        self.table = table or settings.groups_table

    def list_groups(self) -> List[Group]:
        """Read every group"""
        try:
            result = self.supabase.table(self.table)\
                .select(GROUP_COLUMNS)\
                .execute()
            return [Group(**group) for group in (result.data or [])]
        except Exception as e:
            raise self._failure("fetching groups", e)

    def add_user(self, group_id: Optional[Any], user: Optional[Any]) -> None:
        """Union a value into the group's users"""
        self._update_set(UNION_FUNCTION, group_id, MembershipField.USERS, user, "adding user")

    def add_member(self, group_id: Optional[Any], member: Optional[Any]) -> None:
        """Union a value into the group's members"""
        self._update_set(UNION_FUNCTION, group_id, MembershipField.MEMBERS, member, "adding member")

    def remove_user(self, group_id: Optional[Any], user: Optional[Any]) -> None:
        """Remove a value from the group's users; absent values are a no-op"""
        self._update_set(REMOVE_FUNCTION, group_id, MembershipField.USERS, user, "deleting user")

    def remove_member(self, group_id: Optional[Any], member: Optional[Any]) -> None:
        """Remove a value from the group's members; absent values are a no-op"""
        self._update_set(REMOVE_FUNCTION, group_id, MembershipField.MEMBERS, member, "deleting member")

    def _update_set(
        self,
        function: str,
        group_id: Optional[Any],
        field: MembershipField,
        value: Optional[Any],
        operation: str
    ) -> None:
        try:
            self.supabase.rpc(function, {
                "p_table": self.table,
                "p_group_id": group_id,
                "p_field": field.value,
                "p_value": value
            }).execute()
        except Exception as e:
            raise self._failure(operation, e)

    @staticmethod
    def _failure(operation: str, exc: Exception) -> DocumentStoreError:
        message = describe_exception(exc)
        logger.error(f"Error {operation}: {message}")
        return DocumentStoreError(message)

import logging
from typing import List, Optional

from supabase import Client

from group_admin.config import settings
from group_admin.core.errors import DocumentStoreError, describe_exception
from group_admin.modules.posts.schemas import Post

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, supabase: Client, table: Optional[str] = None):
        self.supabase = supabase
        self.table = table or settings.posts_table

    def list_member_posts(self, member: Optional[str]) -> List[Post]:
        """Posts whose member column equals the given member id.

        A missing member is sent as-is; PostgREST reads it as the literal
        text ``None`` and the lookup matches nothing.
        """
        try:
            result = self.supabase.table(self.table)\
                .select("id, categories")\
                .eq("member", member)\
                .execute()
            return [Post(**post) for post in (result.data or [])]
        except Exception as e:
            message = describe_exception(e)
            logger.error(f"Error fetching posts for member {member}: {message}")
            raise DocumentStoreError(message)

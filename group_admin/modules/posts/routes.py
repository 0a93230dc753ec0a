from fastapi import APIRouter, Depends
from group_admin.database.supabase_client import get_supabase
from group_admin.modules.groups.schemas import ErrorResponse
from group_admin.modules.posts.schemas import Post
from group_admin.modules.posts.service import PostService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/api", tags=["posts"], responses={500: {"model": ErrorResponse}})


def get_post_service(supabase: Client = Depends(get_supabase)) -> PostService:
    return PostService(supabase)


@router.get("/getmemberposts/getmemberposts", response_model=List[Post])
async def get_member_posts(
    member: Optional[str] = None,
    service: PostService = Depends(get_post_service)
):
    """Posts for one member"""
    return service.list_member_posts(member)

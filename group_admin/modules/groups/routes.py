from fastapi import APIRouter, Depends
from group_admin.database.supabase_client import get_supabase
from group_admin.modules.groups.schemas import (
    Group, AddMemberRequest, MemberRequest, DeleteUserRequest,
    MessageResponse, ErrorResponse
)
from group_admin.modules.groups.service import GroupService
from supabase import Client
from typing import List, Optional

# Paths match the ones the panel already calls
router = APIRouter(prefix="/api", tags=["groups"], responses={500: {"model": ErrorResponse}})


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


@router.get("/datatwo/datatwo", response_model=List[Group])
async def list_groups(service: GroupService = Depends(get_group_service)):
    """List every group with users/members normalized to lists"""
    return service.list_groups()


@router.post("/addmember/addmember", response_model=MessageResponse)
async def add_member(
    body: Optional[AddMemberRequest] = None,
    service: GroupService = Depends(get_group_service)
):
    """Add a value to the group's users"""
    body = body or AddMemberRequest()
    service.add_user(body.group_id, body.new_member)
    return MessageResponse(message="Member added successfully")


@router.post("/permcloud/permcloud", response_model=MessageResponse)
async def add_permission(
    body: Optional[MemberRequest] = None,
    service: GroupService = Depends(get_group_service)
):
    """Add a value to the group's members"""
    body = body or MemberRequest()
    service.add_member(body.group_id, body.member)
    return MessageResponse(message="Member added successfully")


@router.post("/deletemember/deletemember", response_model=MessageResponse)
async def delete_user(
    body: Optional[DeleteUserRequest] = None,
    service: GroupService = Depends(get_group_service)
):
    """Remove a value from the group's users"""
    body = body or DeleteUserRequest()
    service.remove_user(body.group_id, body.user)
    return MessageResponse(message="User removed successfully")


@router.post("/deletemember2/deletemember2", response_model=MessageResponse)
async def delete_member(
    body: Optional[MemberRequest] = None,
    service: GroupService = Depends(get_group_service)
):
    """Remove a value from the group's members"""
    body = body or MemberRequest()
    service.remove_member(body.group_id, body.member)
    return MessageResponse(message="Member removed successfully")

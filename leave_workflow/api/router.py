from fastapi import APIRouter

from leave_workflow.api.leave_requests import leave_requests_router

api_router = APIRouter()
api_router.include_router(leave_requests_router)

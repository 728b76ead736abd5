"""Expert profile endpoints"""
from fastapi import APIRouter, Depends, status

from zenovia.api.deps import get_context
from zenovia.context import AppContext
from zenovia.errors import APIError

router = APIRouter(prefix="/api/experts", tags=["experts"])


@router.get("")
async def list_experts(context: AppContext = Depends(get_context)):
    """List active experts, by name"""
    experts = await context.experts.list_active()
    return {
        "success": True,
        "count": len(experts),
        "experts": [expert.model_dump(mode="json", by_alias=True) for expert in experts],
    }


@router.get("/{expert_id}")
async def get_expert(expert_id: str, context: AppContext = Depends(get_context)):
    expert = await context.experts.find_by_id(expert_id)
    if not expert:
        raise APIError(status.HTTP_404_NOT_FOUND, f"Expert {expert_id} not found")
    return {"success": True, "expert": expert.model_dump(mode="json", by_alias=True)}

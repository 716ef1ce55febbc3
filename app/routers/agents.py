from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from app.models import User
from app.routers.auth import require_admin, require_authenticated
from app.schemas.agents import AgentCreate, AgentResponse, AgentUpdate
from app.services.storage import Storage, get_storage

router = APIRouter()

@router.get("", response_model=List[AgentResponse])
@router.get("/", response_model=List[AgentResponse])
async def list_agents(
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """List all recruitment agents"""
    return storage.get_agents()

@router.get("/{agent_id}", response_model=AgentResponse)
async def get_agent(
    agent_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Get a specific agent"""
    agent = storage.get_agent_by_id(agent_id)
    if not agent:
        raise HTTPException(status_code=404, detail="Agent not found")
    return agent

@router.post("", response_model=AgentResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=AgentResponse, status_code=status.HTTP_201_CREATED)
async def create_agent(
    agent_data: AgentCreate,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Create a new agent (admin only)"""
    return storage.create_agent(agent_data.model_dump())

@router.put("/{agent_id}", response_model=AgentResponse)
async def update_agent(
    agent_id: int,
    agent_data: AgentUpdate,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Update an agent (admin only)"""
    agent = storage.update_agent(agent_id, agent_data.model_dump(exclude_unset=True))
    if not agent:
        raise HTTPException(status_code=404, detail="Agent not found")
    return agent

@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_agent(
    agent_id: int,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Delete an agent (admin only)"""
    if not storage.delete_agent(agent_id):
        raise HTTPException(status_code=404, detail="Agent not found")
    return None

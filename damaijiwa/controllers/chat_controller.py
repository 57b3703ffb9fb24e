from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from damaijiwa.core.database import get_db
from damaijiwa.schemas.base import SuccessResponse
from damaijiwa.schemas.chat import (
    Category,
    CATEGORY_DESCRIPTIONS,
    AppendTurnRequest,
    SendMessageRequest,
    HistoryResponse,
    ReplyResponse,
    CategoryInfo,
    CategoryListResponse,
)
from damaijiwa.schemas.user import UserResponse
from damaijiwa.services.chat_service import chat_service
from damaijiwa.services.session_service import get_current_user
from damaijiwa.utils.response import success_response

router = APIRouter(tags=["chat"])

@router.get("/categories", response_model=CategoryListResponse)
async def list_categories():
    return CategoryListResponse(categories=[
        CategoryInfo(id=category, description=CATEGORY_DESCRIPTIONS[category])
        for category in Category
    ])

@router.get("/chat/{category}", response_model=HistoryResponse)
async def get_chat_history(
    category: Category,
    current_user: UserResponse = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    history = chat_service.get_chat_history(db, current_user.id, category)
    return HistoryResponse(
        history=history,
        prompt_login=chat_service.should_prompt_login(db, current_user, category),
    )

@router.post("/chat/{category}", response_model=SuccessResponse)
async def append_turn(
    category: Category,
    turn: AppendTurnRequest,
    current_user: UserResponse = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Store one turn as-is, without calling the model."""
    chat_service.save_turn(db, current_user.id, category, turn.role, turn.text)
    return success_response()

@router.post("/chat/{category}/start", response_model=HistoryResponse)
async def start_journey(
    category: Category,
    current_user: UserResponse = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    history = await chat_service.start_journey(db, current_user.id, category)
    return HistoryResponse(
        history=history,
        prompt_login=chat_service.should_prompt_login(db, current_user, category),
    )

@router.post("/chat/{category}/message", response_model=ReplyResponse)
async def send_message(
    category: Category,
    message: SendMessageRequest,
    current_user: UserResponse = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    reply = await chat_service.send_message(db, current_user.id, category, message.text)
    history = chat_service.get_chat_history(db, current_user.id, category)
    return ReplyResponse(
        reply=reply,
        prompt_login=chat_service.should_prompt_login(db, current_user, category),
    )

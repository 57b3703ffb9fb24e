from enum import Enum
from typing import List, Literal
from pydantic import AliasChoices, BaseModel, Field
from .base import BaseSchema

class Category(str, Enum):
    TRAUMA = "Trauma"
    EKONOMI = "Ekonomi"
    SOSIAL = "Sosial"
    PERCINTAAN = "Percintaan"
    KELUARGA = "Keluarga"

CATEGORY_DESCRIPTIONS = {
    Category.TRAUMA: "Berdamai dengan masa lalu yang membekas.",
    Category.EKONOMI: "Menemukan ketenangan di tengah tantangan finansial.",
    Category.SOSIAL: "Membangun koneksi yang sehat dengan lingkungan.",
    Category.PERCINTAAN: "Memahami hati dan dinamika hubungan asmara.",
    Category.KELUARGA: "Menyembuhkan akar dan memperkuat ikatan rumah.",
}

Role = Literal["user", "model"]

class ChatTurn(BaseSchema):
    role: Role
    text: str

class AppendTurnRequest(BaseModel):
    role: Role = Field(..., description="'user' or 'model'")
    text: str = Field(..., description="Isi pesan")

class SendMessageRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Pesan dari user")

class HistoryResponse(BaseModel):
    history: List[ChatTurn]
    prompt_login: bool = Field(
        False,
        validation_alias=AliasChoices("prompt_login", "promptLogin"),
        serialization_alias="promptLogin",
    )

class ReplyResponse(BaseModel):
    reply: str
    prompt_login: bool = Field(
        False,
        validation_alias=AliasChoices("prompt_login", "promptLogin"),
        serialization_alias="promptLogin",
    )

class CategoryInfo(BaseModel):
    id: Category
    description: str

class CategoryListResponse(BaseModel):
    categories: List[CategoryInfo]

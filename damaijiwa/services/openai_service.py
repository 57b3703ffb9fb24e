import openai
from typing import List, Optional, Sequence
from damaijiwa.core.config import settings
from damaijiwa.core.exceptions import UpstreamError
from damaijiwa.schemas.chat import Category, ChatTurn
import logging

logger = logging.getLogger("openai_service")

EMPTY_REPLY = "Maaf, saya sedang merenung sejenak. Bisa ulangi lagi?"

PERSONA_PROMPT = """Anda adalah seorang psikolog profesional yang hangat, empati, dan fokus pada problem solving.
Anda sedang membantu user dalam kategori: {category}.

Tujuan Anda:
1. Membantu user merasa didengar dan divalidasi.
2. Menggali akar masalah dengan pertanyaan yang lembut namun tepat sasaran.
3. Memberikan langkah-langkah praktis (problem solving) untuk berdamai dengan situasi tersebut.
4. Gunakan gaya bahasa yang santai, "casual friendly", seperti teman yang bijak namun tetap profesional.
5. Hindari jawaban yang terlalu panjang. Berikan satu atau dua paragraf singkat dan satu pertanyaan reflektif untuk melanjutkan "permainan" percakapan ini.
6. Gunakan analogi yang menenangkan jika perlu.

Konteks: Ini adalah web interaktif seperti game. Jadikan percakapan ini seperti sebuah perjalanan (journey) menuju kedamaian diri."""

# Turn roles are stored the way the client names them
ROLE_MAP = {"user": "user", "model": "assistant"}

class OpenAIService:
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, base_url: Optional[str] = None):
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_model
        self.base_url = base_url or settings.openai_base_url
        self._client: Optional[openai.AsyncOpenAI] = None

    @property
    def client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise UpstreamError("OPENAI_API_KEY not found in environment variables")
            self._client = openai.AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def build_system_prompt(self, category: Category) -> str:
        return PERSONA_PROMPT.format(category=Category(category).value)

    def build_messages(self, category: Category, history: Sequence[ChatTurn], user_message: str) -> List[dict]:
        messages = [{"role": "system", "content": self.build_system_prompt(category)}]
        for turn in history:
            messages.append({"role": ROLE_MAP[turn.role], "content": turn.text})
        messages.append({"role": "user", "content": user_message})
        return messages

    async def generate_response(
        self,
        category: Category,
        history: Sequence[ChatTurn],
        user_message: str,
    ) -> str:
        """
        Ask the model for the psychologist's next turn.

        Raises UpstreamError when the API call fails; callers decide on the fallback.
        """
        messages = self.build_messages(category, history, user_message)
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=0.7,
                top_p=0.9,
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI API Error: {e}")
            raise UpstreamError("Response generator failed", str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            logger.warning("Empty completion from model, using placeholder reply")
            return EMPTY_REPLY
        return content.strip()

openai_service = OpenAIService()

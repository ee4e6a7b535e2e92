"""AI Client 도메인 서비스 레이어입니다. OpenAI 호환 API 호출을 한 곳에 모읍니다."""

import logging
from typing import Optional, List, Dict, Any
from trainer_planner.config import settings

logger = logging.getLogger(__name__)


class UpstreamError(RuntimeError):
    """외부 API가 실패 응답을 주었거나 응답 형식이 잘못되었을 때 발생합니다."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AIClient:
    """생성형 AI 모델 클라이언트 (OpenAI 호환 API 직접 호출)

    유료 API이므로 자동 재시도는 하지 않으며, 단일 타임아웃을 적용하고
    상위 API의 상태 코드/메시지를 그대로 UpstreamError로 전달한다.
    """

    def __init__(self, model_name: Optional[str] = None, user_id: Optional[str] = None):
        self.model_name = model_name or settings.AI_MODEL
        self.user_id = user_id or "system"
        self._client = None

    def _get_client(self):
        if self._client is None:
            try:
                from openai import OpenAI
            except ImportError:
                raise RuntimeError("openai is not installed.")
            self._client = OpenAI(
                api_key=settings.OPENAI_API_KEY,
                base_url=settings.AI_BASE_URL,
                timeout=settings.AI_TIMEOUT_SECONDS,
                max_retries=0,
            )
        return self._client

    def _normalize_content(self, content: Any) -> str:
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            chunks: List[str] = []
            for part in content:
                if isinstance(part, dict) and part.get("type") == "text":
                    chunks.append(str(part.get("text", "")))
            return "".join(chunks)
        return str(content or "")

    def _complete(self, messages: List[Dict[str, Any]], max_tokens: int) -> str:
        try:
            response = self._get_client().chat.completions.create(
                model=self.model_name,
                messages=messages,
                max_tokens=max_tokens,
                user=self.user_id,
            )
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            logger.warning("[ai] model call failed: model=%s status=%s error=%s", self.model_name, status_code, exc)
            raise UpstreamError(f"AI API error: {status_code or '-'} {exc}", status_code=status_code) from exc

        if not response.choices:
            raise UpstreamError("AI API returned no choices")
        message = response.choices[0].message
        text = self._normalize_content(message.content if message else "")
        if not text.strip():
            raise UpstreamError("AI API returned an empty response")
        return text

    def invoke(self, prompt: str, system_prompt: Optional[str] = None, max_tokens: int = 2048) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return self._complete(messages, max_tokens)

    def invoke_with_attachment(
        self,
        prompt: str,
        data_base64: str,
        mime_type: str,
        max_tokens: int = 1024,
    ) -> str:
        data_url = f"data:{mime_type};base64,{data_base64}"
        if mime_type == "application/pdf":
            attachment = {"type": "file", "file": {"filename": "receipt.pdf", "file_data": data_url}}
        else:
            attachment = {"type": "image_url", "image_url": {"url": data_url}}
        messages = [{
            "role": "user",
            "content": [attachment, {"type": "text", "text": prompt}],
        }]
        return self._complete(messages, max_tokens)

    @classmethod
    def get_client(cls, purpose: str, user_id: Optional[str] = None) -> "AIClient":
        return cls(model_name=settings.ai_model_for(purpose), user_id=user_id)

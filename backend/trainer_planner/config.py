"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./trainer_planner.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["*"]

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Billing
    DEFAULT_VAT_RATE: float = 19.0
    INVOICE_NUMBER_PREFIX: str = "RG"
    INVOICE_PAYMENT_DAYS: int = 14
    SMALL_BUSINESS_NOTICE: str = "Gemäß §19 UStG wird keine Umsatzsteuer berechnet."

    # Scheduling
    DEFAULT_SLOT_MINUTES: int = 60
    DEFAULT_TIME_SLOTS: List[str] = [
        "08:00", "09:00", "10:00", "11:00", "14:00",
        "15:00", "16:00", "17:00", "18:00", "19:00",
    ]

    # AI Model Settings (OpenAI 호환 API)
    OPENAI_API_KEY: str = "your_openai_api_key"
    AI_BASE_URL: str = "https://api.openai.com/v1"
    AI_MODEL: str = "gpt-4o"
    # 영수증 인식은 이미지/PDF 입력을 지원하는 모델을 사용한다.
    AI_VISION_MODEL: str = "gpt-4o"
    AI_TIMEOUT_SECONDS: float = 60.0
    AI_TEMPLATE_MAX_TOKENS: int = 4096
    AI_RECEIPT_MAX_TOKENS: int = 1024
    AI_FEATURES_ENABLED: bool = True

    # E-mail (Resend 호환 API). 키가 비어 있으면 발송하지 않고 로그만 남긴다.
    RESEND_API_KEY: str = ""
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_FROM: str = "Tennis Trainer Planner <noreply@tennistrainer-app.de>"
    EMAIL_TIMEOUT_SECONDS: float = 10.0

    def ai_model_for(self, purpose: str) -> str:
        if purpose == "receipt":
            return str(self.AI_VISION_MODEL or "").strip() or self.AI_MODEL
        return self.AI_MODEL

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()

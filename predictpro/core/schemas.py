# predictpro/core/schemas.py
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

DEFAULT_AI_DISCLAIMER = "AI predictions are based on pattern analysis and are not guaranteed. Play responsibly."

class MultiplierPrediction(BaseModel):
    targetCashout: str
    riskLevel: Literal["Low", "Medium", "High"]
    confidence: int = Field(ge=0, le=100)

class GamePredictionOutput(BaseModel):
    predictionData: MultiplierPrediction
    disclaimer: str = DEFAULT_AI_DISCLAIMER

class VipSlipOutput(BaseModel):
    market: str
    prediction: str
    confidence: int = Field(ge=50, le=95)
    analysisSummary: str
    disclaimer: str = DEFAULT_AI_DISCLAIMER

class ChatTurn(BaseModel):
    is_user: bool
    text: str

class SupportRequest(BaseModel):
    chat_type: Literal["system", "assistant", "manager"]
    message: str = Field(min_length=1)
    history: List[ChatTurn] = []
    user_id: Optional[int] = None

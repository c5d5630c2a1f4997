from pydantic import BaseModel
from datetime import datetime

class HealthResponse(BaseModel):
    status: str
    timestamp: datetime

class CheckoutSessionResponse(BaseModel):
    url: str

class ErrorResponse(BaseModel):
    error: str

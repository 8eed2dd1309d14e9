from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class NotificationRead(BaseModel):
    id: int
    user_id: str
    title_ar: str
    title_en: Optional[str] = None
    body_ar: Optional[str] = None
    body_en: Optional[str] = None
    type: str
    url: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UnreadCounts(BaseModel):
    count: int = 0
    home: int = 0
    groceries: int = 0
    logistics: int = 0
    housekeeping: int = 0


# ---------- Web Push subscription (browser PushSubscription.toJSON()) ----------
class PushKeys(BaseModel):
    p256dh: str = Field(min_length=1)
    auth: str = Field(min_length=1)

class PushSubscriptionIn(BaseModel):
    endpoint: str = Field(min_length=1)
    keys: PushKeys
    expirationTime: Optional[float] = None

class PushUnsubscribeIn(BaseModel):
    endpoint: str = Field(min_length=1)

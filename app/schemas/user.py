from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.schemas.property import CamelModel


class UserResponse(CamelModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    profile_image_url: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserQueryResponse(BaseModel):
    user: Optional[UserResponse] = None
    users: Optional[List[UserResponse]] = None
    count: Optional[int] = None


class PreferencesResponse(BaseModel):
    preferences: Optional[Dict[str, Any]] = None
    message: Optional[str] = None


class PreferencesUpdate(BaseModel):
    # Validated by hand so a missing/non-object value is a 400 with a clear message
    preferences: Optional[Any] = None


class SearchCreate(CamelModel):
    search_criteria: Optional[Dict[str, Any]] = None
    search_name: Optional[str] = None


class SearchResponse(CamelModel):
    id: str
    user_id: str
    search_criteria: Dict[str, Any]
    search_name: Optional[str] = None
    is_saved: bool = False
    created_at: Optional[datetime] = None


class SearchCreatedResponse(BaseModel):
    search: SearchResponse
    message: str


class RecentSearch(BaseModel):
    id: str
    search_criteria: Dict[str, Any]
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SearchListResponse(BaseModel):
    searches: List[RecentSearch]
    message: str


# ---------- Clerk webhook payloads ----------
class ClerkEmailAddress(BaseModel):
    email_address: str


class ClerkPhoneNumber(BaseModel):
    phone_number: str


class ClerkUserData(BaseModel):
    id: str
    email_addresses: List[ClerkEmailAddress] = []
    phone_numbers: List[ClerkPhoneNumber] = []
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def primary_email(self) -> Optional[str]:
        return self.email_addresses[0].email_address if self.email_addresses else None

    @property
    def primary_phone(self) -> Optional[str]:
        return self.phone_numbers[0].phone_number if self.phone_numbers else None


class ClerkEvent(BaseModel):
    type: str
    data: Dict[str, Any]

    model_config = ConfigDict(extra="ignore")

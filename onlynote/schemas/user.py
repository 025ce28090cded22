from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional


# Properties to return to client
class ProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: EmailStr
    full_name: Optional[str] = None
    created_at: Optional[str] = None

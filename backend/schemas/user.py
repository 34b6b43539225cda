from pydantic import BaseModel, EmailStr
from typing import Optional

# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Output schema for user profile details
class UserResponse(UserBase):
    id: int
    role: str
    full_name: Optional[str] = None

    class Config:
        from_attributes = True

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

# Password change from the profile page
class ChangePassword(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str

# Recovery request, answered the same way whether or not the email exists
class ForgotPassword(BaseModel):
    email: EmailStr

# Recovery link submission
class ResetPassword(BaseModel):
    token: str
    new_password: str
    confirm_password: str

class MessageResponse(BaseModel):
    message: str

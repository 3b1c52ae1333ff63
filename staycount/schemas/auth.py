"""Auth schemas."""
from pydantic import BaseModel, EmailStr, model_validator

PASSWORD_MIN_LENGTH = 8


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str = ""
    full_name: str | None = None

    @model_validator(mode="after")
    def passwords_valid(self):
        if len(self.password) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        if self.confirm_password and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str | None = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse

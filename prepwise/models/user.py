from pydantic import BaseModel

class CurrentUser(BaseModel):
    """Identity resolved from the bearer token"""
    user_id: str
    is_recruiter: bool = False

# pitchthesis/api/v1/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# --- Auth ---
class RegisterReq(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

class LoginReq(BaseModel):
    username: str
    password: str

class TokenResp(BaseModel):
    token: str

class User(BaseModel):
    id: int
    username: str

# --- Pipeline ---
class UploadResp(BaseModel):
    message: str
    text: str
    download_url: str = Field(alias="downloadUrl")

    model_config = ConfigDict(populate_by_name=True)

class AnalyzeReq(BaseModel):
    # optional so an empty body gets our 400, not a 422
    text: Optional[str] = None

class AnalyzeResp(BaseModel):
    download_url: str = Field(alias="downloadUrl")
    report_id: int = Field(alias="reportId")

    model_config = ConfigDict(populate_by_name=True)

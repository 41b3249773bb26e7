from pydantic import BaseModel
from pydantic_ai import BinaryContent


class AnalysisRequest(BaseModel):
    image: BinaryContent
    caller_id: str = "anonymous"

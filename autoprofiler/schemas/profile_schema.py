from pydantic import BaseModel
from typing import List


class ProfileRequest(BaseModel):
    query: str
    tables: List[str] = []

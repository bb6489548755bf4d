from pydantic import BaseModel


class ConvertResult(BaseModel):
    result: str


class ErrorBody(BaseModel):
    error: str

from pydantic import BaseModel, ConfigDict, Field


class ParsePdfResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    file_name: str = Field(alias="fileName")

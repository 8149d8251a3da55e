from pydantic import BaseModel, ConfigDict, Field


class ParsePdfRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pdf_base64: str = Field(default="", alias="pdfBase64")
    file_name: str = Field(default="", alias="fileName")

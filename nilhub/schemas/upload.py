# nilhub/schemas/upload.py
from sqlmodel import SQLModel


class UploadedImage(SQLModel):
    """Result of a successful upload to the image host."""

    url: str
    asset_id: str
    content_type: str
    size: int

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FileCreateRequest(BaseModel):
    """Metadata for a file already pinned through the upload proxy.

    Every field is optional at the schema level; presence is checked by the
    service so that missing fields answer 400 with a readable message.
    """

    model_config = ConfigDict(extra="ignore")

    fileName: Optional[str] = Field(default=None, examples=["report.pdf"])
    cid: Optional[str] = Field(default=None, description="Content identifier returned by WebHash")
    size: Optional[Union[int, float, str]] = Field(default=None, examples=["2048"])
    mimeType: Optional[str] = Field(default=None, examples=["application/pdf"])
    walletAddress: Optional[str] = Field(default=None)

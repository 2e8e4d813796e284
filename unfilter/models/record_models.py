from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TranslationRecord(BaseModel):
    """One Airtable row; aliases are the table's column names."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    phrase: str = Field(..., alias="Phrase")
    translation: str = Field(..., alias="Translation")
    model_name: str = Field(..., alias="Model")
    source: str = Field("webapp", alias="Source")

    @field_validator("phrase", "translation", "model_name")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("必填字段不能为空")
        return v.strip()

    def to_fields(self) -> dict:
        return self.model_dump(by_alias=True)

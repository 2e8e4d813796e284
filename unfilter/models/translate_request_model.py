"""
/**
 * @file unfilter/models/translate_request_model.py
 * @description 翻译请求与响应模型（Pydantic）。
 */
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, StrictStr, field_validator


class TranslateRequest(BaseModel):
    phrase: StrictStr

    @field_validator("phrase")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("phrase must not be empty")
        return v


class StoreOutcome(BaseModel):
    ok: bool
    detail: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TranslateResponse(BaseModel):
    translation: str
    model: str
    store: StoreOutcome

    def to_payload(self) -> Dict[str, Any]:
        return {"translation": self.translation, "model": self.model, "store": self.store.to_payload()}

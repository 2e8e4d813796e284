"""
/**
 * @file unfilter/controllers/health_controller.py
 * @description 健康检查控制器。
 */
"""

from fastapi import APIRouter


router = APIRouter()


@router.get("/health")
def health():
    from unfilter.config import load_settings

    settings = load_settings()

    # Only presence is reported, never the values
    present = settings.presence()
    api_keys_status = {
        "openai": present["OPENAI_API_KEY"],
        "airtable": present["AIRTABLE_TOKEN"],
    }
    airtable_status = {
        "base_id": present["AIRTABLE_BASE_ID"],
        "table_id": present["AIRTABLE_TABLE_ID"],
    }

    is_healthy = all(api_keys_status.values()) and all(airtable_status.values())

    return {
        "status": "ok" if is_healthy else "degraded",
        "checks": {
            "api_keys": api_keys_status,
            "airtable": airtable_status,
        },
    }

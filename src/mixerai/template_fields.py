"""
Content template field storage.

The ``content_templates.fields`` column holds
``{"inputFields": [...], "outputFields": [...]}``; the API exposes both
lists as top-level template properties.
"""

from typing import Any, Dict, List, Optional


def fields_for_storage(input_fields: Optional[List[Dict[str, Any]]],
                       output_fields: Optional[List[Dict[str, Any]]]) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "inputFields": list(input_fields or []),
        "outputFields": list(output_fields or []),
    }


def template_for_response(row: Dict[str, Any]) -> Dict[str, Any]:
    """Replace the stored ``fields`` column with inputFields/outputFields."""
    template = {k: v for k, v in row.items() if k != "fields"}
    fields = row.get("fields") or {}
    if not isinstance(fields, dict):
        fields = {}
    template["inputFields"] = fields.get("inputFields") or []
    template["outputFields"] = fields.get("outputFields") or []
    return template


def field_names(fields: Optional[List[Dict[str, Any]]]) -> List[str]:
    return [f["name"] for f in (fields or []) if isinstance(f, dict) and f.get("name")]

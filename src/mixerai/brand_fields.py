"""
Brand column derivations and agency list shaping.
"""

import json
import sys
from typing import Any, Dict, Iterable, List, Optional

from mixerai.utils.url_utils import extract_clean_domain

SUMMARY_MAX_CHARS = 250

AGENCY_PRIORITY = {"High": 1, "Medium": 2, "Low": 3}
UNRANKED_PRIORITY = sys.maxsize


def agency_priority_number(priority: Optional[str]) -> int:
    return AGENCY_PRIORITY.get(priority, UNRANKED_PRIORITY)


def shape_selected_agencies(agencies: Iterable[Optional[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """
    Agency rows -> response items with numeric priority, sorted by
    priority then name. Missing (None) agencies are dropped.
    """
    shaped = [
        {
            "id": agency["id"],
            "name": agency.get("name"),
            "description": agency.get("description"),
            "country_code": agency.get("country_code"),
            "priority": agency_priority_number(agency.get("priority")),
        }
        for agency in agencies
        if agency
    ]
    shaped.sort(key=lambda a: (a["priority"], a["name"] or ""))
    return shaped


def summarize_identity(brand_identity: str) -> str:
    summary = brand_identity[:SUMMARY_MAX_CHARS]
    if len(brand_identity) > SUMMARY_MAX_CHARS:
        summary += "..."
    return summary


def format_guardrails(guardrails: Any) -> Any:
    """
    Lists (or strings holding a JSON array) become "- item" lines.
    Anything else is stored unchanged.
    """
    items = None
    if isinstance(guardrails, list):
        items = guardrails
    elif isinstance(guardrails, str):
        stripped = guardrails.strip()
        if stripped.startswith("[") and stripped.endswith("]"):
            try:
                parsed = json.loads(stripped)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                items = parsed

    if items is None:
        return guardrails
    return "\n".join(f"- {item}" for item in items)


BRAND_TEXT_FIELDS = (
    "name",
    "country",
    "language",
    "brand_identity",
    "tone_of_voice",
    "brand_color",
    "approved_content_types",
)


def build_brand_changes(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Translate the fields a client sent into brand column updates.

    ``fields`` holds only keys the client actually provided (explicit
    nulls included). Derived columns follow their sources:
    ``normalized_website_domain`` from ``website_url`` and, when no
    explicit summary is sent, ``brand_summary`` from ``brand_identity``.
    """
    changes: Dict[str, Any] = {}
    for key in BRAND_TEXT_FIELDS:
        if key in fields:
            changes[key] = fields[key]

    if "website_url" in fields:
        website_url = fields["website_url"]
        changes["website_url"] = website_url
        if website_url is None or not str(website_url).strip():
            changes["normalized_website_domain"] = None
        else:
            changes["normalized_website_domain"] = extract_clean_domain(website_url)

    if "brand_summary" in fields:
        changes["brand_summary"] = fields["brand_summary"]
    elif fields.get("brand_identity"):
        changes["brand_summary"] = summarize_identity(fields["brand_identity"])

    if "guardrails" in fields:
        changes["guardrails"] = format_guardrails(fields["guardrails"])

    return changes

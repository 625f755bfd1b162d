"""
Entity Inference

Asks an OpenAI chat model to propose properties for domain entities and
writes the result as <entity>.schema.json, the format the generators read.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from openai import OpenAI

from tibr.domains.dictionary import DomainEntry
from tibr.errors import InferenceError
from tibr.schema import schema_path_for

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4"
SYSTEM_PROMPT = "You are a helpful assistant that outputs JSON."


def build_prompt(entry: DomainEntry) -> str:
    return (
        "Given the following entity description, output a JSON array named properties "
        "where each item has { name: string, type: string, description: string }:\n"
        f"Entity: {entry.entity}\n"
        f"Description: {entry.description}\n"
        "Output only valid JSON."
    )


def parse_properties(entity: str, content: str) -> List[Dict[str, Any]]:
    """Extract the properties list from a completion.

    Accepts either {"properties": [...]} or a bare list, optionally wrapped
    in a markdown code fence.
    """
    text = content.strip()
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]

    try:
        parsed = json.loads(text.strip())
    except json.JSONDecodeError as e:
        raise InferenceError(f"Failed to parse JSON for {entity}: {e}") from e

    properties = parsed.get("properties") if isinstance(parsed, dict) else parsed
    if not isinstance(properties, list):
        raise InferenceError(f"Completion for {entity} has no properties array")

    for prop in properties:
        if not isinstance(prop, dict) or not isinstance(prop.get("name"), str):
            raise InferenceError(f"Completion for {entity} has a property without a name")
    return properties


def build_schema(entry: DomainEntry, properties: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "title": entry.entity,
        "description": entry.description,
        "type": "object",
        "properties": {
            p["name"]: {"type": p.get("type"), "description": p.get("description")}
            for p in properties
        },
        "required": [p["name"] for p in properties],
    }


class EntityInferrer:
    """Runs property inference for domain entries."""

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = DEFAULT_MODEL,
    ):
        if client is None:
            if not api_key:
                raise InferenceError("Missing OPENAI_API_KEY environment variable.")
            client = OpenAI(api_key=api_key, base_url=base_url)
        self.client = client
        self.model = model

    def infer_properties(self, entry: DomainEntry) -> List[Dict[str, Any]]:
        logger.info(f"Inferring properties for {entry.entity} with {self.model}")
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(entry)},
            ],
            temperature=0.2,
        )

        choices = response.choices
        if not choices or not choices[0].message or not choices[0].message.content:
            raise InferenceError(f"No valid completion returned for {entry.entity}.")

        return parse_properties(entry.entity, choices[0].message.content)

    def infer_schema(self, entry: DomainEntry, project_root: Path) -> Path:
        """Infer an entity's properties and write its schema file."""
        schema = build_schema(entry, self.infer_properties(entry))

        schema_path = schema_path_for(entry.entity, project_root)
        schema_path.parent.mkdir(parents=True, exist_ok=True)
        schema_path.write_text(json.dumps(schema, indent=2), encoding="utf-8")
        logger.info(f"Wrote schema to {schema_path}")
        return schema_path

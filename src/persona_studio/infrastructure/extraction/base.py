"""Extraction collaborator interface and shared prompt material."""

import json
import re
from typing import Any, Protocol, runtime_checkable

PERSONA_SYSTEM_PROMPT = """You are an expert at analyzing text and links about a person to create a detailed digital persona.

Your task:
1) Extract key information from the provided text blocks and links.
2) Structure the information into the exact JSON format specified below.
3) Follow these field definitions:
   - name: Full name if available, else null
   - age: Age as a number if mentioned, else null
   - occupation: Primary job/role if available, else null
   - background: Concise summary (string; may be empty)
   - traits: 5-7 personality traits (array of strings)
   - interests: 5-10 interests/hobbies (array of strings)
   - skills: 5-10 professional/technical skills (array of strings)
   - values: 3-5 core values (array of strings)
   - communication_style: How they communicate if known, else null
   - personality_type: If mentioned (MBTI, Big Five, etc.), else null
   - goals: Current/future goals if mentioned (array of strings)
   - challenges: Known challenges/concerns (array of strings)
   - relationships: Key relationships/connections (array of strings)

Output requirements:
- Return ONLY valid JSON. No markdown, no explanations, no preamble.
- If a field is unknown, use null (for nullable fields) or [] (for arrays).
- Conform EXACTLY to this top-level shape (DO NOT wrap in "success" or "persona" keys):

{
  "name": string|null,
  "age": number|null,
  "occupation": string|null,
  "background": string,
  "traits": string[],
  "interests": string[],
  "skills": string[],
  "values": string[],
  "communication_style": string|null,
  "personality_type": string|null,
  "goals": string[],
  "challenges": string[],
  "relationships": string[]
}

Return only the persona object above. Metadata and raw inputs are attached separately."""

NO_INFORMATION = "No information provided."

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


@runtime_checkable
class PersonaExtractor(Protocol):
    """Turns raw text and links into an unvalidated persona dict."""

    async def extract(self, text_blocks: list[str], links: list[str]) -> dict[str, Any]:
        """Extract persona fields.

        Raises:
            ExtractionError: If the collaborator fails or answers with something unusable
        """
        ...


def build_user_message(text_blocks: list[str], links: list[str]) -> str:
    """Numbered text blocks followed by the links, one per line."""
    sections = ""
    if text_blocks:
        numbered = "\n\n".join(f"{index}. {block}" for index, block in enumerate(text_blocks, start=1))
        sections += f"Text blocks about the person:\n{numbered}\n\n"
    if links:
        sections += "Links provided:\n" + "\n".join(links)
    return sections.strip() or NO_INFORMATION


def parse_json_object(content: str) -> dict[str, Any]:
    """First ``{...}`` span of a model answer, decoded.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    match = _JSON_OBJECT.search(content)
    if match is None:
        raise ValueError("No JSON found in response")
    result = json.loads(match.group(0))
    if not isinstance(result, dict):
        raise ValueError("Response JSON is not an object")
    return result

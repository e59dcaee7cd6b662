"""Prompt templates for LLM calls."""


def build_restructure_prompt(description: str) -> str:
    """Restructure a raw job description into titled paragraph / list sections."""
    return f"""You are an expert job description formatter specializing in skilled trades and energy sector roles.

Restructure the messy job description below into clean, scannable, mobile-friendly sections.

DO NOT INVENT CONTENT:
- Use ONLY content that exists in the original job description
- Do not add, infer or embellish requirements, responsibilities, benefits or qualifications
- When in doubt, keep the exact wording of the original

GUIDELINES:
1. Identify distinct sections such as Role Overview, Key Responsibilities,
   Requirements (separate Required from Preferred when both exist), Benefits,
   and About the Company (only if substantial content exists).
2. Convert long paragraphs into concise bullet points (1-2 lines each).
3. Drop recruitment filler ("Do you enjoy...", "Join our team") unless it carries concrete information.
4. Preserve technical terms, certifications and specific requirements exactly as written.
5. Use "paragraph" for brief overviews (1-3 sentences) and "list" for everything else.

JOB DESCRIPTION:
---
{description}
---

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "sections": [
    {{"title": "<section title>", "type": "paragraph", "content": "<text>"}},
    {{"title": "<section title>", "type": "list", "content": ["<item>", "<item>"]}}
  ]
}}"""

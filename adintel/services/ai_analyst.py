"""AI-powered analyst producing creative analysis results."""

from typing import Dict, List, Optional
from openai import OpenAI
from adintel.config import settings
from adintel.services.creative_analyzer import extract_headline
import json
import logging

logger = logging.getLogger(__name__)

_openai_client: Optional[OpenAI] = None


def get_openai_client() -> OpenAI:
    """Create the OpenAI client on first use."""
    global _openai_client
    if _openai_client is None:
        _openai_client = OpenAI(api_key=settings.openai_api_key)
    return _openai_client


SYSTEM_PROMPT = """You are an expert marketing analyst specializing in ad creative analysis.
Analyze the provided ad creative and return insights in JSON format.
Be specific, actionable, and focus on what drives performance."""


class AIAnalyst:
    """OpenAI-backed creative analyst used for paid accounts."""

    def __init__(self, client: Optional[OpenAI] = None):
        self.client = client

    def build_prompt(
        self,
        ad_copy: Optional[str] = None,
        cta: Optional[str] = None
    ) -> str:
        prompt = "Analyze this ad creative and provide detailed marketing insights.\n\n"

        if ad_copy:
            prompt += f'Ad Copy: "{ad_copy}"\n'

        if cta:
            prompt += f'Call to Action: "{cta}"\n'

        prompt += """
Return a JSON object with the following structure:
{
  "headline": "The main headline or key message (extract or summarize)",
  "headline_length": "short|medium|long (based on character count)",
  "emotion": "The primary emotion (excitement|urgency|trust|curiosity|aspiration|neutral)",
  "copy_tone": "The tone of the copy (urgent|promotional|informative|casual|professional)",
  "primary_color": "The dominant color in the creative (if image provided)",
  "visual_elements": ["array", "of", "visual", "elements", "like product, person, text-overlay"],
  "performance_driver": "1-2 sentence explanation of what makes this ad effective or what could improve it",
  "recommendations": ["Array of 3-5 specific, actionable recommendations to improve performance"]
}

Focus on:
- What emotional triggers are being used
- How clear and compelling the messaging is
- Visual hierarchy and attention-grabbing elements
- Call-to-action effectiveness
- Specific improvements that could increase CTR and conversions
"""
        return prompt

    def analyze_creative(
        self,
        image_url: Optional[str] = None,
        ad_copy: Optional[str] = None,
        cta: Optional[str] = None
    ) -> Dict:
        """
        Analyze a creative with the chat completions API.

        Args:
            image_url: Optional image URL, switches to the vision model
            ad_copy: Ad copy text
            cta: Call-to-action text

        Returns:
            Analysis result dictionary; a basic fallback when the call fails
        """
        prompt = self.build_prompt(ad_copy, cta)

        if image_url:
            user_content = [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": image_url}},
            ]
            model = settings.openai_vision_model
        else:
            user_content = prompt
            model = settings.openai_model

        try:
            client = self.client or get_openai_client()
            response = client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_content}
                ],
                response_format={"type": "json_object"},
                temperature=0.7,
                max_tokens=1000
            )

            content = response.choices[0].message.content
            if not content:
                raise ValueError("No response from OpenAI")

            content = content.strip()

            # Clean up JSON response
            if content.startswith("```json"):
                content = content[7:]
            if content.startswith("```"):
                content = content[3:]
            if content.endswith("```"):
                content = content[:-3]

            return structure_analysis(json.loads(content.strip()))
        except Exception as e:
            logger.error(f"Error generating creative analysis: {e}")
            return fallback_analysis(ad_copy, cta)


def _string_list(value, default: List[str]) -> List[str]:
    if not isinstance(value, list):
        return default
    return [item for item in value if isinstance(item, str)]


def structure_analysis(raw: Dict) -> Dict:
    """Fill defaults and drop malformed fields from a model response."""
    if not isinstance(raw, dict):
        raw = {}

    result = {
        'headline': raw.get('headline') or 'Unable to extract headline',
        'headline_length': raw.get('headline_length') or 'medium',
        'emotion': raw.get('emotion') or 'neutral',
        'copy_tone': raw.get('copy_tone') or 'informative',
        'visual_elements': _string_list(raw.get('visual_elements'), []),
        'performance_driver': raw.get('performance_driver') or 'Analysis completed',
        'recommendations': _string_list(
            raw.get('recommendations'),
            ['Continue testing variations of this creative']
        ),
    }

    if raw.get('primary_color'):
        result['primary_color'] = raw['primary_color']
    if raw.get('cta'):
        result['cta'] = raw['cta']

    return result


def fallback_analysis(
    ad_copy: Optional[str] = None,
    cta: Optional[str] = None
) -> Dict:
    """Basic analysis returned when the OpenAI call fails."""
    result = {
        'headline': (extract_headline(ad_copy) if ad_copy else None) or 'No headline detected',
        'headline_length': 'medium',
        'emotion': 'neutral',
        'copy_tone': 'informative',
        'performance_driver': 'AI analysis temporarily unavailable. Basic analysis provided.',
        'recommendations': [
            'Test different variations of your ad copy',
            'Ensure your CTA is clear and action-oriented',
            'A/B test with different images',
        ],
    }

    if cta:
        result['cta'] = cta

    return result

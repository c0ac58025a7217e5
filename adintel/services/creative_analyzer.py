"""Keyword heuristics producing an analysis result without an LLM call."""

from typing import Dict, List, Optional
import random
import re

EMOTION_KEYWORDS = {
    'excitement': ['amazing', 'incredible', 'wow', 'awesome', 'fantastic'],
    'curiosity': ['discover', 'explore', 'find out', 'learn', 'secret'],
    'urgency': ['now', 'today', 'limited', 'hurry', "don't miss"],
    'trust': ['proven', 'trusted', 'reliable', 'guaranteed', 'certified'],
    'aspiration': ['achieve', 'success', 'dream', 'transform', 'elevate'],
}

COLORS = ['blue', 'red', 'green', 'orange', 'purple', 'yellow', 'black', 'white']

VISUAL_ELEMENTS = [
    'product image',
    'lifestyle photo',
    'text overlay',
    'logo',
    'people',
    'gradient background',
    'call-to-action button',
    'price tag',
]

DEFAULT_COLOR = 'blue'


class CreativeAnalyzer:
    """Heuristic analyzer used for free-tier accounts."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def analyze(
        self,
        image_url: Optional[str] = None,
        ad_copy: Optional[str] = None,
        cta: Optional[str] = None
    ) -> Dict:
        """
        Analyze a creative from its copy, CTA and image presence.

        Args:
            image_url: Image reference, only its presence is used
            ad_copy: Ad copy text
            cta: Call-to-action text

        Returns:
            Analysis result dictionary
        """
        analysis = {}

        if ad_copy:
            headline = extract_headline(ad_copy)
            analysis['headline'] = headline
            analysis['headline_length'] = categorize_headline_length(headline)
            analysis['copy_tone'] = detect_copy_tone(ad_copy)
            analysis['emotion'] = detect_emotion(ad_copy)
        else:
            analysis['headline'] = '[No headline provided]'
            analysis['headline_length'] = 'short'
            analysis['copy_tone'] = 'informative'
            analysis['emotion'] = 'neutral'

        if cta:
            analysis['cta'] = cta

        # Image content is not inspected, colors and elements are sampled
        if image_url:
            analysis['primary_color'] = self.rng.choice(COLORS)
            count = self.rng.randint(2, 4)
            analysis['visual_elements'] = self.rng.sample(VISUAL_ELEMENTS, count)
        else:
            analysis['primary_color'] = DEFAULT_COLOR
            analysis['visual_elements'] = []

        analysis['performance_driver'] = generate_performance_driver(analysis)
        analysis['recommendations'] = generate_recommendations(analysis)

        return analysis


def extract_headline(copy: str) -> str:
    first_sentence = re.split(r'[.!?]', copy)[0].strip()
    return first_sentence or copy[:50]


def categorize_headline_length(headline: str) -> str:
    if len(headline) < 30:
        return 'short'
    if len(headline) < 60:
        return 'medium'
    return 'long'


def detect_copy_tone(copy: str) -> str:
    lower_copy = copy.lower()

    if 'exclusive' in lower_copy or 'limited' in lower_copy:
        return 'urgent'
    if 'discover' in lower_copy or 'explore' in lower_copy:
        return 'curious'
    if 'save' in lower_copy or 'deal' in lower_copy:
        return 'promotional'
    if '!' in lower_copy:
        return 'exciting'
    return 'informative'


def detect_emotion(copy: str) -> str:
    lower_copy = copy.lower()

    for emotion, keywords in EMOTION_KEYWORDS.items():
        if any(keyword in lower_copy for keyword in keywords):
            return emotion

    return 'neutral'


def generate_performance_driver(analysis: Dict) -> str:
    drivers = []

    if analysis.get('headline_length') == 'short':
        drivers.append('concise messaging')

    if analysis.get('emotion') in ('urgency', 'excitement'):
        drivers.append('emotional appeal')

    if len(analysis.get('visual_elements') or []) > 3:
        drivers.append('rich visual content')

    if analysis.get('cta'):
        drivers.append('clear call-to-action')

    return ', '.join(drivers) if drivers else 'balanced creative elements'


def generate_recommendations(analysis: Dict) -> List[str]:
    recommendations = []

    if analysis.get('headline_length') == 'long':
        recommendations.append('Consider shortening the headline for better mobile readability')

    if analysis.get('emotion') == 'neutral':
        recommendations.append('Add emotional triggers to increase engagement')

    if not analysis.get('cta'):
        recommendations.append('Include a clear call-to-action to drive conversions')

    if analysis.get('copy_tone') == 'informative':
        recommendations.append('Test more urgent or promotional copy to boost click-through rates')

    if not recommendations:
        recommendations.append('Test variations of this creative with different headlines')

    return recommendations

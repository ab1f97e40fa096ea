"""Keyword-based category suggestions for scraped events."""
import re
from types import MappingProxyType
from typing import Dict, List, Optional, Tuple

from processor.models import ScrapedEvent

MAX_SUGGESTIONS = 5

# Declaration order breaks score ties.
CATEGORY_KEYWORDS = MappingProxyType({
    'Technology': (
        'tech', 'technology', 'software', 'programming', 'coding', 'developer', 'dev',
        'javascript', 'python', 'react', 'node', 'web', 'mobile', 'app', 'api',
        'ai', 'artificial intelligence', 'machine learning', 'ml', 'data science',
        'cybersecurity', 'cloud', 'devops', 'blockchain', 'crypto', 'iot',
        'frontend', 'backend', 'fullstack', 'full-stack', 'agile', 'scrum',
    ),
    'Design': (
        'design', 'ui', 'ux', 'user experience', 'user interface', 'graphic design',
        'visual design', 'product design', 'interaction design', 'web design',
        'branding', 'typography', 'illustration', 'animation', 'figma', 'sketch',
        'adobe', 'photoshop', 'illustrator', 'service design', 'content design',
    ),
    'Business': (
        'business', 'entrepreneurship', 'startup', 'leadership', 'management',
        'strategy', 'marketing', 'sales', 'finance', 'investment', 'venture capital',
        'consulting', 'networking', 'innovation', 'growth', 'scale',
    ),
    'Data & Analytics': (
        'data', 'analytics', 'big data', 'business intelligence', 'bi', 'sql',
        'database', 'data engineering', 'data analysis', 'statistics', 'metrics',
        'dashboard', 'reporting', 'etl',
    ),
    'Product Management': (
        'product', 'product management', 'pm', 'product owner', 'roadmap',
        'feature', 'requirements', 'user story', 'backlog', 'sprint',
    ),
    'Marketing': (
        'marketing', 'digital marketing', 'seo', 'sem', 'social media', 'content',
        'brand', 'advertising', 'campaign', 'email marketing', 'ppc', 'cmo', 'cro',
    ),
    'Sales': (
        'sales', 'b2b', 'b2c', 'account management', 'customer success', 'crm',
        'revenue', 'pipeline', 'deal', 'closing',
    ),
    'HR & People': (
        'hr', 'human resources', 'recruiting', 'talent', 'people', 'culture',
        'diversity', 'inclusion', 'team building', 'employee',
    ),
    'Finance': (
        'finance', 'accounting', 'cfo', 'financial planning', 'budget', 'forecast',
        'tax', 'audit', 'compliance',
    ),
    'Healthcare': (
        'healthcare', 'health', 'medical', 'pharma', 'biotech', 'clinical',
        'patient', 'hospital', 'nursing',
    ),
    'Education': (
        'education', 'learning', 'training', 'workshop', 'course', 'university',
        'school', 'student', 'teacher', 'academic',
    ),
    'Conference': (
        'conference', 'summit', 'convention', 'expo', 'exhibition', 'trade show',
        'meetup', 'gathering', 'forum',
    ),
    'Workshop': (
        'workshop', 'training', 'bootcamp', 'course', 'class', 'seminar',
        'tutorial', 'hands-on',
    ),
})

_KEYWORD_PATTERNS = MappingProxyType({
    category: tuple(
        re.compile(r'\b' + re.escape(keyword) + r'\b') for keyword in keywords
    )
    for category, keywords in CATEGORY_KEYWORDS.items()
})


def score_categories(text: str) -> Dict[str, int]:
    """
    Count whole-word keyword hits per category.

    Args:
        text: Text to score; matched case-insensitively

    Returns:
        Mapping of category to hit count, zero-score categories omitted,
        in declaration order
    """
    text = text.lower()
    scores = {}

    for category, patterns in _KEYWORD_PATTERNS.items():
        score = sum(len(pattern.findall(text)) for pattern in patterns)
        if score > 0:
            scores[category] = score

    return scores


def detect_categories(event: ScrapedEvent) -> Tuple[Optional[str], List[str]]:
    """
    Suggest categories from an event's name, description and URL.

    Args:
        event: Scraped event to classify

    Returns:
        Tuple of (primary category or None, up to five suggestions by
        descending score)
    """
    search_text = ' '.join([
        event.name or '',
        event.description or '',
        event.url or '',
    ])

    scores = score_categories(search_text)
    ranked = sorted(scores, key=lambda category: scores[category], reverse=True)

    if not ranked:
        return None, []

    return ranked[0], ranked[:MAX_SUGGESTIONS]

"""
Transaction categorization by merchant keyword containment.
"""
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from errors import TaxonomyError
from schema import Category

logger = logging.getLogger(__name__)

TAXONOMY_VERSION = "2026.02"

# Lowercase substrings matched against the lower-cased merchant name.
# Categories are tried in Category declaration order, so a keyword must not
# contain a keyword of an earlier category (see find_keyword_collisions).
DEFAULT_CATEGORY_KEYWORDS = {
    'food': [
        'swiggy', 'zomato', 'restaurant', 'hotel', 'bakery', 'khanavali', 'dhaba',
        'food', 'cafe', 'chai', 'juice', 'biryani', 'pizza', 'burger', 'dominos',
        'mcdonalds', 'kfc', 'subway', 'starbucks', 'blinkit', 'zepto', 'instamart',
    ],
    'transport': [
        'uber', 'ola', 'rapido', 'metro', 'bus', 'auto', 'cab', 'taxi', 'irctc',
        'railway', 'train', 'petrol', 'fuel', 'parking', 'toll',
    ],
    'shopping': [
        'amazon', 'flipkart', 'myntra', 'ajio', 'nykaa', 'meesho', 'snapdeal',
        'dmart', 'big bazaar', 'reliance', 'shoppers stop', 'lifestyle', 'westside',
        'mall', 'store', 'retail',
    ],
    'entertainment': [
        'netflix', 'prime video', 'hotstar', 'disney', 'spotify', 'youtube', 'gaana',
        'jio cinema', 'bookmyshow', 'pvr', 'inox', 'cinema', 'movie', 'gaming',
    ],
    'health': [
        'gym', 'fitness', 'cult.fit', 'hospital', 'clinic', 'pharmacy', 'medical',
        'medplus', 'medicine', 'doctor', 'apollo', 'practo', 'diagnostic',
    ],
    'recharge': [
        'recharge', 'electricity', 'water', 'gas', 'broadband', 'internet', 'dth',
        'airtel', 'jio', 'vodafone', 'bsnl', 'tata sky', 'dish tv', 'bill',
    ],
    # Direction words such as "sent to" or "upi" are stripped from the
    # merchant before classification, so they cannot be keywords here.
    'transfers': [
        'transfer', 'salary', 'freelance', 'neft', 'imps', 'rtgs',
    ],
}


class KeywordCollision(NamedTuple):
    keyword: str
    category: Category
    shadowed_by: str
    shadowing_category: Category


def build_taxonomy(
    category_keywords: Mapping[str, Sequence[str]],
) -> Mapping[Category, Tuple[str, ...]]:
    """
    Validate a keyword mapping and freeze it in category priority order.

    Args:
        category_keywords: Category name -> list of lowercase keyword substrings

    Returns:
        Read-only mapping from Category to a tuple of keywords
    """
    by_category: Dict[Category, Tuple[str, ...]] = {}

    for name, keywords in category_keywords.items():
        try:
            category = Category(name)
        except ValueError:
            raise TaxonomyError(f"Unknown category in taxonomy: {name!r}") from None
        if category is Category.OTHER:
            raise TaxonomyError("'other' is the fallback category and cannot have keywords")
        if isinstance(keywords, str) or not isinstance(keywords, (list, tuple)):
            raise TaxonomyError(f"Keywords for {name!r} must be a list of strings")

        cleaned = []
        for keyword in keywords:
            if not isinstance(keyword, str) or not keyword.strip():
                raise TaxonomyError(f"Empty or non-string keyword in {name!r}: {keyword!r}")
            if keyword != keyword.lower():
                raise TaxonomyError(f"Keyword must be lowercase: {keyword!r} in {name!r}")
            cleaned.append(keyword)
        by_category[category] = tuple(cleaned)

    ordered = {
        category: by_category[category]
        for category in Category
        if category in by_category
    }
    return MappingProxyType(ordered)


def find_keyword_collisions(
    taxonomy: Mapping[Category, Sequence[str]],
) -> List[KeywordCollision]:
    """
    Find keywords that can never classify as their own category.

    A keyword is shadowed when a keyword of a higher-priority category is a
    substring of it: classifying the keyword alone then stops at the earlier
    category.
    """
    collisions = []
    seen: List[Tuple[Category, str]] = []

    for category in Category:
        keywords = taxonomy.get(category, ())
        for keyword in keywords:
            for earlier_category, earlier_keyword in seen:
                if earlier_keyword in keyword:
                    collisions.append(
                        KeywordCollision(keyword, category, earlier_keyword, earlier_category)
                    )
        seen.extend((category, keyword) for keyword in keywords)

    return collisions


def load_category_keywords(path: Union[str, Path]) -> Dict[str, List[str]]:
    """Read a JSON object of the form {"food": ["swiggy", ...], ...}."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise TaxonomyError(f"Error reading taxonomy file {path}: {e}") from e

    if not isinstance(data, dict):
        raise TaxonomyError(f"Taxonomy file {path} must contain a JSON object")
    return data


class TransactionCategorizer:
    """Maps merchant names to spend categories using keyword rules."""

    def __init__(self, category_keywords: Optional[Mapping[str, Sequence[str]]] = None):
        self.logger = logging.getLogger(self.__class__.__name__)

        if category_keywords is None:
            category_keywords = DEFAULT_CATEGORY_KEYWORDS
        self.category_keywords = build_taxonomy(category_keywords)

        for collision in find_keyword_collisions(self.category_keywords):
            self.logger.warning(
                f"Keyword {collision.keyword!r} ({collision.category.value}) is shadowed by "
                f"{collision.shadowed_by!r} ({collision.shadowing_category.value})"
            )

        keyword_count = sum(len(k) for k in self.category_keywords.values())
        self.logger.debug(
            f"Loaded {keyword_count} keywords across {len(self.category_keywords)} categories"
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "TransactionCategorizer":
        logger.info(f"Loading category keywords from {path}")
        return cls(load_category_keywords(path))

    def classify(self, merchant: str) -> Category:
        """
        Return the first category with a keyword contained in the merchant name.

        Args:
            merchant: Merchant name as extracted from the statement line

        Returns:
            Matching Category, or Category.OTHER when nothing matches
        """
        lowered = (merchant or '').lower()
        for category, keywords in self.category_keywords.items():
            if any(keyword in lowered for keyword in keywords):
                return category
        return Category.OTHER

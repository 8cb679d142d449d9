"""
Keyword Discovery Module
Phrase mining, scoring and diverse final selection.
"""

from .text_miner import mine_candidates, select_idea_seeds, to_rich_keyword, is_bad_keyword
from .keyword_ranking import rank_keywords, pick_final_keywords, one_word_fallback
from .keyword_finder import KeywordFinder

__all__ = [
    # Mining
    "mine_candidates",
    "select_idea_seeds",
    "to_rich_keyword",
    "is_bad_keyword",

    # Ranking
    "rank_keywords",
    "pick_final_keywords",
    "one_word_fallback",

    "KeywordFinder",
]

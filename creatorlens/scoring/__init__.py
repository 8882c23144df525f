"""Pure heuristic scorers for scripts, hooks and brand alignment."""

from .brand import BrandAlignmentScorer
from .hooks import HookGenerator
from .lexicon import DEFAULT_LEXICON, BrandLexicon, HookLexicon, PlatformBand, ScoringLexicon, ScriptLexicon
from .script_scorer import ScriptScorer

__all__ = [
    "BrandAlignmentScorer",
    "HookGenerator",
    "ScriptScorer",
    "ScoringLexicon",
    "ScriptLexicon",
    "HookLexicon",
    "BrandLexicon",
    "PlatformBand",
    "DEFAULT_LEXICON",
]

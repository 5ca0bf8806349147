import re
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

logger = logging.getLogger(__name__)

# Limiares fixos: score > 2 positivo, score < -2 negativo
POSITIVE_THRESHOLD = 2
NEGATIVE_THRESHOLD = -2

NEGATORS = frozenset({
    "not", "no", "never", "none", "nobody", "nothing", "neither", "nor",
    "cant", "can't", "cannot", "dont", "don't", "doesnt", "doesn't",
    "didnt", "didn't", "isnt", "isn't", "arent", "aren't", "wasnt", "wasn't",
    "werent", "weren't", "wont", "won't", "wouldnt", "wouldn't",
    "shouldnt", "shouldn't", "couldnt", "couldn't", "aint", "ain't",
})

_TOKEN_RE = re.compile(r"[a-z0-9']+")


class Sentiment(str, Enum):
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"


def label_for_score(score: int) -> Sentiment:
    if score > POSITIVE_THRESHOLD:
        return Sentiment.POSITIVE
    if score < NEGATIVE_THRESHOLD:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


@dataclass
class SentimentResult:
    sentiment: Sentiment
    score: int = 0
    comparative: float = 0.0
    positive: List[str] = field(default_factory=list)
    negative: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class LexiconScorer:
    """
    Score inteiro estilo AFINN: soma da valência (arredondada) de cada token
    conhecido do léxico. Um negador logo antes do token inverte o sinal.
    Por padrão usa o léxico do VADER.
    """

    def __init__(self, lexicon: Optional[Dict[str, float]] = None):
        if lexicon is None:
            lexicon = SentimentIntensityAnalyzer().lexicon
        self.lexicon: Dict[str, float] = lexicon

    @staticmethod
    def tokenize(text: str) -> List[str]:
        return _TOKEN_RE.findall(text.lower())

    def score(self, text: str) -> Tuple[int, List[str], List[str], int]:
        tokens = self.tokenize(text)
        total = 0
        positive: List[str] = []
        negative: List[str] = []
        for i, token in enumerate(tokens):
            valence = self.lexicon.get(token)
            if valence is None:
                continue
            value = int(round(valence))
            if i > 0 and tokens[i - 1] in NEGATORS:
                value = -value
            if value > 0:
                positive.append(token)
            elif value < 0:
                negative.append(token)
            total += value
        return total, positive, negative, len(tokens)


class NewsClassifier:
    """
    Classifica o sentimento de textos de notícia em POSITIVE / NEUTRAL / NEGATIVE.
    Texto vazio é NEUTRAL. Se o scorer falhar, o resultado é NEUTRAL com `error`
    preenchido (nunca um rótulo aleatório).
    """

    def __init__(self, scorer: Optional[LexiconScorer] = None):
        self.scorer = scorer or LexiconScorer()

    def analyze(self, text: Optional[str]) -> SentimentResult:
        if not text or not text.strip():
            return SentimentResult(Sentiment.NEUTRAL)
        try:
            score, positive, negative, n_tokens = self.scorer.score(text)
        except Exception as e:
            logger.error("[SENTIMENT] Scoring failed, defaulting to NEUTRAL: %s", e)
            return SentimentResult(Sentiment.NEUTRAL, error=str(e) or e.__class__.__name__)

        label = label_for_score(score)
        comparative = score / n_tokens if n_tokens else 0.0
        logger.debug(
            "[SENTIMENT] Score %s, Comparative: %.3f, Result: %s", score, comparative, label.value
        )
        return SentimentResult(label, score, comparative, positive, negative)

    def classify(self, text: Optional[str]) -> Sentiment:
        return self.analyze(text).sentiment


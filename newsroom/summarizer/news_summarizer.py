import re
from typing import List, NamedTuple, Optional

DEFAULT_SENTENCE_COUNT = 3
POSITION_WEIGHT = 0.6
LENGTH_WEIGHT = 0.4
LENGTH_SATURATION = 20  # palavras

# frase = trecho sem terminador + um ou mais terminadores (mantidos)
_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")


class ScoredSentence(NamedTuple):
    index: int
    text: str
    score: float


def split_sentences(text: str) -> List[str]:
    """Quebra em frases por '.', '!' e '?'. Texto final sem terminador é descartado."""
    return _SENTENCE_RE.findall(text or "")


def score_sentences(sentences: List[str]) -> List[ScoredSentence]:
    total = len(sentences)
    scored = []
    for index, sentence in enumerate(sentences):
        text = sentence.strip()
        position_score = 1 - (index / total)
        length_score = min(len(text.split()) / LENGTH_SATURATION, 1)
        scored.append(ScoredSentence(
            index, text, POSITION_WEIGHT * position_score + LENGTH_WEIGHT * length_score
        ))
    return scored


class NewsSummarizer:
    """
    Sumarização extrativa de notícias.

    Pontua cada frase pela posição (lead da notícia pesa mais) e pelo tamanho
    (satura em 20 palavras), escolhe as `sentence_count` melhores e devolve na
    ordem original do texto. Determinístico, sem modelo.
    """

    def __init__(self, sentence_count: int = DEFAULT_SENTENCE_COUNT):
        self.sentence_count = sentence_count

    def summarize(self, text: str, sentence_count: Optional[int] = None) -> str:
        """
        :param text: Texto original da notícia.
        :param sentence_count: Número de frases do resumo (padrão da instância).
        :return: Resumo como string ("" para texto vazio).
        """
        n = self.sentence_count if sentence_count is None else sentence_count
        if not text or not text.strip():
            return ""

        sentences = split_sentences(text)
        if len(sentences) <= n:
            return text.strip()

        # sorted é estável: empate fica com a frase que vem antes
        ranked = sorted(score_sentences(sentences), key=lambda s: s.score, reverse=True)
        top = sorted(ranked[:n], key=lambda s: s.index)
        return " ".join(s.text for s in top)

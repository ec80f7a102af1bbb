"""Réponses locales de l'assistant (backend indisponible).

Deux pièces pures et indépendantes :
- `classify_message()` : texte → catégorie (mots-clés sur le texte en minuscules)
- `RESPONSES` / `INSIGHTS` : tables catégorie → réponse / valeurs mises en avant

`fallback_reply()` combine les deux ; il ne lève jamais et ne suspend jamais.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from smartgg.config import SMART_COLORS
from smartgg.models import AssistantReply, Insight


class FallbackCategory(str, Enum):
    FARM = "farm"
    DEATHS = "deaths"
    BUILD = "build"
    MATCH_ANALYSIS = "match_analysis"
    DEFAULT = "default"


# Ordre significatif : la première catégorie dont un mot-clé apparaît gagne.
KEYWORDS: tuple[tuple[FallbackCategory, tuple[str, ...]], ...] = (
    (FallbackCategory.FARM, ("farm", "cs")),
    (FallbackCategory.DEATHS, ("morri", "morte", "morrendo")),
    (FallbackCategory.BUILD, ("runa", "build")),
    (FallbackCategory.MATCH_ANALYSIS, ("última", "partida", "analisar")),
)


def classify_message(text: str) -> FallbackCategory:
    """Retourne la catégorie de réponse pour `text` (DEFAULT si aucun mot-clé)."""
    q = str(text or "").lower()
    for category, words in KEYWORDS:
        if any(w in q for w in words):
            return category
    return FallbackCategory.DEFAULT


RESPONSES: dict[FallbackCategory, str] = {
    FallbackCategory.FARM: (
        "Baseado nas suas últimas partidas, seu CS/min médio está na média. Para melhorar:\n\n"
        "• Pratique last-hitting no modo treino até conseguir 80+ CS aos 10 minutos\n"
        "• Aprenda a gerenciar waves: congelar, empurrar e slow push\n"
        "• Só faça roaming quando a wave estiver empurrando\n\n"
        "Quer que eu analise seu histórico de CS por partida?"
    ),
    FallbackCategory.DEATHS: (
        "Analisando suas mortes recentes, algumas dicas:\n\n"
        "• 60% das mortes ocorrem sem visão do jungler inimigo\n"
        "• Invista mais em wards e evite overextend sem Flash\n"
        "• Olhe o minimapa a cada 5 segundos\n\n"
        "Posso analisar em quais momentos da partida você morre mais."
    ),
    FallbackCategory.BUILD: (
        "Para recomendações de runas e builds, preciso saber:\n\n"
        "• Qual campeão você está jogando?\n"
        "• Qual é seu estilo de jogo (agressivo/passivo)?\n"
        "• Contra quem você está enfrentando?\n\n"
        "Me diga o campeão e eu sugiro a melhor configuração!"
    ),
    FallbackCategory.MATCH_ANALYSIS: (
        "Para analisar sua última partida, vou verificar:\n\n"
        "• Seu desempenho geral (KDA, CS, visão)\n"
        "• Momentos decisivos da partida\n"
        "• Pontos de melhoria específicos\n\n"
        "Conectando aos seus dados..."
    ),
    FallbackCategory.DEFAULT: (
        "Entendi sua pergunta. Baseado nos seus dados, posso fornecer análises detalhadas. "
        "Tente perguntas sobre:\n\n"
        "• Farm e CS\n"
        "• Mortes e posicionamento\n"
        "• Builds e runas\n"
        "• Análise de partidas"
    ),
}

INSIGHTS: dict[FallbackCategory, tuple[Insight, ...]] = {
    FallbackCategory.FARM: (
        Insight("CS Ideal (10min)", "80+", SMART_COLORS.success),
        Insight("Meta/min", "8+", SMART_COLORS.neon_primary),
    ),
    FallbackCategory.MATCH_ANALYSIS: (
        Insight("KDA", "8/3/6", SMART_COLORS.neon_primary),
        Insight("Participação", "82% KP", SMART_COLORS.success),
    ),
}


def fallback_insights(category: FallbackCategory) -> Optional[tuple[Insight, ...]]:
    return INSIGHTS.get(category)


def fallback_reply(text: str) -> AssistantReply:
    """Réponse déterministe pour `text`."""
    category = classify_message(text)
    return AssistantReply(
        response=RESPONSES[category],
        insights=fallback_insights(category),
    )

"""SmartGG - client du dashboard de performance personnelle.

Sous-modules :
- api : client HTTP du backend de statistiques (aiohttp)
- app : session joueur, orchestration des données du dashboard
- assistant : contexte joueur, transcript et réponses de secours
- ui / visualization : helpers de présentation (formatage, tableaux, graphiques)
"""

__version__ = "0.1.0"

"""Tableaux pandas du dashboard (liste des matchs, champions)."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from smartgg.models import ChampionStats, Match
from smartgg.ui.formatting import format_kda_line, format_time_ago

MATCH_COLUMNS = [
    "Resultado",
    "Campeão",
    "Função",
    "K/D/A",
    "KDA",
    "CS",
    "CS/min",
    "Dano",
    "Quando",
]

CHAMPION_COLUMNS = ["Campeão", "Jogos", "Vitórias", "Winrate", "KDA", "CS médio", "Dano médio"]


def matches_frame(matches: Sequence[Match] | None, *, now_ms: float | None = None) -> pd.DataFrame:
    """Liste des matchs, la plus récente en premier (ordre du backend conservé)."""
    rows = [
        {
            "id": m.id,
            "Resultado": "Vitória" if m.is_win else "Derrota",
            "Campeão": m.champion,
            "Função": m.role,
            "K/D/A": format_kda_line(m.kills, m.deaths, m.assists),
            "KDA": m.kda,
            "CS": m.cs,
            "CS/min": round(m.cs_per_min, 1),
            "Dano": m.damage,
            "Quando": format_time_ago(m.timestamp, now_ms) if m.timestamp else m.time,
        }
        for m in (matches or ())
    ]
    if not rows:
        return pd.DataFrame(columns=["id", *MATCH_COLUMNS])
    return pd.DataFrame(rows).set_index("id")


def champions_frame(champions: Sequence[ChampionStats] | None, *, top: int | None = None) -> pd.DataFrame:
    """Agrégats par champion, triés par nombre de parties puis winrate."""
    rows = [
        {
            "champion_id": c.champion_id,
            "Campeão": c.champion_name,
            "Jogos": c.games,
            "Vitórias": c.wins,
            "Winrate": round(c.winrate, 1),
            "KDA": round(c.kda, 2),
            "CS médio": round(c.avg_cs, 1),
            "Dano médio": round(c.avg_damage),
        }
        for c in (champions or ())
    ]
    if not rows:
        return pd.DataFrame(columns=["champion_id", *CHAMPION_COLUMNS])
    df = pd.DataFrame(rows).sort_values(["Jogos", "Winrate"], ascending=[False, False], kind="stable")
    if top is not None:
        df = df.head(int(top))
    return df.reset_index(drop=True)

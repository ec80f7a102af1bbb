"""SmartGG - Dashboard Streamlit.

Application de suivi des statistiques de partie classée et assistant
d'analyse, branchée sur le backend SmartGG.
"""

from __future__ import annotations

import streamlit as st

from smartgg.api.errors import AuthenticationFailed
from smartgg.api.urls import champion_icon_url, profile_icon_url, rank_emblem_url
from smartgg.app.runtime import Services, build_services, run_sync
from smartgg.assistant.conversation import Conversation
from smartgg.config import TimeWindow, load_env_files
from smartgg.logging_utils import setup_logging
from smartgg.models import Credentials, RegistrationProfile
from smartgg.ui.formatting import metric_cards, tier_color
from smartgg.ui.settings import AppSettings, load_settings
from smartgg.ui.tables import champions_frame, matches_frame
from smartgg.visualization.evolution import plot_evolution


# =============================================================================
# État de session Streamlit
# =============================================================================


def _get_services(settings: AppSettings) -> Services:
    services = st.session_state.get("services")
    if services is None:
        services = build_services(settings)
        st.session_state["services"] = services
    return services


def _get_conversation(services: Services) -> Conversation:
    conv = st.session_state.get("conversation")
    if conv is None:
        ident = services.session.identity
        conv = Conversation.start(ident.game_name if ident is not None else None)
        st.session_state["conversation"] = conv
    return conv


def _refresh_identity_after_render(services: Services) -> None:
    """Refresh d'identité différé après le premier rendu (une seule fois)."""
    if not st.session_state.pop("_identity_refresh_pending", False):
        return
    before = services.session.identity
    run_sync(services.session.refresh_identity())
    if services.session.identity != before:
        st.rerun()


def _logout(services: Services) -> None:
    services.session.logout()
    services.dashboard.clear()
    services.assistant.contexts.clear()
    st.session_state.pop("conversation", None)


# =============================================================================
# Pages
# =============================================================================


def render_onboarding(services: Services) -> None:
    st.title("SmartGG")
    login_tab, register_tab = st.tabs(["Entrar", "Criar conta"])
    busy = services.session.state.is_loading

    with login_tab:
        with st.form("login"):
            email = st.text_input("Email")
            password = st.text_input("Senha", type="password")
            submitted = st.form_submit_button("Entrar", disabled=busy)
        if submitted:
            try:
                run_sync(services.session.login(Credentials(email=email, password=password)))
            except AuthenticationFailed as e:
                st.error(e.message)
            else:
                st.rerun()

    with register_tab:
        with st.form("register"):
            email = st.text_input("Email", key="reg_email")
            password = st.text_input("Senha", type="password", key="reg_password")
            game_name = st.text_input("Nome de invocador")
            tag_line = st.text_input("Tag (ex: BR1)")
            submitted = st.form_submit_button("Criar conta", disabled=busy)
        if submitted:
            profile = RegistrationProfile(
                email=email, password=password, game_name=game_name, tag_line=tag_line
            )
            try:
                run_sync(services.session.register(profile))
            except AuthenticationFailed as e:
                st.error(e.message)
            else:
                st.rerun()


def render_header(services: Services) -> None:
    ident = services.session.identity
    if ident is None:
        return
    cols = st.columns([1, 1, 6, 2])
    with cols[0]:
        st.image(profile_icon_url(ident.display_icon_id), width=64)
    with cols[1]:
        emblem = rank_emblem_url(ident.tier)
        if emblem:
            st.image(emblem, width=64)
    with cols[2]:
        color = tier_color(ident.tier)
        st.markdown(
            f"### {ident.riot_id}\n"
            f"<span style='color:{color}'>{ident.display_tier} {ident.rank or ''}</span>"
            f" · {ident.display_league_points} LP · Nível {ident.display_level}",
            unsafe_allow_html=True,
        )
    with cols[3]:
        if st.button("Sair"):
            _logout(services)
            st.rerun()


def render_dashboard(services: Services) -> None:
    key = services.session.identity_key
    dashboard = services.dashboard
    run_sync(dashboard.load_all(key))

    top = st.columns([3, 1])
    with top[0]:
        labels = [w.value for w in TimeWindow]
        chosen = st.radio(
            "Período",
            labels,
            index=labels.index(dashboard.window.value),
            horizontal=True,
        )
        if chosen != dashboard.window.value:
            run_sync(dashboard.reload_for_window(chosen))
    with top[1]:
        if st.button("Atualizar", disabled=dashboard.is_refreshing):
            with st.spinner("Sincronizando partidas…"):
                synced = run_sync(dashboard.force_refresh(key))
            if synced:
                st.toast(f"{synced} nova(s) partida(s)")

    cache = dashboard.cache
    metric_cols = st.columns(4)
    for col, card in zip(metric_cols, metric_cards(cache.stats)):
        col.metric(card["label"], card["value"], card["trend"])

    st.subheader("Evolução")
    if cache.evolution:
        st.plotly_chart(plot_evolution(cache.evolution), use_container_width=True)
    else:
        st.caption("Carregando…" if cache.is_loading_stats else "Sem dados para o período.")

    left, right = st.columns([2, 1])
    with left:
        st.subheader("Partidas recentes")
        if cache.matches is None:
            st.caption("Carregando…" if cache.is_loading_matches else "Sem partidas.")
        else:
            st.dataframe(matches_frame(cache.matches), use_container_width=True)
    with right:
        st.subheader("Campeões")
        champs = champions_frame(cache.champions, top=3)
        for _, row in champs.iterrows():
            c = st.columns([1, 3])
            c[0].image(champion_icon_url(int(row["champion_id"])), width=40)
            c[1].markdown(f"**{row['Campeão']}** · {row['Winrate']:.0f}% · {row['KDA']:.1f} KDA")


def render_assistant(services: Services) -> None:
    conv = _get_conversation(services)
    for msg in conv.messages:
        with st.chat_message(msg.role):
            st.markdown(msg.content)
            if msg.insights:
                cols = st.columns(len(msg.insights))
                for col, ins in zip(cols, msg.insights):
                    col.markdown(
                        f"<span style='color:{ins.color}'>**{ins.value}**</span><br>{ins.label}",
                        unsafe_allow_html=True,
                    )

    prompt = st.chat_input("Pergunte algo…", disabled=conv.is_waiting)
    if prompt:
        run_sync(services.assistant.send(prompt, conv))
        st.rerun()


# =============================================================================
# Application principale
# =============================================================================


def main() -> None:
    """Point d'entrée principal de l'application Streamlit."""
    st.set_page_config(page_title="SmartGG", layout="wide")

    load_env_files()
    settings: AppSettings = load_settings()
    st.session_state["app_settings"] = settings
    setup_logging(debug=settings.debug)

    services = _get_services(settings)
    if not st.session_state.get("_session_restored"):
        st.session_state["_session_restored"] = True
        state = run_sync(services.session.restore(background_refresh=False))
        st.session_state["_identity_refresh_pending"] = state.is_authenticated

    if not services.session.state.is_authenticated:
        render_onboarding(services)
        return

    render_header(services)
    page = st.sidebar.radio("Navegação", ["Dashboard", "Assistente"])
    if page == "Dashboard":
        render_dashboard(services)
    else:
        render_assistant(services)

    _refresh_identity_after_render(services)


if __name__ == "__main__":
    main()

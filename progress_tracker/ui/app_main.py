"""Application principale Streamlit."""

import logging
from typing import List, Optional, Tuple
import streamlit as st

from progress_tracker.api.client import RecordStoreClient
from progress_tracker.api.progress import ProgressAPI
from progress_tracker.config import TrackerSettings, load_settings
from progress_tracker.core.aggregator import Aggregator
from progress_tracker.core.errors import TrackerError
from progress_tracker.core.filters import FilterPipeline
from progress_tracker.core.models import ALL, Filters, ProgressRecord, Role
from progress_tracker.core.mutations import MutationCoordinator
from progress_tracker.core.scoring import InsightEngine
from progress_tracker.core.view import ProgressView
from progress_tracker.data.loaders import CSVLoader
from progress_tracker.ui.components.charts import GaugeChart
from progress_tracker.ui.components.widgets import MetricCard
from progress_tracker.ui.pages.records import show_error

st.set_page_config(
    page_title="Suivi de progression",
    page_icon="📊",
    layout="wide"
)

DATE_BUCKET_LABELS = {
    ALL: "Toutes les dates",
    "week": "7 derniers jours",
    "month": "Dernier mois",
    "quarter": "Dernier trimestre",
}


def get_view(settings: TrackerSettings, role: str, caller_id: str, caller_email: str) -> ProgressView:
    """Retourne la vue de session, recréée si l'identité change."""
    identity = (role, caller_id, caller_email)
    if st.session_state.get("identity") != identity:
        client = RecordStoreClient(
            endpoint=settings.endpoint,
            token=settings.token,
            timeout=settings.request_timeout
        )
        api = ProgressAPI(client)
        view = ProgressView(api, role, caller_id or None, caller_email or None)
        st.session_state["identity"] = identity
        st.session_state["view"] = view
        st.session_state["coordinator"] = MutationCoordinator(api, view)
    return st.session_state["view"]


def toggle_auto_refresh(view: ProgressView, enabled: bool, interval: float):
    """Démarre ou annule la tâche de rafraîchissement liée à la vue."""
    task = st.session_state.get("auto_refresh")
    if task is not None and (not enabled or task.callback != view.refresh):
        task.cancel()
        st.session_state["auto_refresh"] = task = None
    if enabled and task is None:
        st.session_state["auto_refresh"] = view.auto_refresh(interval).start()


def sidebar(settings: TrackerSettings) -> Tuple[List[ProgressRecord], Optional[MutationCoordinator]]:
    """Affiche la sidebar et retourne les relevés et le coordinateur d'écriture."""
    st.sidebar.title("📊 Suivi de progression")
    st.sidebar.divider()

    st.sidebar.subheader("Source de données")
    data_source = st.sidebar.radio(
        "Choisir la source",
        options=["API", "CSV"],
        index=0,
        key="data_source_radio"
    )

    if data_source == "CSV":
        uploaded = st.sidebar.file_uploader("Export CSV", type=["csv"])
        if uploaded is None:
            return [], None
        records = CSVLoader(uploaded).load()
        st.sidebar.success(f"✅ {len(records)} relevés chargés")
        return records, None

    roles = [Role.TEACHER.value, Role.STUDENT.value]
    role = st.sidebar.selectbox(
        "Rôle",
        options=roles,
        index=roles.index(settings.caller_role) if settings.caller_role in roles else 0,
        key="role_select"
    )
    caller_id = st.sidebar.text_input("Mon identifiant", value=settings.caller_id or "", key="caller_id_input")
    caller_email = st.sidebar.text_input("Mon email (optionnel)", key="caller_email_input")

    requested = None
    if role == Role.TEACHER.value:
        requested = st.sidebar.text_input(
            "Étudiant (vide = tous)",
            placeholder="identifiant étudiant",
            key="requested_student_input"
        ) or None

    if not settings.token:
        st.sidebar.error("❌ PROGRESS_API_TOKEN doit être défini dans .env")
        return [], None

    view = get_view(settings, role, caller_id, caller_email)

    if st.sidebar.button("🔄 Charger", type="primary"):
        with st.spinner("Chargement..."):
            try:
                view.load(requested)
            except TrackerError as e:
                show_error(e)

    auto = st.sidebar.checkbox(
        f"Rafraîchir toutes les {settings.refresh_interval:.0f} s",
        value=False,
        key="auto_refresh_checkbox"
    )
    toggle_auto_refresh(view, auto, settings.refresh_interval)

    if view.scope is not None:
        st.sidebar.caption(f"Périmètre : {view.scope.describe()}")
    if view.stale:
        st.sidebar.caption("⚠️ Dernier rafraîchissement en échec, données précédentes affichées")

    coordinator = st.session_state["coordinator"] if role == Role.TEACHER.value else None
    return view.records, coordinator


def filter_bar(pipeline: FilterPipeline, records: List[ProgressRecord]) -> Filters:
    """Affiche les filtres et retourne la sélection."""
    choices = pipeline.distinct_values(records)
    col1, col2, col3, col4 = st.columns(4)

    topic = col1.selectbox("Thème", options=[ALL] + choices["topic"], key="filter_topic")
    assessment_type = col2.selectbox("Type", options=[ALL] + choices["assessment_type"], key="filter_type")
    date_bucket = col3.selectbox(
        "Période",
        options=list(DATE_BUCKET_LABELS),
        format_func=DATE_BUCKET_LABELS.get,
        key="filter_date"
    )
    class_name = col4.selectbox("Classe", options=[ALL] + choices["class_name"], key="filter_class")

    return Filters(topic=topic, assessment_type=assessment_type, date_bucket=date_bucket, class_name=class_name)


def main():
    """Point d'entrée principal."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = load_settings()

    records, coordinator = sidebar(settings)

    if not records:
        st.title("📊 Suivi de progression")
        st.info("👈 Chargez des relevés depuis la sidebar")
        return

    pipeline = FilterPipeline(settings.tracker.type_labels)
    filters = filter_bar(pipeline, records)
    filtered = pipeline.apply(records, filters)

    aggregator = Aggregator(filtered, settings.tracker)
    engine = InsightEngine(filtered, settings.tracker)
    gauge = aggregator.gauge()

    st.title(f"📊 Suivi de progression – {len(filtered)} relevés")

    col1, col2, col3, col4 = st.columns([2, 1, 1, 1])
    with col1:
        GaugeChart(gauge["average"], gauge["remainder"], title="Score moyen").render()
    with col2:
        MetricCard("Relevés", str(len(filtered))).render()
    with col3:
        MetricCard("Thèmes", str(len(aggregator.topic_averages()))).render()
    with col4:
        MetricCard("Étudiants à risque", str(len(engine.at_risk_students()))).render()

    st.divider()

    from progress_tracker.ui.pages.progress import ProgressPage
    from progress_tracker.ui.pages.records import RecordsPage
    from progress_tracker.ui.pages.insights import InsightsPage

    tab1, tab2, tab3 = st.tabs(["📈 Progression", "🗂️ Relevés", "🎯 Suivi"])

    with tab1:
        ProgressPage(aggregator).render()

    with tab2:
        RecordsPage(filtered, coordinator, settings.tracker.type_labels).render()

    with tab3:
        InsightsPage(engine).render()


if __name__ == "__main__":
    main()

"""Page des relevés : tableau trié, export et gestion des relevés."""

from typing import List, Optional
import streamlit as st

from progress_tracker.core.errors import NotFoundError, TrackerError, TransientIOError
from progress_tracker.core.models import ProgressRecord
from progress_tracker.core.mutations import MutationCoordinator
from progress_tracker.data.transformers import records_table, records_to_csv, sort_records

SORT_OPTIONS = {
    "Date": "recordedAt",
    "Email": "studentEmail",
    "Thème": "topic",
    "Type": "assessmentType",
    "Score": "score",
}


def show_error(error: TrackerError):
    """Affiche une erreur : avertissement non bloquant pour les erreurs réseau."""
    if isinstance(error, (TransientIOError, NotFoundError)):
        st.warning(f"⚠️ {error}")
    else:
        st.error(f"❌ {error}")


class RecordsPage:
    """Tableau des relevés filtrés et formulaires enseignant."""

    def __init__(
        self,
        records: List[ProgressRecord],
        coordinator: Optional[MutationCoordinator] = None,
        type_labels=None
    ):
        self.records = records
        self.coordinator = coordinator
        self.type_labels = type_labels

    def render(self):
        """Affiche la page complète."""
        col1, col2 = st.columns([3, 1])
        sort_label = col1.selectbox("Trier par", options=list(SORT_OPTIONS), key="records_sort_key")
        direction = col2.radio("Sens", options=["desc", "asc"], horizontal=True, key="records_sort_dir")

        ordered = sort_records(self.records, SORT_OPTIONS[sort_label], direction)
        st.dataframe(records_table(ordered, self.type_labels), use_container_width=True, hide_index=True)

        st.download_button(
            label="Exporter les relevés (CSV)",
            data=records_to_csv(ordered),
            file_name="releves.csv",
            mime="text/csv"
        )

        if self.coordinator is None:
            return

        st.divider()
        tab_add, tab_edit, tab_delete = st.tabs(["➕ Ajouter", "✏️ Modifier", "🗑️ Supprimer"])

        with tab_add:
            self._render_create()
        with tab_edit:
            self._render_update(ordered)
        with tab_delete:
            self._render_delete(ordered)

    def _warn_if_stale(self):
        if self.coordinator.view.stale:
            st.warning("⚠️ Enregistré, mais les relevés affichés n'ont pas pu être rafraîchis")

    def _render_create(self):
        with st.form("create_record", clear_on_submit=True):
            student_id = st.text_input("Identifiant étudiant")
            student_name = st.text_input("Nom (optionnel)")
            class_name = st.text_input("Classe (optionnel)")
            topic = st.text_input("Thème")
            assessment_type = st.text_input("Type d'évaluation", value="General")
            score = st.number_input("Score", min_value=0, max_value=100, value=70, step=1)
            notes = st.text_area("Commentaires")
            submitted = st.form_submit_button("Enregistrer", type="primary")

        if submitted:
            try:
                self.coordinator.create({
                    "studentId": student_id,
                    "studentName": student_name,
                    "className": class_name,
                    "topic": topic,
                    "assessmentType": assessment_type,
                    "score": int(score),
                    "notes": notes,
                })
                st.success("✅ Relevé ajouté")
                self._warn_if_stale()
            except TrackerError as e:
                show_error(e)

    def _render_update(self, records: List[ProgressRecord]):
        editable = [r for r in records if r.id is not None]
        if not editable:
            st.info("Aucun relevé modifiable.")
            return

        record = st.selectbox(
            "Relevé",
            options=editable,
            format_func=lambda r: f"{r.student_email or r.student_id} – {r.topic} ({r.score}%)",
            key="edit_record_select"
        )

        with st.form("update_record"):
            topic = st.text_input("Thème", value=record.topic)
            assessment_type = st.text_input("Type d'évaluation", value=record.assessment_type or "")
            score = st.number_input("Score", min_value=0, max_value=100, value=int(record.score), step=1)
            student_name = st.text_input("Nom", value=record.student_name or "")
            class_name = st.text_input("Classe", value=record.class_name or "")
            notes = st.text_area("Commentaires", value=record.notes or "")
            submitted = st.form_submit_button("Mettre à jour", type="primary")

        if submitted:
            try:
                self.coordinator.update(record.id, {
                    "topic": topic,
                    "assessmentType": assessment_type,
                    "score": int(score),
                    "studentName": student_name,
                    "className": class_name,
                    "notes": notes,
                })
                st.success("✅ Relevé mis à jour")
                self._warn_if_stale()
            except TrackerError as e:
                show_error(e)

    def _render_delete(self, records: List[ProgressRecord]):
        deletable = {r.id: r for r in records if r.id is not None}
        if not deletable:
            st.info("Aucun relevé supprimable.")
            return

        staged = self.coordinator.staged_delete
        if staged is None:
            record_id = st.selectbox(
                "Relevé à supprimer",
                options=list(deletable),
                format_func=lambda i: f"{deletable[i].student_email or deletable[i].student_id} – {deletable[i].topic}",
                key="delete_record_select"
            )
            if st.button("Supprimer…"):
                self.coordinator.stage_delete(record_id)
                st.rerun()
            return

        target = deletable.get(staged)
        label = f"{target.topic} ({target.score}%)" if target else str(staged)
        st.warning(f"Supprimer définitivement le relevé {label} ? Cette action est irréversible.")
        col1, col2 = st.columns(2)
        if col1.button("Confirmer", type="primary"):
            try:
                self.coordinator.confirm_delete()
                st.success("✅ Relevé supprimé")
                self._warn_if_stale()
            except TrackerError as e:
                show_error(e)
        if col2.button("Annuler"):
            self.coordinator.cancel_delete()
            st.rerun()

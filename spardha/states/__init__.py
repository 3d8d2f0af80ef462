from spardha.states.admin_states import AdminEditStates, AdminNotesStates

__all__ = ["AdminEditStates", "AdminNotesStates"]

from aiogram.fsm.state import State, StatesGroup


class AdminNotesStates(StatesGroup):
    """FSM for editing a registration's admin notes."""
    enter_notes = State()   # Admin types the new notes text


class AdminEditStates(StatesGroup):
    """FSM for a full administrative edit of a registration."""
    enter_payload = State()   # Admin sends the edited registration as JSON

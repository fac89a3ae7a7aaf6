from PySide6.QtWidgets import QMainWindow, QLabel
from PySide6.QtCore import Qt

from session.commands import command_for_key
from session.debug_session import DebugSession
from ui.frame_view import FrameView
from ui.theme import DARK_THEME


GENERATING_TEXT = "Generating frame…"

_KEY_NAMES = {
    Qt.Key_Right: "Right",
    Qt.Key_Left: "Left",
    Qt.Key_A: "A",
    Qt.Key_D: "D",
    Qt.Key_W: "W",
    Qt.Key_S: "S",
    Qt.Key_Q: "Q",
    Qt.Key_E: "E",
}


class DebugWindow(QMainWindow):
    """
    Live debug window. Right/Left walk the timeline, A/D W/S Q/E pan the
    camera and append a freshly generated frame.
    """
    def __init__(self, session: DebugSession, width: int = 1024, height: int = 1024):
        super().__init__()
        self.session = session

        self.setWindowTitle("LOST Live Debug")
        self.setStyleSheet(DARK_THEME)

        self.view = FrameView(width, height)
        self.view.set_star_names(session.star_names)
        self.setCentralWidget(self.view)

        self.position_label = QLabel()
        self.statusBar().addPermanentWidget(self.position_label)

        self._show_current()

    # ─────────────────────────────
    # Input
    # ─────────────────────────────
    def keyPressEvent(self, event):
        command = command_for_key(_KEY_NAMES.get(event.key(), ""))
        if command is None:
            super().keyPressEvent(event)
            return

        if command.is_navigation and not self.session.timeline:
            return

        if not command.is_navigation:
            # the pipeline blocks the event loop; paint the busy HUD first
            self.view.set_hud_text(GENERATING_TEXT)
            self.view.repaint()

        try:
            changed = self.session.dispatch(command)
            if not changed and not command.is_navigation:
                self.statusBar().showMessage("Frame generation failed, timeline unchanged", 3000)
        finally:
            self._show_current()

    def closeEvent(self, event):
        self.session.close()
        super().closeEvent(event)

    # ─────────────────────────────
    # Render
    # ─────────────────────────────
    def _show_current(self):
        s = self.session
        self.view.set_frame(s.current_image, s.current_record, s.star_index)
        self.view.set_hud_text(s.hud_text)

        record = s.current_record
        if record is None:
            self.position_label.setText("No frames")
        else:
            self.position_label.setText(
                f"{s.timeline.cursor + 1}/{len(s.timeline)}  frame_{record.frame_index:04d}"
            )

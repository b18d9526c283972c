from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence


class UserInputHandler:
    """
    Handles keyboard input for the annotation viewer.
    """
    def __init__(self, viewer):
        """
        Initializes the handler with a reference to the viewer.

        Args:
            viewer (AnnotationViewer): The viewer receiving the key events.
        """
        self.viewer = viewer

    def handle_key_press(self, event):
        """
        Handles key press events for the viewer.

        Returns:
            bool: True if the event was handled.
        """
        view = self.viewer.view_controller

        if event.matches(QKeySequence.Copy):
            handled = self.viewer.copy_selected_content()
        elif event.key() == Qt.Key_Escape:
            handled = self.viewer.close_selection()
        elif event.matches(QKeySequence.ZoomIn) or event.key() == Qt.Key_Plus:
            view.zoom_in()
            handled = True
        elif event.matches(QKeySequence.ZoomOut) or event.key() == Qt.Key_Minus:
            view.zoom_out()
            handled = True
        elif event.key() in (Qt.Key_PageDown, Qt.Key_Right):
            handled = view.next_page()
        elif event.key() in (Qt.Key_PageUp, Qt.Key_Left):
            handled = view.prev_page()
        else:
            handled = False

        if handled:
            event.accept()
        else:
            event.ignore()
        return handled

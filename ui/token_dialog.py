# ui/token_dialog.py
import sys

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QInputDialog, QLineEdit


def main() -> int:
    app = QApplication(sys.argv)
    dialog = QInputDialog()
    dialog.setWindowTitle("Queue Mirror")
    dialog.setLabelText("Your Spotify token is about to expire.\nPaste a new one:")
    dialog.setTextEchoMode(QLineEdit.Password)
    dialog.setWindowFlag(Qt.WindowStaysOnTopHint, True)
    dialog.resize(420, dialog.sizeHint().height())

    if not dialog.exec():
        return 1

    token = dialog.textValue().strip()
    if not token:
        return 1
    print(token)
    app.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())

DARK_THEME = """
QMainWindow, QWidget {
    background-color: #0f1418;
    color: #dfe6eb;
    font-family: Segoe UI;
    font-size: 10pt;
}

QLabel {
    color: #dfe6eb;
}

QStatusBar {
    background-color: #1b2328;
    border-top: 1px solid #2a353c;
    color: #8b95a3;
}
"""

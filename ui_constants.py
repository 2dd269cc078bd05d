SETTINGS_LAST_TABLE_ID = "last_drop_table_id"

DARK_STYLESHEET = """
QWidget {
    background-color: #1e1f22;
    color: #f0f0f0;
    font-size: 12px;
}
QMenuBar, QMenu, QMenuBar::item, QMenu::item {
    background-color: #1e1f22;
    color: #f0f0f0;
}
QMenu::item:selected, QMenuBar::item:selected {
    background-color: #2f3136;
}
QToolTip {
    background-color: #2b2d31;
    color: #ffffff;
    border: 1px solid #3a3c40;
}
QLineEdit, QComboBox {
    background-color: #2b2d31;
    color: #f0f0f0;
    border: 1px solid #3a3c40;
    border-radius: 4px;
    padding: 4px;
}
QPushButton, QToolButton {
    background-color: #2f3136;
    color: #f0f0f0;
    border: 1px solid #3a3c40;
    border-radius: 4px;
    padding: 4px 6px;
}
QPushButton:hover, QToolButton:hover {
    background-color: #3a3c40;
}
QListWidget {
    background-color: #1f2124;
    alternate-background-color: #26282c;
    border: 1px solid #3a3c40;
}
QStatusBar {
    background-color: #1e1f22;
    color: #bfc3c9;
}
"""

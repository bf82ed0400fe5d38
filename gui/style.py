"""
Viewer Theme Stylesheet

Dark Qt stylesheet for reading images: neutral greys around a black
image area so the grayscale content keeps its contrast.
"""

# Viewer color palette
COLORS = {
    "background": "#1E1E1E",
    "surface": "#252526",
    "border": "#3C3C3C",
    "text": "#DDDDDD",
    "text_disabled": "#777777",
    "accent": "#2962FF",
    "accent_hover": "#1E88E5",
    "error": "#E53935",
}

# Font settings
FONTS = {
    "family": "Segoe UI, Roboto, Helvetica Neue, Arial, sans-serif",
    "size": "10pt",
    "size_header": "11pt",
}


def get_stylesheet() -> str:
    """Get the complete Qt stylesheet for the viewer theme."""
    return f"""
    QWidget {{
        background-color: {COLORS["background"]};
        color: {COLORS["text"]};
        font-family: {FONTS["family"]};
        font-size: {FONTS["size"]};
    }}
    
    QWidget:disabled {{
        color: {COLORS["text_disabled"]};
    }}
    
    QGroupBox {{
        background-color: {COLORS["surface"]};
        border: 1px solid {COLORS["border"]};
        border-radius: 4px;
        margin-top: 14px;
        padding: 8px;
        font-size: {FONTS["size_header"]};
    }}
    
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 8px;
        padding: 0 4px;
    }}
    
    QPushButton {{
        background-color: {COLORS["accent"]};
        color: #FFFFFF;
        border: none;
        border-radius: 4px;
        padding: 6px 12px;
    }}
    
    QPushButton:hover {{
        background-color: {COLORS["accent_hover"]};
    }}
    
    QComboBox, QDoubleSpinBox, QPlainTextEdit {{
        background-color: {COLORS["surface"]};
        border: 1px solid {COLORS["border"]};
        border-radius: 3px;
        padding: 2px 4px;
    }}
    
    QStatusBar {{
        border-top: 1px solid {COLORS["border"]};
    }}
    """


class ViewerStyle:
    """Helper class for applying the viewer theme."""
    
    @staticmethod
    def apply(app) -> None:
        """Apply the theme to a QApplication."""
        app.setStyleSheet(get_stylesheet())
    
    @staticmethod
    def get_color(name: str) -> str:
        return COLORS.get(name, COLORS["text"])

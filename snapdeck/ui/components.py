"""
Shared UI pieces - design tokens, section cards, live log panel, snackbars.
"""

from datetime import datetime
from typing import List, Optional

import flet as ft


# =============================================================================
# DESIGN TOKENS
# =============================================================================
class DesignTokens:
    """Centralized design tokens for consistent styling."""
    # Colors - Deep dark theme
    BG_PRIMARY = "#121212"
    BG_SURFACE = "#1A1A1B"
    BG_CARD = "#242426"
    BG_ELEVATED = "#2D2D30"
    
    # Text colors
    TEXT_PRIMARY = "#FFFFFF"
    TEXT_SECONDARY = "#B3B3B3"
    TEXT_TERTIARY = "#808080"
    TEXT_MUTED = "#5C5C5C"
    
    # Accent colors (desaturated)
    ACCENT_PRIMARY = "#7C4DFF"
    ACCENT_PRIMARY_HOVER = "#9E7AFF"
    ACCENT_SECONDARY = "#536DFE"
    ACCENT_DANGER = "#E57373"
    ACCENT_SUCCESS = "#81C784"
    ACCENT_WARNING = "#FFB74D"
    
    # Log colors
    LOG_INFO = "#B3B3B3"
    LOG_SUCCESS = "#81C784"
    LOG_WARNING = "#FFB74D"
    LOG_ERROR = "#E57373"
    LOG_PROGRESS = "#9E7AFF"
    LOG_TIMESTAMP = "#5C5C5C"
    LOG_BG_ALT = "#1F1F21"
    
    # Spacing
    SPACING_XS = 4
    SPACING_SM = 8
    SPACING_MD = 16
    SPACING_LG = 24
    
    # Border radius
    RADIUS_SM = 8
    RADIUS_MD = 12
    RADIUS_LG = 16
    
    BUTTON_HEIGHT_MD = 44
    
    FONT_MONO = "JetBrains Mono, Consolas, Monaco, monospace"


def primary_button(label: str, icon: str, on_click) -> ft.ElevatedButton:
    """Main call-to-action button."""
    return ft.ElevatedButton(
        content=ft.Row(
            controls=[
                ft.Icon(icon, size=18),
                ft.Text(label, size=14, weight=ft.FontWeight.W_600),
            ],
            alignment=ft.MainAxisAlignment.CENTER,
            spacing=8,
        ),
        style=ft.ButtonStyle(
            color=DesignTokens.TEXT_PRIMARY,
            bgcolor={
                ft.ControlState.DEFAULT: DesignTokens.ACCENT_PRIMARY,
                ft.ControlState.HOVERED: DesignTokens.ACCENT_PRIMARY_HOVER,
                ft.ControlState.DISABLED: ft.Colors.with_opacity(0.3, DesignTokens.ACCENT_PRIMARY),
            },
            padding=ft.Padding.symmetric(horizontal=24, vertical=12),
            shape=ft.RoundedRectangleBorder(radius=DesignTokens.RADIUS_MD),
        ),
        height=DesignTokens.BUTTON_HEIGHT_MD,
        on_click=on_click,
    )


def set_button_label(button: ft.ElevatedButton, label: str) -> None:
    """Swap the text of a primary_button in place."""
    row = button.content
    if isinstance(row, ft.Row) and len(row.controls) > 1:
        row.controls[1].value = label


def section_card(title: str, icon: str, controls: list, expand=None) -> ft.Container:
    """Build a styled section card."""
    return ft.Container(
        content=ft.Column(
            controls=[
                ft.Row(
                    controls=[
                        ft.Icon(icon, size=20, color=ft.Colors.INDIGO_200),
                        ft.Text(title, size=16, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE),
                    ],
                    spacing=10,
                ),
                ft.Divider(height=1, color=ft.Colors.WHITE10),
                *controls,
            ],
            spacing=10,
            expand=expand is not None,
        ),
        padding=20,
        border_radius=DesignTokens.RADIUS_MD,
        bgcolor=DesignTokens.BG_CARD,
        expand=expand,
    )


def show_snackbar(page: ft.Page, message: str, success: bool = True) -> None:
    """Show a snackbar notification."""
    snackbar = ft.SnackBar(
        content=ft.Row(
            controls=[
                ft.Icon(
                    ft.Icons.CHECK_CIRCLE if success else ft.Icons.ERROR,
                    color=ft.Colors.WHITE,
                    size=18,
                ),
                ft.Text(message, color=ft.Colors.WHITE),
            ],
            spacing=10,
        ),
        bgcolor=ft.Colors.GREEN_700 if success else ft.Colors.RED_700,
        duration=3000,
    )
    # Clean up old snackbars and add new one
    for ctrl in list(page.overlay):
        if isinstance(ctrl, ft.SnackBar):
            page.overlay.remove(ctrl)
    page.overlay.append(snackbar)
    snackbar.open = True
    page.update()


class LogPanel:
    """Live, colour-coded log with rotation."""
    
    # Maximum log entries to prevent unbounded growth
    MAX_LOG_ENTRIES = 500
    LOG_TRIM_COUNT = 200
    
    COLORS = {
        "info": DesignTokens.LOG_INFO,
        "success": DesignTokens.LOG_SUCCESS,
        "warning": DesignTokens.LOG_WARNING,
        "error": DesignTokens.LOG_ERROR,
        "progress": DesignTokens.LOG_PROGRESS,
    }
    
    ICONS = {
        "info": ft.Icons.INFO_OUTLINE,
        "success": ft.Icons.CHECK_CIRCLE_OUTLINE,
        "warning": ft.Icons.WARNING_AMBER_OUTLINED,
        "error": ft.Icons.ERROR_OUTLINE,
        "progress": ft.Icons.TRENDING_UP,
    }
    
    def __init__(self, page: ft.Page, title: str = "Log") -> None:
        self.page = page
        self._entry_index = 0
        self._log_view = ft.ListView(controls=[], spacing=0, auto_scroll=True, expand=True)
        self._empty_state = ft.Container(
            content=ft.Column(
                controls=[
                    ft.Icon(ft.Icons.TERMINAL_OUTLINED, size=32, color=DesignTokens.TEXT_MUTED),
                    ft.Text("No activity yet", size=14, color=DesignTokens.TEXT_TERTIARY),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                alignment=ft.MainAxisAlignment.CENTER,
                spacing=4,
            ),
            alignment=ft.Alignment(0, 0),
            expand=True,
        )
        self._log_container = ft.Container(
            content=self._empty_state,
            expand=True,
            border_radius=DesignTokens.RADIUS_MD,
            bgcolor=DesignTokens.BG_SURFACE,
            padding=DesignTokens.SPACING_SM,
            clip_behavior=ft.ClipBehavior.HARD_EDGE,
        )
        self.container = ft.Container(
            content=ft.Column(
                controls=[
                    ft.Row(
                        controls=[
                            ft.Text(title, size=16, weight=ft.FontWeight.W_700, color=DesignTokens.TEXT_PRIMARY),
                            ft.Container(expand=True),
                            ft.IconButton(
                                icon=ft.Icons.DELETE_OUTLINE,
                                icon_color=DesignTokens.TEXT_MUTED,
                                icon_size=18,
                                tooltip="Clear log",
                                on_click=lambda _: self.clear(),
                            ),
                        ],
                    ),
                    self._log_container,
                ],
                spacing=DesignTokens.SPACING_SM,
                expand=True,
            ),
            padding=DesignTokens.SPACING_MD,
            border_radius=DesignTokens.RADIUS_LG,
            bgcolor=DesignTokens.BG_CARD,
            expand=True,
        )
    
    @property
    def entries(self) -> List[ft.Control]:
        return self._log_view.controls
    
    def add(self, message: str, level: str = "info") -> None:
        """Append an entry. Caller is responsible for page.update()."""
        if self._log_container.content is self._empty_state:
            self._log_container.content = self._log_view
        
        color = self.COLORS.get(level, DesignTokens.LOG_INFO)
        self._entry_index += 1
        row_bg = DesignTokens.LOG_BG_ALT if self._entry_index % 2 == 0 else "transparent"
        
        entry = ft.Container(
            content=ft.Row(
                controls=[
                    ft.Text(
                        datetime.now().strftime("%H:%M:%S"),
                        size=11,
                        color=DesignTokens.LOG_TIMESTAMP,
                        font_family=DesignTokens.FONT_MONO,
                        width=65,
                    ),
                    ft.Icon(self.ICONS.get(level, ft.Icons.CIRCLE), size=14, color=color),
                    ft.Text(message, size=12, color=color, font_family=DesignTokens.FONT_MONO, expand=True),
                ],
                spacing=10,
                vertical_alignment=ft.CrossAxisAlignment.START,
            ),
            padding=ft.Padding.symmetric(vertical=4, horizontal=8),
            border_radius=4,
            bgcolor=row_bg,
        )
        
        if len(self._log_view.controls) >= self.MAX_LOG_ENTRIES:
            self._log_view.controls = self._log_view.controls[-self.LOG_TRIM_COUNT:]
        self._log_view.controls.append(entry)
    
    def clear(self) -> None:
        self._log_view.controls.clear()
        self._entry_index = 0
        self._log_container.content = self._empty_state
        self.page.update()

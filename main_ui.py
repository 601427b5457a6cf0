"""
SnapDeck: Desktop Application
-----------------------------

A Flet interface that turns photos of Japanese text into Mochi flashcards.
"""

import logging
import traceback
from typing import Callable, Dict

import flet as ft

from snapdeck import __version__
from snapdeck.controller import AppController
from snapdeck.ui import QuizView, SettingsView, WorkbenchView
from snapdeck.utils.logger import setup_logger

logger = logging.getLogger("snapdeck.app")


# =============================================================================
# NAVIGATION RAIL (SIDEBAR)
# =============================================================================

def create_navigation_rail(
    on_change: Callable[[int], None],
    selected_index: int = 0
) -> ft.NavigationRail:
    """
    Create the main navigation sidebar.
    
    Args:
        on_change: Callback when navigation selection changes
        selected_index: Currently selected index
        
    Returns:
        Configured NavigationRail control
    """
    return ft.NavigationRail(
        selected_index=selected_index,
        label_type=ft.NavigationRailLabelType.ALL,
        min_width=100,
        min_extended_width=200,
        extended=True,
        group_alignment=-0.9,
        destinations=[
            ft.NavigationRailDestination(
                icon=ft.Icons.PHOTO_CAMERA_OUTLINED,
                selected_icon=ft.Icons.PHOTO_CAMERA_ROUNDED,
                label="Workbench",
                padding=ft.Padding.symmetric(vertical=8),
            ),
            ft.NavigationRailDestination(
                icon=ft.Icons.QUIZ_OUTLINED,
                selected_icon=ft.Icons.QUIZ_ROUNDED,
                label="Quiz",
                padding=ft.Padding.symmetric(vertical=8),
            ),
            ft.NavigationRailDestination(
                icon=ft.Icons.SETTINGS_OUTLINED,
                selected_icon=ft.Icons.SETTINGS_ROUNDED,
                label="Settings",
                padding=ft.Padding.symmetric(vertical=8),
            ),
        ],
        on_change=lambda e: on_change(e.control.selected_index),
        bgcolor="transparent",
    )


# =============================================================================
# MAIN APPLICATION
# =============================================================================

class SnapDeckApp:
    """Main application window."""
    
    def __init__(self, page: ft.Page) -> None:
        self.page = page
        self.controller = AppController()
        self._setup_page()
        self._init_views()
        self._build_ui()
        self._report_agent()
    
    def _setup_page(self) -> None:
        """Configure page settings and theme."""
        self.page.title = "SnapDeck"
        self.page.theme_mode = ft.ThemeMode.DARK
        self.page.bgcolor = "#121212"
        self.page.theme = ft.Theme(
            color_scheme_seed="#7C4DFF",
            font_family="Inter, Hiragino Sans, Noto Sans JP, Segoe UI, sans-serif",
        )
        self.page.padding = 0
        self.page.spacing = 0
        self.page.window.min_width = 900
        self.page.window.min_height = 650
        self.page.window.width = 1200
        self.page.window.height = 820
    
    def _init_views(self) -> None:
        self.workbench = WorkbenchView(self.page, self.controller)
        self.quiz = QuizView(self.page, self.controller)
        self.settings = SettingsView(self.page, self.controller)
        
        self.views: Dict[int, ft.Container] = {
            0: self.workbench.container,
            1: self.quiz.container,
            2: self.settings.container,
        }
        self.current_view_index: int = 0
    
    def _build_ui(self) -> None:
        """Build the main UI layout."""
        self.content_area = ft.Container(
            content=self.views[0],
            expand=True,
            border_radius=ft.BorderRadius.only(top_left=16, bottom_left=16),
            bgcolor="#1A1A1B",
        )
        
        self.nav_rail = create_navigation_rail(on_change=self._on_nav_change, selected_index=0)
        
        sidebar = ft.Container(
            content=ft.Column(
                controls=[
                    ft.Container(
                        content=ft.Row(
                            controls=[
                                ft.Icon(ft.Icons.AUTO_AWESOME, color=ft.Colors.INDIGO_200, size=28),
                                ft.Text("SnapDeck", size=20, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE),
                            ],
                            alignment=ft.MainAxisAlignment.CENTER,
                            spacing=10,
                        ),
                        padding=ft.Padding.only(top=20, bottom=10),
                    ),
                    ft.Divider(height=1, color=ft.Colors.WHITE10),
                    ft.Container(content=self.nav_rail, expand=True),
                    ft.Container(
                        content=ft.Text(
                            f"v{__version__}",
                            size=11,
                            color=ft.Colors.WHITE24,
                            text_align=ft.TextAlign.CENTER,
                        ),
                        padding=ft.Padding.only(bottom=20),
                        alignment=ft.Alignment(0, 0),
                    ),
                ],
                spacing=0,
            ),
            width=220,
            bgcolor="#161617",
        )
        
        self.page.add(
            ft.Row(
                controls=[
                    sidebar,
                    ft.VerticalDivider(width=1, color=ft.Colors.WHITE10),
                    self.content_area,
                ],
                spacing=0,
                expand=True,
            )
        )
    
    def _report_agent(self) -> None:
        availability = self.controller.check_agent()
        if availability.available:
            self.workbench.log.add(f"ready (agent: {availability.path})", "success")
        else:
            self.workbench.log.add(availability.error or "Agent not found", "error")
        self.page.update()
    
    def _on_nav_change(self, index: int) -> None:
        if index == self.current_view_index:
            return
        self.current_view_index = index
        self.content_area.content = self.views[index]
        self.page.update()


def main(page: ft.Page) -> None:
    """
    Main entry point for Flet application.
    
    Args:
        page: Flet page instance
    """
    setup_logger()
    try:
        SnapDeckApp(page)
    except Exception:
        error_text = traceback.format_exc()
        logger.error("UI failed to start:\n%s", error_text)
        page.add(
            ft.Container(
                content=ft.Column(
                    controls=[
                        ft.Text("UI failed to start", size=20, weight=ft.FontWeight.BOLD, color=ft.Colors.RED_400),
                        ft.Container(
                            content=ft.Text(error_text, size=11, selectable=True, color=ft.Colors.WHITE70),
                            padding=10,
                            bgcolor=ft.Colors.with_opacity(0.08, ft.Colors.WHITE),
                            border_radius=8,
                        ),
                    ],
                    spacing=10,
                ),
                padding=20,
            )
        )
        page.update()


def run() -> None:
    ft.run(main)


if __name__ == "__main__":
    run()

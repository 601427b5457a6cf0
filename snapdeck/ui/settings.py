"""
Settings View - Credentials and Service Configuration
------------------------------------------------------

Edits the Mochi API key, the OCR token and endpoint, and shows whether
the agent executable was found.
"""

from typing import Optional

import flet as ft

from ..config import Config
from ..controller import AppController
from .components import section_card, show_snackbar


def _text_field(label: str, value: str, secret: bool = False, hint: str = "") -> ft.TextField:
    return ft.TextField(
        value=value,
        label=label,
        hint_text=hint,
        password=secret,
        can_reveal_password=secret,
        border_color=ft.Colors.WHITE24,
        focused_border_color=ft.Colors.INDIGO_200,
        label_style=ft.TextStyle(color=ft.Colors.WHITE54),
        text_style=ft.TextStyle(color=ft.Colors.WHITE),
        cursor_color=ft.Colors.INDIGO_200,
        prefix_icon=ft.Icons.KEY_ROUNDED if secret else None,
    )


class SettingsView:
    """
    Settings view for credentials and endpoints.
    
    Binds to SettingsManager (through the controller) for persistent storage.
    """
    
    def __init__(self, page: ft.Page, controller: AppController) -> None:
        """
        Initialize the Settings view.
        
        Args:
            page: Flet page instance for updates
            controller: Application controller
        """
        self.page = page
        self.controller = controller
        self.settings = controller.settings
        
        self._mochi_key_field: Optional[ft.TextField] = None
        self._ocr_token_field: Optional[ft.TextField] = None
        self._ocr_url_field: Optional[ft.TextField] = None
        self._meaning_field: Optional[ft.TextField] = None
        self._agent_status: Optional[ft.Text] = None
        
        self._container = self._build_view()
    
    @property
    def container(self) -> ft.Container:
        """Get the main container for this view."""
        return self._container
    
    def _build_view(self) -> ft.Container:
        self._mochi_key_field = _text_field("Mochi API Key", self.controller.get_mochi_key(), secret=True)
        self._ocr_token_field = _text_field("OCR Token", self.controller.get_ocr_token(), secret=True)
        self._ocr_url_field = _text_field(
            "OCR Endpoint URL",
            self.settings.get("OCR_API_URL", Config.OCR_API_URL),
            hint="https://.../layout-parsing",
        )
        self._meaning_field = _text_field(
            "Meaning language",
            self.settings.get("MEANING_LANGUAGE", Config.MEANING_LANGUAGE),
        )
        self._agent_status = ft.Text("", size=13)
        self._refresh_agent_status()
        
        save_button = ft.ElevatedButton(
            content=ft.Row(
                controls=[
                    ft.Icon(ft.Icons.SAVE_ROUNDED, size=20),
                    ft.Text("Save Settings", size=15, weight=ft.FontWeight.W_500),
                ],
                spacing=8,
                alignment=ft.MainAxisAlignment.CENTER,
            ),
            style=ft.ButtonStyle(
                color=ft.Colors.WHITE,
                bgcolor={
                    ft.ControlState.DEFAULT: ft.Colors.INDIGO_600,
                    ft.ControlState.HOVERED: ft.Colors.INDIGO_500,
                },
                padding=ft.Padding.symmetric(horizontal=30, vertical=15),
                shape=ft.RoundedRectangleBorder(radius=10),
            ),
            on_click=self._on_save_click,
        )
        reset_button = ft.TextButton(
            content=ft.Text("Reset to Defaults", color=ft.Colors.WHITE54),
            on_click=self._on_reset_click,
        )
        
        content = ft.Column(
            controls=[
                ft.Row(
                    controls=[
                        ft.Icon(ft.Icons.SETTINGS_ROUNDED, size=32, color=ft.Colors.INDIGO_200),
                        ft.Column(
                            controls=[
                                ft.Text("Settings", size=28, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE),
                                ft.Text(
                                    f"Stored in {self.settings.settings_file}",
                                    size=12,
                                    color=ft.Colors.WHITE54,
                                ),
                            ],
                            spacing=2,
                        ),
                    ],
                    spacing=15,
                ),
                section_card(
                    "Mochi Cards",
                    ft.Icons.STYLE_OUTLINED,
                    [
                        ft.Text(
                            "Find your API key in Mochi under Account Settings → API Keys.",
                            size=12,
                            color=ft.Colors.WHITE38,
                        ),
                        self._mochi_key_field,
                    ],
                ),
                section_card(
                    "OCR",
                    ft.Icons.DOCUMENT_SCANNER_OUTLINED,
                    [self._ocr_token_field, self._ocr_url_field, self._meaning_field],
                ),
                section_card(
                    "Agent",
                    ft.Icons.SMART_TOY_OUTLINED,
                    [
                        self._agent_status,
                        ft.TextButton(content=ft.Text("Check again"), on_click=self._on_recheck_click),
                    ],
                ),
                ft.Row(
                    controls=[reset_button, ft.Container(expand=True), save_button],
                    alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                ),
            ],
            spacing=20,
            scroll=ft.ScrollMode.AUTO,
            expand=True,
        )
        return ft.Container(content=content, expand=True, padding=24)
    
    def _refresh_agent_status(self, refresh: bool = False) -> None:
        availability = self.controller.check_agent(refresh=refresh)
        if availability.available:
            self._agent_status.value = f"Found: {availability.path}"
            self._agent_status.color = ft.Colors.GREEN_300
        else:
            self._agent_status.value = availability.error or "Not found"
            self._agent_status.color = ft.Colors.RED_300
    
    def _on_recheck_click(self, e: ft.ControlEvent) -> None:
        self._refresh_agent_status(refresh=True)
        self.page.update()
    
    def _on_save_click(self, e: ft.ControlEvent) -> None:
        """Handle save button click."""
        try:
            self.controller.set_mochi_key(self._mochi_key_field.value or "")
            self.controller.set_ocr_token(self._ocr_token_field.value or "")
            self.settings.set("OCR_API_URL", (self._ocr_url_field.value or "").strip())
            self._meaning_field.value = self.controller.set_meaning_language(self._meaning_field.value or "")
            show_snackbar(self.page, "Settings saved successfully!")
        except Exception as ex:
            show_snackbar(self.page, f"Error saving settings: {ex}", success=False)
    
    def _on_reset_click(self, e: ft.ControlEvent) -> None:
        """Handle reset button click."""
        self.controller.reset_settings()
        self._mochi_key_field.value = self.controller.get_mochi_key()
        self._ocr_token_field.value = self.controller.get_ocr_token()
        self._ocr_url_field.value = self.settings.get("OCR_API_URL", "")
        self._meaning_field.value = self.settings.get("MEANING_LANGUAGE", Config.MEANING_LANGUAGE)
        show_snackbar(self.page, "Settings reset to defaults")

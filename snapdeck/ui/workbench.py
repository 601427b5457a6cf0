"""
Workbench View - Photo to Deck
------------------------------

Pick an image, extract its Japanese words, prune the list, and publish
the words as a new Mochi deck with live progress and logging.
"""

import time
from typing import Optional

import flet as ft

from ..config import Config
from ..controller import AppController
from ..errors import SnapDeckError
from ..models import DeckProgress, DeckResult, JapaneseWord
from .components import (
    DesignTokens,
    LogPanel,
    primary_button,
    section_card,
    set_button_label,
    show_snackbar,
)


class WorkbenchView:
    """
    Image → words → deck workflow.
    
    All state lives in the controller's AppState; this view only renders it.
    """
    
    def __init__(self, page: ft.Page, controller: AppController) -> None:
        """
        Initialize the Workbench view.
        
        Args:
            page: Flet page instance for updates
            controller: Application controller holding state and services
        """
        self.page = page
        self.controller = controller
        self._file_picker: Optional[ft.FilePicker] = None
        
        # UI References
        self._drop_zone: Optional[ft.Container] = None
        self._preview: Optional[ft.Container] = None
        self._preview_image: Optional[ft.Image] = None
        self._preview_name: Optional[ft.Text] = None
        self._parse_button: Optional[ft.ElevatedButton] = None
        self._create_button: Optional[ft.ElevatedButton] = None
        self._deck_name_field: Optional[ft.TextField] = None
        self._words_view: Optional[ft.ListView] = None
        self._words_count: Optional[ft.Text] = None
        self._progress_bar: Optional[ft.ProgressBar] = None
        self._progress_text: Optional[ft.Text] = None
        
        self.log = LogPanel(page, "Activity")
        self._container = self._build_view()
    
    @property
    def container(self) -> ft.Container:
        """Get the main container for this view."""
        return self._container
    
    # =========================================================================
    # LAYOUT
    # =========================================================================
    
    def _build_view(self) -> ft.Container:
        header = ft.Column(
            controls=[
                ft.Text("Workbench", size=32, weight=ft.FontWeight.W_700, color=DesignTokens.TEXT_PRIMARY),
                ft.Text(
                    "Turn a photo of Japanese text into Mochi flashcards",
                    size=14,
                    color=DesignTokens.TEXT_TERTIARY,
                ),
            ],
            spacing=6,
        )
        
        left = ft.Column(
            controls=[self._build_image_section(), self._build_words_section()],
            spacing=DesignTokens.SPACING_MD,
            expand=3,
        )
        right = ft.Column(
            controls=[self._build_deck_section(), self.log.container],
            spacing=DesignTokens.SPACING_MD,
            expand=2,
        )
        
        return ft.Container(
            content=ft.Column(
                controls=[
                    header,
                    ft.Row(
                        controls=[left, right],
                        spacing=DesignTokens.SPACING_LG,
                        vertical_alignment=ft.CrossAxisAlignment.START,
                        expand=True,
                    ),
                ],
                spacing=DesignTokens.SPACING_MD,
                expand=True,
            ),
            expand=True,
            padding=DesignTokens.SPACING_LG,
        )
    
    def _build_image_section(self) -> ft.Container:
        self._drop_zone = ft.Container(
            content=ft.Column(
                controls=[
                    ft.Icon(ft.Icons.ADD_PHOTO_ALTERNATE_OUTLINED, size=48, color=DesignTokens.TEXT_MUTED),
                    ft.Text("Select an image", size=16, weight=ft.FontWeight.W_600, color=DesignTokens.TEXT_SECONDARY),
                    ft.Text(
                        " / ".join(Config.IMAGE_EXTENSIONS),
                        size=12,
                        color=DesignTokens.TEXT_MUTED,
                    ),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                alignment=ft.MainAxisAlignment.CENTER,
                spacing=4,
            ),
            height=220,
            border_radius=DesignTokens.RADIUS_LG,
            bgcolor=ft.Colors.with_opacity(0.02, ft.Colors.WHITE),
            border=ft.border.all(2, ft.Colors.with_opacity(0.15, ft.Colors.WHITE)),
            on_click=self._on_pick_click,
            ink=True,
        )
        
        self._preview_image = ft.Image(src="", height=220, fit=ft.BoxFit.CONTAIN)
        self._preview_name = ft.Text("", size=12, color=DesignTokens.TEXT_TERTIARY)
        self._preview = ft.Container(
            content=ft.Column(
                controls=[
                    self._preview_image,
                    ft.Row(
                        controls=[
                            self._preview_name,
                            ft.Container(expand=True),
                            ft.TextButton(
                                content=ft.Text("Clear", color=DesignTokens.ACCENT_DANGER),
                                on_click=self._on_clear_click,
                            ),
                        ],
                    ),
                ],
                spacing=4,
            ),
            visible=False,
        )
        
        self._parse_button = primary_button("Parse", ft.Icons.AUTO_AWESOME, self._on_parse_click)
        self._parse_button.disabled = True
        
        return section_card(
            "Image",
            ft.Icons.IMAGE_OUTLINED,
            [self._drop_zone, self._preview, self._parse_button],
        )
    
    def _build_words_section(self) -> ft.Container:
        self._words_count = ft.Text("No cards yet", size=12, color=DesignTokens.TEXT_TERTIARY)
        self._words_view = ft.ListView(controls=[], spacing=4, expand=True)
        return section_card(
            "Words",
            ft.Icons.TRANSLATE,
            [self._words_count, self._words_view],
            expand=True,
        )
    
    def _build_deck_section(self) -> ft.Container:
        self._deck_name_field = ft.TextField(
            label="Deck name",
            hint_text="JP YYYY-MM-DD",
            border_color=ft.Colors.WHITE24,
            focused_border_color=ft.Colors.INDIGO_200,
            label_style=ft.TextStyle(color=ft.Colors.WHITE54),
            text_style=ft.TextStyle(color=ft.Colors.WHITE),
        )
        self._create_button = primary_button("Create Deck", ft.Icons.ROCKET_LAUNCH_ROUNDED, self._on_create_click)
        self._create_button.disabled = True
        
        self._progress_text = ft.Text("", size=12, color=DesignTokens.ACCENT_PRIMARY)
        self._progress_bar = ft.ProgressBar(
            value=0,
            color=DesignTokens.ACCENT_PRIMARY,
            bgcolor=ft.Colors.with_opacity(0.15, ft.Colors.WHITE),
            border_radius=4,
        )
        
        return section_card(
            "Mochi Deck",
            ft.Icons.STYLE_OUTLINED,
            [self._deck_name_field, self._create_button, self._progress_bar, self._progress_text],
        )
    
    # =========================================================================
    # RENDERING
    # =========================================================================
    
    def _word_row(self, index: int, word: JapaneseWord) -> ft.Container:
        headline = word.word if not word.reading or word.reading == word.word else f"{word.word}  ({word.reading})"
        return ft.Container(
            content=ft.Row(
                controls=[
                    ft.Text(headline, size=15, weight=ft.FontWeight.W_600, color=DesignTokens.TEXT_PRIMARY),
                    ft.Text(word.meaning, size=13, color=DesignTokens.TEXT_SECONDARY, expand=True),
                    ft.IconButton(
                        icon=ft.Icons.CLOSE,
                        icon_size=16,
                        icon_color=DesignTokens.TEXT_MUTED,
                        tooltip="Remove",
                        on_click=lambda _, i=index: self._on_remove_word(i),
                    ),
                ],
                spacing=12,
            ),
            padding=ft.Padding.symmetric(horizontal=10, vertical=4),
            border_radius=DesignTokens.RADIUS_SM,
            bgcolor=DesignTokens.BG_SURFACE,
        )
    
    def render(self) -> None:
        """Re-render image, word list and button states from AppState."""
        state = self.controller.state
        
        has_image = state.image is not None
        self._drop_zone.visible = not has_image
        self._preview.visible = has_image
        if has_image:
            self._preview_image.src = state.image.path
            self._preview_name.value = state.image.name
        
        self._words_view.controls = [self._word_row(i, w) for i, w in enumerate(state.words)]
        self._words_count.value = f"{len(state.words)} words" if state.words else "No cards yet"
        
        self._parse_button.disabled = not has_image or state.parsing
        self._create_button.disabled = not state.words or state.publishing
        set_button_label(self._parse_button, "..." if state.parsing else "Parse")
        set_button_label(self._create_button, "..." if state.publishing else "Create Deck")
        self.page.update()
    
    # =========================================================================
    # EVENTS
    # =========================================================================
    
    def _on_pick_click(self, e: ft.ControlEvent) -> None:
        self.page.run_task(self._pick_image_async)
    
    async def _pick_image_async(self) -> None:
        if self._file_picker is None:
            self._file_picker = ft.FilePicker()
        files = await self._file_picker.pick_files(
            dialog_title="Select an image",
            file_type=ft.FilePickerFileType.CUSTOM,
            allowed_extensions=list(Config.IMAGE_EXTENSIONS),
            allow_multiple=False,
        )
        if not files:
            return
        try:
            image = await self.controller.select_image(files[0].path)
        except SnapDeckError as ex:
            self.log.add(str(ex), "error")
            self.page.update()
            return
        if image:
            self.log.add(image.name, "info")
        self.render()
    
    def _on_clear_click(self, e: ft.ControlEvent) -> None:
        self.controller.clear_image()
        self.render()
    
    def _on_remove_word(self, index: int) -> None:
        self.controller.remove_word(index)
        self.render()
    
    def _set_busy(self, button: ft.ElevatedButton) -> None:
        button.disabled = True
        set_button_label(button, "...")
        self.page.update()
    
    def _on_progress_message(self, message: str) -> None:
        self.log.add(message, "progress")
        self.page.update()
    
    def _on_parse_click(self, e: ft.ControlEvent) -> None:
        if self.controller.state.parsing:
            return
        self.page.run_task(self._run_parse)
    
    async def _run_parse(self) -> None:
        self.log.add("parsing...", "info")
        started = time.monotonic()
        self._set_busy(self._parse_button)
        try:
            words = await self.controller.parse_image(self._on_progress_message)
            elapsed = time.monotonic() - started
            if words is None:
                return
            if words:
                self.log.add(f"{len(words)} words ({elapsed:.1f}s)", "success")
            else:
                self.log.add(f"no words ({elapsed:.1f}s)", "warning")
        except Exception as ex:
            self.log.add(str(ex), "error")
        finally:
            self.render()
    
    def _on_deck_progress(self, current: int, total: int) -> None:
        progress = DeckProgress(current, total)
        self._progress_bar.value = progress.fraction
        self._progress_text.value = str(progress)
        self.page.update()
    
    def _on_create_click(self, e: ft.ControlEvent) -> None:
        if self.controller.state.publishing:
            return
        if not self.controller.state.words:
            self.log.add("no words", "error")
            self.page.update()
            return
        self.page.run_task(self._run_create_deck)
    
    async def _run_create_deck(self) -> None:
        self._set_busy(self._create_button)
        try:
            result: Optional[DeckResult] = await self.controller.create_deck(
                self._deck_name_field.value or "", self._on_deck_progress
            )
            if result is None:
                return
            level = "success" if result.cards_created == result.total_words else "warning"
            self.log.add(f"created {result.cards_created}/{result.total_words} in {result.deck_name}", level)
            self._deck_name_field.value = ""
            show_snackbar(self.page, f"Deck '{result.deck_name}' created")
        except Exception as ex:
            self.log.add(str(ex), "error")
        finally:
            self.render()

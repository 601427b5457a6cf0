"""
Quiz View - practice with cards already stored in a Mochi deck.
"""

from typing import Dict, List, Optional

import flet as ft

from ..controller import AppController
from ..errors import SnapDeckError
from ..quiz import QuizDimension, QuizRound, build_fixed_quiz, render_worksheet
from .components import DesignTokens, LogPanel, primary_button, section_card, set_button_label


class QuizView:
    """Fetch a deck, then run a fixed worksheet or the adaptive quiz."""
    
    def __init__(self, page: ft.Page, controller: AppController) -> None:
        self.page = page
        self.controller = controller
        
        self._deck_id_field: Optional[ft.TextField] = None
        self._fetch_button: Optional[ft.ElevatedButton] = None
        self._cards_status: Optional[ft.Text] = None
        self._dimension_boxes: Dict[QuizDimension, ft.Checkbox] = {}
        self._worksheet: Optional[ft.TextField] = None
        self._question_text: Optional[ft.Text] = None
        self._score_text: Optional[ft.Text] = None
        self._feedback_text: Optional[ft.Text] = None
        self._choice_buttons: List[ft.OutlinedButton] = []
        self._round: Optional[QuizRound] = None
        
        self.log = LogPanel(page, "Quiz Log")
        self._container = self._build_view()
    
    @property
    def container(self) -> ft.Container:
        return self._container
    
    def _build_view(self) -> ft.Container:
        self._deck_id_field = ft.TextField(
            label="Deck id",
            hint_text="[[abc123]] or abc123",
            border_color=ft.Colors.WHITE24,
            focused_border_color=ft.Colors.INDIGO_200,
            label_style=ft.TextStyle(color=ft.Colors.WHITE54),
            text_style=ft.TextStyle(color=ft.Colors.WHITE),
            expand=True,
        )
        self._fetch_button = primary_button("Fetch", ft.Icons.DOWNLOAD_ROUNDED, self._on_fetch_click)
        self._cards_status = ft.Text("No cards loaded", size=12, color=DesignTokens.TEXT_TERTIARY)
        
        self._dimension_boxes = {
            dimension: ft.Checkbox(label=dimension.label, value=True)
            for dimension in QuizDimension
        }
        
        deck_section = section_card(
            "Deck",
            ft.Icons.STYLE_OUTLINED,
            [
                ft.Row(controls=[self._deck_id_field, self._fetch_button], spacing=12),
                self._cards_status,
                ft.Row(controls=list(self._dimension_boxes.values()), spacing=16),
            ],
        )
        
        self._worksheet = ft.TextField(
            value="",
            multiline=True,
            read_only=True,
            min_lines=8,
            max_lines=14,
            text_style=ft.TextStyle(color=ft.Colors.WHITE, font_family=DesignTokens.FONT_MONO),
            border_color=ft.Colors.WHITE24,
        )
        fixed_section = section_card(
            "Fixed Quiz",
            ft.Icons.LIST_ALT,
            [
                primary_button("Generate", ft.Icons.SHUFFLE, self._on_fixed_click),
                self._worksheet,
            ],
        )
        
        self._question_text = ft.Text("", size=28, weight=ft.FontWeight.W_700, color=DesignTokens.TEXT_PRIMARY)
        self._score_text = ft.Text("0/0", size=14, color=DesignTokens.ACCENT_PRIMARY)
        self._feedback_text = ft.Text("", size=13)
        self._choice_buttons = [
            ft.OutlinedButton(
                content=ft.Text(""),
                on_click=lambda _, i=i: self._on_choice_click(i),
                visible=False,
            )
            for i in range(6)
        ]
        adaptive_section = section_card(
            "Infinite Quiz",
            ft.Icons.ALL_INCLUSIVE,
            [
                ft.Row(
                    controls=[
                        primary_button("Start", ft.Icons.PLAY_ARROW_ROUNDED, self._on_adaptive_click),
                        ft.Container(expand=True),
                        self._score_text,
                    ],
                ),
                self._question_text,
                ft.Row(controls=self._choice_buttons[:3], spacing=8, wrap=True),
                ft.Row(controls=self._choice_buttons[3:], spacing=8, wrap=True),
                self._feedback_text,
            ],
        )
        
        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Text("Quiz", size=32, weight=ft.FontWeight.W_700, color=DesignTokens.TEXT_PRIMARY),
                    deck_section,
                    ft.Row(
                        controls=[
                            ft.Container(content=fixed_section, expand=1),
                            ft.Container(content=adaptive_section, expand=1),
                        ],
                        spacing=DesignTokens.SPACING_LG,
                        vertical_alignment=ft.CrossAxisAlignment.START,
                    ),
                    ft.Container(content=self.log.container, height=180),
                ],
                spacing=DesignTokens.SPACING_MD,
                scroll=ft.ScrollMode.AUTO,
                expand=True,
            ),
            expand=True,
            padding=DesignTokens.SPACING_LG,
        )
    
    def _selected_dimensions(self) -> List[QuizDimension]:
        return [d for d, box in self._dimension_boxes.items() if box.value]
    
    def _reset_quiz_ui(self) -> None:
        self._round = None
        self._worksheet.value = ""
        self._question_text.value = ""
        self._feedback_text.value = ""
        self._score_text.value = "0/0"
        for button in self._choice_buttons:
            button.visible = False
    
    # -------------------------------------------------------------------------
    # Fetch
    # -------------------------------------------------------------------------
    
    def _on_fetch_click(self, e: ft.ControlEvent) -> None:
        if self.controller.state.fetching:
            return
        self.page.run_task(self._run_fetch)
    
    async def _run_fetch(self) -> None:
        self._fetch_button.disabled = True
        set_button_label(self._fetch_button, "...")
        self.page.update()
        try:
            cards = await self.controller.fetch_deck_cards(self._deck_id_field.value or "")
            if cards is None:
                return
            self._reset_quiz_ui()
            self._cards_status.value = f"{len(cards)} cards loaded"
            self.log.add(f"fetched {len(cards)} cards", "success")
        except Exception as ex:
            self.log.add(str(ex), "error")
        finally:
            self._fetch_button.disabled = False
            set_button_label(self._fetch_button, "Fetch")
            self.page.update()
    
    # -------------------------------------------------------------------------
    # Fixed quiz
    # -------------------------------------------------------------------------
    
    def _on_fixed_click(self, e: ft.ControlEvent) -> None:
        try:
            items = build_fixed_quiz(self.controller.state.cards, self._selected_dimensions())
        except SnapDeckError as ex:
            self.log.add(str(ex), "error")
        else:
            self._worksheet.value = render_worksheet(items) if items else "No cards loaded"
        self.page.update()
    
    # -------------------------------------------------------------------------
    # Adaptive quiz
    # -------------------------------------------------------------------------
    
    def _on_adaptive_click(self, e: ft.ControlEvent) -> None:
        try:
            self.controller.start_adaptive_quiz(self._selected_dimensions())
        except SnapDeckError as ex:
            self.log.add(str(ex), "error")
            self.page.update()
            return
        self._score_text.value = "0/0"
        self._feedback_text.value = ""
        self._next_round()
    
    def _next_round(self) -> None:
        quiz = self.controller.state.quiz
        if quiz is None:
            return
        try:
            self._round = quiz.next_round()
        except SnapDeckError as ex:
            self.log.add(str(ex), "error")
            self.page.update()
            return
        
        self._question_text.value = (
            f"{self._round.question}  →  {self._round.answer_dimension.label}?"
        )
        for button, choice in zip(self._choice_buttons, self._round.choices):
            button.content = ft.Text(choice)
            button.visible = True
            button.disabled = False
        self.page.update()
    
    def _on_choice_click(self, index: int) -> None:
        quiz = self.controller.state.quiz
        if quiz is None or self._round is None:
            return
        current = self._round
        if quiz.answer(index):
            self._feedback_text.value = "Correct!"
            self._feedback_text.color = DesignTokens.ACCENT_SUCCESS
        else:
            self._feedback_text.value = f"Wrong - {current.correct_answer}"
            self._feedback_text.color = DesignTokens.ACCENT_DANGER
        self._score_text.value = quiz.score
        self._next_round()

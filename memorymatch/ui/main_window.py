from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from memorymatch.core.levels import GameMode
from memorymatch.core.progress import ProgressStore
from memorymatch.core.scoring import AchievementCatalog
from memorymatch.core.session import GameSession
from memorymatch.core.state import GameSnapshot, GameState
from memorymatch.ui.colors import GameColors
from memorymatch.ui.models import build_card_views, round_end_message, status_line


class MainWindow(QMainWindow):
    """Menu page with the mode buttons and a board page with the card grid.

    The window never changes game state itself; it forwards clicks to the
    session and repaints from every snapshot the session publishes.
    """

    def __init__(
        self,
        session: GameSession,
        progress_store: ProgressStore,
        catalog: Optional[AchievementCatalog] = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._progress_store = progress_store
        self._catalog = catalog or AchievementCatalog()
        self._card_buttons: List[QPushButton] = []
        self._grid_size = 0
        self._asked_for_name = False

        self._stack: Optional[QStackedWidget] = None
        self._menu_page: Optional[QWidget] = None
        self._board_page: Optional[QWidget] = None
        self._grid_layout: Optional[QGridLayout] = None
        self._status_label: Optional[QLabel] = None
        self._message_label: Optional[QLabel] = None
        self._pause_button: Optional[QPushButton] = None
        self._next_button: Optional[QPushButton] = None
        self._summary_label: Optional[QLabel] = None

        self.setWindowTitle("Memory Match")
        self._build_ui()
        self._unsubscribe = self._session.subscribe(self._render)
        self._render(self._session.snapshot())

    def _build_ui(self) -> None:
        self._stack = QStackedWidget()
        self._stack.setStyleSheet(
            f"background: qlineargradient(x1:0, y1:0, x2:1, y2:1, "
            f"stop:0 {GameColors.BG_TOP}, stop:1 {GameColors.BG_BOTTOM});"
        )

        self._menu_page = QWidget()
        menu_layout = QVBoxLayout(self._menu_page)
        menu_layout.setAlignment(Qt.AlignCenter)
        title = QLabel("Memory Match")
        title.setStyleSheet(f"font-size: 36px; font-weight: bold; color: {GameColors.TEXT_PRIMARY};")
        title.setAlignment(Qt.AlignCenter)
        menu_layout.addWidget(title)
        self._summary_label = QLabel()
        self._summary_label.setAlignment(Qt.AlignCenter)
        self._summary_label.setStyleSheet(f"color: {GameColors.TEXT_MUTED};")
        menu_layout.addWidget(self._summary_label)
        for label, mode in (
            ("Classic", None),
            ("Score Mode", GameMode.SCORE),
            ("Time Mode", GameMode.TIME),
            ("Difficult Mode", GameMode.DIFFICULT),
        ):
            button = QPushButton(label)
            button.setMinimumHeight(44)
            button.clicked.connect(lambda _checked=False, m=mode: self._session.start_new_game(1, m))
            menu_layout.addWidget(button)

        self._board_page = QWidget()
        board_layout = QVBoxLayout(self._board_page)
        self._status_label = QLabel()
        self._status_label.setAlignment(Qt.AlignCenter)
        self._status_label.setStyleSheet(f"font-size: 16px; color: {GameColors.TEXT_PRIMARY};")
        board_layout.addWidget(self._status_label)

        grid_host = QWidget()
        self._grid_layout = QGridLayout(grid_host)
        self._grid_layout.setSpacing(8)
        board_layout.addWidget(grid_host, 1)

        self._message_label = QLabel()
        self._message_label.setAlignment(Qt.AlignCenter)
        self._message_label.setStyleSheet("font-size: 18px; font-weight: bold;")
        board_layout.addWidget(self._message_label)

        controls = QHBoxLayout()
        self._pause_button = QPushButton("Pause")
        self._pause_button.clicked.connect(self._toggle_pause)
        controls.addWidget(self._pause_button)
        self._next_button = QPushButton()
        self._next_button.clicked.connect(self._continue_now)
        controls.addWidget(self._next_button)
        menu_button = QPushButton("Menu")
        menu_button.clicked.connect(self._session.return_to_menu)
        controls.addWidget(menu_button)
        board_layout.addLayout(controls)

        self._stack.addWidget(self._menu_page)
        self._stack.addWidget(self._board_page)
        self.setCentralWidget(self._stack)
        self.resize(520, 680)

    def _rebuild_grid(self, grid_size: int) -> None:
        for button in self._card_buttons:
            self._grid_layout.removeWidget(button)
            button.deleteLater()
        self._card_buttons = []
        for index in range(grid_size * grid_size):
            button = QPushButton()
            button.setMinimumSize(64, 64)
            button.clicked.connect(lambda _checked=False, i=index: self._session.select_card(i))
            self._grid_layout.addWidget(button, index // grid_size, index % grid_size)
            self._card_buttons.append(button)
        self._grid_size = grid_size

    def _render(self, snapshot: GameSnapshot) -> None:
        if snapshot.game_state is GameState.MENU:
            progress = self._progress_store.progress
            unlocked = [a.title for a, done in self._catalog.with_unlocked(progress.achievements) if done]
            self._summary_label.setText(
                f"Games played: {progress.games_played}  ·  Best streak: {progress.best_streak}  ·  "
                f"Achievements: {len(unlocked)}/{len(self._catalog.all())}"
            )
            self._summary_label.setToolTip("\n".join(unlocked))
            self._stack.setCurrentWidget(self._menu_page)
            self._asked_for_name = False
            return

        self._stack.setCurrentWidget(self._board_page)
        if snapshot.level_config.grid_size != self._grid_size or len(self._card_buttons) != len(snapshot.cards):
            self._rebuild_grid(snapshot.level_config.grid_size)

        for view in build_card_views(snapshot):
            button = self._card_buttons[view.index]
            button.setText(view.label)
            button.setEnabled(view.enabled or view.face_up)
            button.setStyleSheet(f"background: {view.color}; border-radius: 10px; font-size: 24px;")

        self._status_label.setText(status_line(snapshot))
        time_low = snapshot.level_config.max_time is not None and snapshot.stats.time_remaining <= 5
        color = GameColors.TIME_WARNING if time_low else GameColors.TEXT_PRIMARY
        self._status_label.setStyleSheet(f"font-size: 16px; color: {color};")

        state = snapshot.game_state
        self._pause_button.setVisible(state in (GameState.PLAYING, GameState.PAUSED))
        self._pause_button.setText("Resume" if state is GameState.PAUSED else "Pause")
        self._next_button.setVisible(state.is_round_over)
        self._next_button.setText("Next Level Now" if state is GameState.WON else "Retry Now")

        if state is GameState.PEEKING:
            self._message_label.setText("Memorize the cards!")
        elif state is GameState.PAUSED:
            self._message_label.setText("Paused")
        elif state.is_round_over:
            outcome_color = GameColors.WIN if state is GameState.WON else GameColors.LOSS
            self._message_label.setStyleSheet(f"font-size: 18px; font-weight: bold; color: {outcome_color};")
            self._message_label.setText(round_end_message(snapshot))
            if snapshot.is_high_score and not self._asked_for_name:
                self._asked_for_name = True
                QTimer.singleShot(0, self._ask_for_name)
        else:
            self._message_label.setStyleSheet("font-size: 18px; font-weight: bold;")
            self._message_label.setText("")
            self._asked_for_name = False

    def _ask_for_name(self) -> None:
        if not self._session.snapshot().is_high_score:
            return
        name, ok = QInputDialog.getText(
            self, "New High Score!", "Enter your name:", text=self._progress_store.last_player_name()
        )
        if ok:
            self._session.record_high_score(name)
        else:
            self._session.skip_high_score()

    def _toggle_pause(self) -> None:
        if self._session.state is GameState.PAUSED:
            self._session.resume()
        else:
            self._session.pause()

    def _continue_now(self) -> None:
        if self._session.state is GameState.WON:
            self._session.advance_to_next_level()
        elif self._session.state is GameState.LOST:
            self._session.restart_current_level()

    def closeEvent(self, event: QCloseEvent) -> None:
        self._unsubscribe()
        self._session.return_to_menu()
        self._progress_store.save()
        super().closeEvent(event)

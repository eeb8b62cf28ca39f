from __future__ import annotations

import logging
from typing import Dict, List, Optional

from rich.markup import escape
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.timer import Timer
from textual.widgets import DataTable, Footer, Header, Input, Static

from localcli.command_builder import ACTION_DB, ACTION_SHELL, ACTION_WP
from localcli.errors import LocalCliError
from localcli.runner import run_action
from localcli.sites import Site, load_sites
from localcli.ssh_entry import find_script, get_ssh_entry_dir

LOG = logging.getLogger(__name__)


class SiteTable(DataTable):
    """Site list; Enter (row selection) opens a shell."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.cursor_type = "row"
        self.zebra_stripes = True


class HelpScreen(ModalScreen[None]):
    """Modal overlay listing keyboard shortcuts."""

    def compose(self) -> ComposeResult:
        lines = [
            "[b]Local sites[/b]",
            "",
            "Navigation:",
            "  ↑/↓          Move selection",
            "  PgUp/PgDn    Scroll a page",
            "",
            "Actions:",
            "  Enter / s    Open the site shell",
            "  d            Open the MySQL console",
            "  w            Open WP-CLI",
            "  r / F5       Reload sites.json",
            "  /            Focus the filter",
            "  Esc          Return focus to the list",
            "  q or Ctrl+C  Quit",
            "",
            "Press Esc, q, or ? to close this help.",
        ]
        yield Static("\n".join(lines), id="help-panel")

    def on_key(self, event: events.Key) -> None:
        if event.key in {"escape", "q", "question_mark"}:
            event.stop()
            self.dismiss()


class DetailsPanel(Static):
    """Shows information about the selected site."""

    def show_empty(self, message: str = "Select a site to see details.") -> None:
        self.update(message)

    def show_site(self, site: Optional[Site]) -> None:
        if not site:
            self.show_empty()
            return

        lines = [
            f"[b]Name[/b]      {escape(site.name or '(unnamed)')}",
            f"[b]ID[/b]        {escape(site.id)}",
            f"[b]Domain[/b]    {escape(site.domain or 'no domain')}",
            f"[b]Path[/b]      {escape(site.path or '-')}",
        ]
        if site.has_database:
            lines.append(f"[b]Database[/b]  {escape(site.mysql.database)} (user: {escape(site.mysql.user or '-')})")
        else:
            lines.append("[b]Database[/b]  not configured")
        if site.services:
            lines.append(f"[b]Services ({len(site.services)})[/b]")
            for key in sorted(site.services):
                lines.append(f"  • {escape(site.services[key].describe())}")

        self.update("\n".join(lines))


class StatusBar(Static):
    """Single-line status indicator."""

    def set_message(self, message: str, *, error: bool = False) -> None:
        self.set_class(error, "error")
        self.update(escape(message or ""))


class LocalSitesApp(App[None]):
    """Textual-based interface for browsing Local sites and opening their shells."""

    TITLE = "Local sites"
    CSS = """
    Screen {
        layout: vertical;
    }

    HelpScreen {
        align: center middle;
    }

    #body {
        height: 1fr;
        padding: 1 2;
    }

    #list-panel, #details-panel {
        height: 1fr;
    }

    #details-panel {
        border: round $secondary;
        padding: 1;
        margin-left: 2;
    }

    #details {
        height: 1fr;
        overflow-y: auto;
    }

    #site-table {
        height: 1fr;
    }

    #status {
        height: 3;
        content-align: left middle;
        padding: 0 1;
        background: $boost;
    }

    #status.error {
        background: $error;
        color: $text;
    }

    .panel-title {
        text-style: bold;
        padding-bottom: 1;
    }

    #filter {
        margin-bottom: 1;
    }

    #help-panel {
        width: 70%;
        background: $surface;
        border: round $secondary;
        padding: 2;
        content-align: left top;
    }
    """

    BINDINGS = [
        Binding("q", "quit_app", "Quit"),
        Binding("ctrl+c", "quit_app", "Quit", show=False),
        Binding("s", "open_shell", "Shell"),
        Binding("d", "open_db", "Database"),
        Binding("w", "open_wp", "WP-CLI"),
        Binding("r", "reload", "Reload"),
        Binding("f5", "reload", "Reload", show=False),
        Binding("slash", "focus_filter", "Filter"),
        Binding("escape", "focus_list", "Focus list", show=False),
        Binding("question_mark", "show_help", "Help"),
    ]

    def __init__(self, config_dir: str, *, shell: str = "bash", **kwargs):
        super().__init__(**kwargs)
        self.config_dir = config_dir
        self.shell = shell

        self.sites: List[Site] = []
        self.filtered_sites: List[Site] = []
        self.row_map: Dict[str, Site] = {}
        self.filter_text = ""
        self._selected_row_key: Optional[str] = None
        self._last_selection_id: Optional[str] = None
        self._status_timer: Optional[Timer] = None

    # --------------------------------------------------------------------- UI
    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="body"):
            with Vertical(id="list-panel"):
                yield Static("Sites", classes="panel-title")
                yield Input(placeholder="Filter sites…", id="filter")
                table = SiteTable(id="site-table")
                table.add_columns("Name", "Domain", "ID")
                yield table
            with Vertical(id="details-panel"):
                yield Static("Details", classes="panel-title")
                yield DetailsPanel(id="details")
        yield Footer()
        yield StatusBar(id="status")

    def on_mount(self) -> None:
        self.status_bar = self.query_one(StatusBar)
        self.details_panel = self.query_one(DetailsPanel)
        self.filter_input = self.query_one("#filter", Input)
        self.site_table = self.query_one(SiteTable)
        self.site_table.focus()
        self.details_panel.show_empty()
        self._load_sites(initial=True)

    # ---------------------------------------------------------------- bindings
    def action_quit_app(self) -> None:
        self.exit()

    def action_reload(self) -> None:
        self._load_sites(initial=False)

    def action_open_shell(self) -> None:
        self.launch(ACTION_SHELL)

    def action_open_db(self) -> None:
        self.launch(ACTION_DB)

    def action_open_wp(self) -> None:
        self.launch(ACTION_WP)

    def action_focus_filter(self) -> None:
        self.filter_input.focus()
        self.filter_input.cursor_position = len(self.filter_input.value)

    def action_focus_list(self) -> None:
        self.site_table.focus()

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())

    # ----------------------------------------------------------------- events
    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input is self.filter_input:
            self.filter_text = event.value
            self.apply_filter()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input is self.filter_input:
            self.site_table.focus()

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.data_table is not self.site_table:
            return
        key = event.row_key.value
        site = self.row_map.get(key)
        if site:
            self._selected_row_key = key
            self._last_selection_id = site.id
            self.details_panel.show_site(site)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.data_table is not self.site_table:
            return
        event.stop()
        self.launch(ACTION_SHELL)

    # ----------------------------------------------------------------- launch
    def launch(self, action: str) -> None:
        site = self.get_selected_site()
        if not site:
            self.set_status("No site selected", error=True)
            return

        try:
            script_path = find_script(get_ssh_entry_dir(self.config_dir), site)
        except LocalCliError as exc:
            self.set_status(f"Error finding shell script: {exc}", error=True, persist=True)
            return

        rc: Optional[int] = None
        error: Optional[str] = None
        with self.suspend():
            try:
                rc = run_action(script_path, site, action, shell=self.shell)
            except LocalCliError as exc:
                error = str(exc)
                print(error)

        if error is not None:
            self.set_status(error, error=True, persist=True)
        elif rc == 0:
            self.set_status(f"{action} session for {site.name} ended")
        else:
            self.set_status(f"{action} exited with code {rc}", error=True)

    # ----------------------------------------------------------------- data ops
    def _load_sites(self, *, initial: bool) -> None:
        self.set_status("Loading sites…")
        try:
            sites = load_sites(self.config_dir)
        except LocalCliError as exc:
            LOG.debug("Failed to load sites", exc_info=True)
            self.sites = []
            self.apply_filter(preserve_selection=False)
            self.set_status(f"Error reading sites.json: {exc}", error=True, persist=True)
            return

        self.sites = sites
        self.apply_filter(preserve_selection=not initial)
        self.set_status(f"Loaded {len(sites)} site(s)")

    def apply_filter(self, *, preserve_selection: bool = True) -> None:
        table = self.site_table
        needle = (self.filter_text or "").strip().lower()
        filtered = [site for site in self.sites if not needle or self._matches(site, needle)]

        self.filtered_sites = filtered
        table.clear(columns=False)
        self.row_map.clear()

        target_id = self._last_selection_id if preserve_selection else None
        selected_index = 0

        for idx, site in enumerate(filtered):
            row_key = f"row-{idx}"
            table.add_row(site.name or "(unnamed)", site.domain or "no domain", site.id, key=row_key)
            self.row_map[row_key] = site
            if target_id and site.id == target_id:
                selected_index = idx

        if filtered:
            row_key = f"row-{selected_index}"
            table.move_cursor(row=selected_index)
            self._selected_row_key = row_key
            site = self.row_map[row_key]
            self._last_selection_id = site.id
            self.details_panel.show_site(site)
        else:
            message = "No matches for current filter" if needle else "No sites found."
            self.details_panel.show_empty(message)
            self._selected_row_key = None

    def get_selected_site(self) -> Optional[Site]:
        if not self._selected_row_key:
            return None
        return self.row_map.get(self._selected_row_key)

    @staticmethod
    def _matches(site: Site, needle: str) -> bool:
        for value in (site.name, site.domain, site.id, site.path):
            if value and needle in value.lower():
                return True
        return False

    # ----------------------------------------------------------------- status
    def set_status(self, message: str, *, error: bool = False, persist: bool = False) -> None:
        if not hasattr(self, "status_bar"):
            return
        if self._status_timer:
            self._status_timer.stop()
            self._status_timer = None
        self.status_bar.set_message(message, error=error)
        if not persist:
            self._status_timer = self.set_timer(6, self._clear_status, name="status-clear")

    def _clear_status(self) -> None:
        self.status_bar.set_message("")
        self._status_timer = None


def run_tui(config_dir: str, *, shell: str = "bash") -> int:
    app = LocalSitesApp(config_dir, shell=shell)
    try:
        app.run()
    except KeyboardInterrupt:
        pass
    return 0


__all__ = ["LocalSitesApp", "run_tui"]

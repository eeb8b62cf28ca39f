from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from localcli.sites import Site, format_site_list

PromptFunc = Callable[[str], str]
PrintFunc = Callable[[str], None]


class SitePicker:
    """
    Numbered-list site chooser used when no site is named on the command line.

    The picker interacts through ``input_func``/``print_func`` so it can run both
    interactively and under tests.
    """

    def __init__(
        self,
        sites: Sequence[Site],
        *,
        input_func: PromptFunc = input,
        print_func: PrintFunc = print,
    ):
        self.sites: List[Site] = list(sites)
        self.input = input_func
        self.print = print_func

    def run(self) -> Optional[Site]:
        """Show the list and return the chosen site, or ``None`` if the user bailed out."""
        for line in format_site_list(self.sites):
            self.print(line)

        try:
            resp = self.input("\nSelect site number: ")
        except (EOFError, KeyboardInterrupt):
            self.print("")
            return None

        selection = self._parse(resp)
        if selection is None:
            self.print("Invalid selection.")
            return None
        return self.sites[selection - 1]

    def _parse(self, resp: Optional[str]) -> Optional[int]:
        text = (resp or "").strip()
        try:
            value = int(text)
        except ValueError:
            return None
        if 1 <= value <= len(self.sites):
            return value
        return None

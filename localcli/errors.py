"""Exceptions raised by the local-cli library modules."""


class LocalCliError(Exception):
    """Base class for errors reported to the user by ``local-cli``."""


class SitesFileError(LocalCliError):
    """``sites.json`` is missing, unreadable or malformed."""


class ScriptNotFoundError(LocalCliError):
    """No SSH-entry script could be matched to a site."""


class MissingDatabaseError(LocalCliError):
    """The selected site has no MySQL configuration."""


class RunnerError(LocalCliError):
    """Preparing or launching the patched script failed."""

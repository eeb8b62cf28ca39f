"""
Site records stored in Local's ``sites.json``.

Local keeps one JSON object keyed by site ID. Only the fields local-cli needs
are modelled here; everything else in the file is ignored.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from localcli.errors import SitesFileError

logger = logging.getLogger(__name__)

SITES_FILENAME = "sites.json"


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


@dataclass
class MySQLConfig:
    database: str = ""
    user: str = ""
    password: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "MySQLConfig":
        if not isinstance(data, dict):
            return cls()
        return cls(
            database=_str(data, "database"),
            user=_str(data, "user"),
            password=_str(data, "password"),
        )


@dataclass
class Service:
    name: str = ""
    version: str = ""
    type: str = ""
    ports: Dict[str, List[int]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Service":
        if not isinstance(data, dict):
            return cls()
        ports: Dict[str, List[int]] = {}
        raw_ports = data.get("ports")
        if isinstance(raw_ports, dict):
            for port_name, values in raw_ports.items():
                if isinstance(values, list):
                    ports[str(port_name)] = [v for v in values if isinstance(v, int) and not isinstance(v, bool)]
        return cls(
            name=_str(data, "name"),
            version=_str(data, "version"),
            type=_str(data, "type"),
            ports=ports,
        )

    def describe(self) -> str:
        label = self.name or "?"
        if self.version:
            label += f" {self.version}"
        port_list = [str(port) for values in self.ports.values() for port in values]
        if port_list:
            label += f" (ports: {', '.join(port_list)})"
        return label


@dataclass
class Site:
    id: str = ""
    name: str = ""
    path: str = ""
    domain: str = ""
    mysql: MySQLConfig = field(default_factory=MySQLConfig)
    services: Dict[str, Service] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Site":
        if not isinstance(data, dict):
            return cls()
        services: Dict[str, Service] = {}
        raw_services = data.get("services")
        if isinstance(raw_services, dict):
            for key, value in raw_services.items():
                services[str(key)] = Service.from_dict(value)
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            path=_str(data, "path"),
            domain=_str(data, "domain"),
            mysql=MySQLConfig.from_dict(data.get("mysql")),
            services=services,
        )

    @property
    def path_basename(self) -> str:
        """Last component of the site path, ignoring trailing separators."""
        path = (self.path or "").rstrip("/\\")
        if not path:
            return ""
        return os.path.basename(path.replace("\\", "/"))

    @property
    def has_database(self) -> bool:
        return bool(self.mysql.database)


def get_sites_path(config_dir: str) -> str:
    return os.path.join(config_dir, SITES_FILENAME)


def parse_sites(data: Any) -> List[Site]:
    """Build a sorted list of sites from the decoded ``sites.json`` payload."""
    if not isinstance(data, dict):
        raise SitesFileError("failed to parse sites.json: expected an object keyed by site ID")

    sites: List[Site] = []
    for key, raw in data.items():
        if not isinstance(raw, dict):
            logger.debug("Skipping non-object entry %r in sites.json", key)
            continue
        site = Site.from_dict(raw)
        if not site.id:
            logger.debug("Skipping entry %r without an id", key)
            continue
        sites.append(site)

    sites.sort(key=lambda s: (s.name.lower(), s.id))
    return sites


def load_sites(config_dir: str) -> List[Site]:
    """Read and decode ``sites.json`` from Local's config directory."""
    sites_path = get_sites_path(config_dir)
    try:
        with open(sites_path, "r", encoding="utf-8") as f:
            raw = f.read()
    except OSError as exc:
        raise SitesFileError(f"open {sites_path}: {exc.strerror or exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SitesFileError(f"failed to parse sites.json: {exc}") from exc

    sites = parse_sites(data)
    logger.debug("Loaded %d site(s) from %s", len(sites), sites_path)
    return sites


def find_site(sites: Iterable[Site], query: str) -> Optional[Site]:
    """
    Return the first site matching *query*.

    Each site is checked in order against an exact ID match, an exact name
    match (both case-insensitive) and finally a substring match on the name.
    """
    if not query:
        return None
    needle = query.lower()
    for site in sites:
        if site.id.lower() == needle:
            return site
        if site.name.lower() == needle:
            return site
        if needle in site.name.lower():
            return site
    return None


def format_site_list(sites: Iterable[Site]) -> List[str]:
    lines = ["--- Local Sites ---"]
    for idx, site in enumerate(sites, start=1):
        domain = site.domain or "no domain"
        lines.append(f"{idx}. {site.name:<30} {domain:<20} (ID: {site.id})")
    return lines


__all__ = [
    "MySQLConfig",
    "Service",
    "Site",
    "find_site",
    "format_site_list",
    "get_sites_path",
    "load_sites",
    "parse_sites",
]

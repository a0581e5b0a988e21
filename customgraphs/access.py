"""Group membership and privilege resolution.

Privileges are two-letter ACL codes.  A privilege requirement such as ``"IR"``
or ``"AR,IR"`` is parsed into a set of :class:`Privilege` members, and a user
may access a group when their profile in that group grants every required
code.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Mapping, Protocol

from customgraphs.catalog.model import ALL_GROUP

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r"[\s,|]+")


class Privilege(str, Enum):
    """ACL codes a group profile may grant."""

    AGENT_READ = "AR"
    AGENT_WRITE = "AW"
    AGENT_MANAGEMENT = "AM"
    INCIDENT_READ = "IR"
    INCIDENT_WRITE = "IW"
    INCIDENT_MANAGEMENT = "IM"
    ALERT_WRITE = "LW"
    ALERT_MANAGEMENT = "LM"
    USER_MANAGEMENT = "UM"
    DATABASE_MANAGEMENT = "DM"
    SYSTEM_MANAGEMENT = "PM"
    REPORT_READ = "RR"
    REPORT_WRITE = "RW"
    REPORT_MANAGEMENT = "RM"


def parse_privileges(value: str | Iterable[str]) -> frozenset[Privilege]:
    """Parse a privilege requirement into a set of :class:`Privilege` codes.

    Accepts ``"IR"``, concatenated codes (``"ARIR"``), separated codes
    (``"AR,IR"``, ``"AR IR"``) or an iterable of codes.
    """

    if isinstance(value, str):
        tokens: list[str] = []
        for chunk in _TOKEN_SPLIT.split(value.strip().upper()):
            if len(chunk) % 2:
                raise ValueError(f"Malformed privilege string: {value!r}")
            tokens.extend(chunk[index : index + 2] for index in range(0, len(chunk), 2))
    else:
        tokens = [str(item).strip().upper() for item in value]

    if not tokens:
        raise ValueError("At least one privilege is required")
    try:
        return frozenset(Privilege(token) for token in tokens)
    except ValueError as exc:
        raise ValueError(f"Unknown privilege in {value!r}") from exc


@dataclass(frozen=True)
class GroupMembership:
    """What a user holds in one group."""

    group_id: int
    name: str
    privileges: frozenset[Privilege] = frozenset()


class GroupResolver(Protocol):
    """Resolve the groups a user may see for a privilege requirement."""

    def resolve_accessible_groups(
        self, user_id: str, privileges: str, include_all_group: bool
    ) -> Mapping[int, GroupMembership]:
        ...


@dataclass
class StaticGroupResolver:
    """In-memory ACL table.

    ``memberships`` maps a user id to ``{group_id: privilege string}``.
    ``groups`` carries display names; ``admins`` see every known group with
    every privilege.
    """

    memberships: Dict[str, Dict[int, str]] = field(default_factory=dict)
    groups: Dict[int, str] = field(default_factory=dict)
    admins: set[str] = field(default_factory=set)

    def grant(self, user_id: str, group_id: int, privileges: str) -> None:
        """Grant ``privileges`` to ``user_id`` inside ``group_id``."""

        parse_privileges(privileges)
        self.memberships.setdefault(user_id, {})[group_id] = privileges
        self.groups.setdefault(group_id, f"Group {group_id}")

    def resolve_accessible_groups(
        self, user_id: str, privileges: str, include_all_group: bool
    ) -> Dict[int, GroupMembership]:
        required = parse_privileges(privileges)
        accessible: Dict[int, GroupMembership] = {}

        if user_id in self.admins:
            granted = frozenset(Privilege)
            candidates = {group_id: granted for group_id in self.groups if group_id != ALL_GROUP}
        else:
            candidates = {
                group_id: parse_privileges(codes)
                for group_id, codes in self.memberships.get(user_id, {}).items()
                if group_id != ALL_GROUP
            }

        for group_id in sorted(candidates):
            granted = candidates[group_id]
            if required <= granted:
                name = self.groups.get(group_id, f"Group {group_id}")
                accessible[group_id] = GroupMembership(group_id=group_id, name=name, privileges=granted)

        if include_all_group and accessible:
            all_privileges = frozenset().union(*(entry.privileges for entry in accessible.values()))
            accessible = {
                ALL_GROUP: GroupMembership(group_id=ALL_GROUP, name="All", privileges=all_privileges),
                **accessible,
            }

        logger.debug(
            "User %s resolved %d accessible groups for %s", user_id, len(accessible), privileges
        )
        return accessible

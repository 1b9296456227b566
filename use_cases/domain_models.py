from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

ContinuityOutcome = Literal["merge-anonymous", "resume-existing", "create-fresh"]


@dataclass(frozen=True)
class Project:
    """Project as returned by the project service. The core only reads `id`."""
    id: str
    name: str
    messages: List[Any] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "messages": self.messages,
            "data": self.data,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        def _ts(value):
            return datetime.fromisoformat(value) if value else None

        return cls(
            id=data["id"],
            name=data.get("name", ""),
            messages=data.get("messages") or [],
            data=data.get("data") or {},
            created_at=_ts(data.get("createdAt")),
            updated_at=_ts(data.get("updatedAt")),
        )


@dataclass(frozen=True)
class ProjectCreateInput:
    name: str
    messages: List[Any] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AnonWorkSnapshot:
    """Work captured before authentication."""
    messages: List[Any] = field(default_factory=list)
    file_system_data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NavigationTarget:
    project_id: str


def has_anon_work(snapshot: Optional[AnonWorkSnapshot]) -> bool:
    # File-system state alone never counts as work worth keeping.
    return snapshot is not None and len(snapshot.messages) > 0

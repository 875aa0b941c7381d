"""Student record shared by storage, enrollment and matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional


@dataclass
class Student:
    id: str
    name: str = ""
    email: str = ""
    class_name: str = ""
    enrolled: bool = False
    descriptor: Optional[List[float]] = None
    enrollment_date: date = field(default_factory=date.today)
    photo_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON document in the wire format used by ``GET /api/student/all``."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "class": self.class_name,
            "enrolled": bool(self.enrolled),
            "descriptor": list(self.descriptor) if self.descriptor is not None else None,
            "enrollmentDate": self.enrollment_date.isoformat(),
            "photoPath": self.photo_path,
        }


__all__ = ["Student"]

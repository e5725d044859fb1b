"""Core data models shared by the search job engine, its API and its clients."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_active(self) -> bool:
        return self in (JobStatus.PENDING, JobStatus.RUNNING)

    @property
    def is_final(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass(frozen=True, slots=True)
class Place:
    """Normalized snapshot of a business returned by the places provider."""

    name: str
    address: str = ""
    phone: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    category: Optional[str] = None
    website: Optional[str] = None
    external_id: Optional[str] = None
    position: int = 0

    def with_position(self, position: int) -> "Place":
        return replace(self, position=position)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "rating": self.rating,
            "reviewCount": self.review_count,
            "category": self.category,
            "website": self.website,
            "externalId": self.external_id,
            "position": self.position,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Place":
        return cls(
            name=data.get("name") or "",
            address=data.get("address") or "",
            phone=data.get("phone"),
            rating=data.get("rating"),
            review_count=data.get("reviewCount"),
            category=data.get("category"),
            website=data.get("website"),
            external_id=data.get("externalId"),
            position=int(data.get("position") or 0),
        )


@dataclass(slots=True)
class Progress:
    """Snapshot of how far a running job has got."""

    current_city: Optional[str] = None
    city_index: int = 0
    total_cities: int = 0
    current_result_count: int = 0
    target_result_count: int = 0
    percentage: int = 0
    location_type: Optional[str] = None
    pairs_searched: int = 0
    failed_pairs: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentCity": self.current_city,
            "cityIndex": self.city_index,
            "totalCities": self.total_cities,
            "currentResultCount": self.current_result_count,
            "targetResultCount": self.target_result_count,
            "percentage": self.percentage,
            "locationType": self.location_type,
            "pairsSearched": self.pairs_searched,
            "failedPairs": self.failed_pairs,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Progress":
        data = data or {}
        return cls(
            current_city=data.get("currentCity"),
            city_index=int(data.get("cityIndex") or 0),
            total_cities=int(data.get("totalCities") or 0),
            current_result_count=int(data.get("currentResultCount") or 0),
            target_result_count=int(data.get("targetResultCount") or 0),
            percentage=int(data.get("percentage") or 0),
            location_type=data.get("locationType"),
            pairs_searched=int(data.get("pairsSearched") or 0),
            failed_pairs=int(data.get("failedPairs") or 0),
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(slots=True)
class SearchJob:
    """One user-initiated geographic search and its execution record."""

    owner: str
    query: str
    result_cap: int
    location_scope: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: JobStatus = JobStatus.PENDING
    progress: Progress = field(default_factory=Progress)
    results: List[Place] = field(default_factory=list)
    total_found: int = 0
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "query": self.query,
            "locationScope": self.location_scope,
            "resultCap": self.result_cap,
            "status": self.status.value,
            "progress": self.progress.to_dict(),
            "results": [place.to_dict() for place in self.results],
            "totalFound": self.total_found,
            "errorMessage": self.error_message,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchJob":
        return cls(
            id=str(data["id"]),
            owner=data.get("owner") or "",
            query=data.get("query") or "",
            location_scope=data.get("locationScope"),
            result_cap=int(data.get("resultCap") or 0),
            status=JobStatus(data.get("status") or JobStatus.PENDING.value),
            progress=Progress.from_dict(data.get("progress")),
            results=[Place.from_dict(item) for item in data.get("results") or []],
            total_found=int(data.get("totalFound") or 0),
            error_message=data.get("errorMessage"),
            created_at=_parse_timestamp(data.get("createdAt")) or _utcnow(),
            completed_at=_parse_timestamp(data.get("completedAt")),
        )

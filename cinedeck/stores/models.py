from __future__ import annotations

from typing import Any, Literal, TypedDict

Theme = Literal["light", "dark", "cinema", "cinema-dark", "system"]
NotificationKind = Literal["info", "success", "warning", "error"]
Visibility = Literal["public", "friends", "private"]


class NotificationSettings(TypedDict, total=False):
    email: bool
    push: bool
    new_releases: bool
    recommendations: bool
    social: bool


class PrivacySettings(TypedDict, total=False):
    profile_visibility: Visibility
    watchlist_visibility: Visibility
    activity_visibility: Visibility


class UserPreferences(TypedDict, total=False):
    language: str
    country: str
    genres: list[int]
    adult_content: bool
    notifications: NotificationSettings
    privacy: PrivacySettings


class User(TypedDict, total=False):
    id: str
    username: str
    email: str
    avatar: str | None
    preferences: UserPreferences
    watchlist: list[int]
    favorites: list[int]
    ratings: dict[int, float]
    created_at: str  # ISO-8601
    updated_at: str


class IdentityProfile(TypedDict, total=False):
    """What the identity provider hands over on sign-in."""

    id: str
    username: str | None
    first_name: str | None
    email: str | None
    image_url: str | None
    created_at: str | None


class Notification(TypedDict, total=False):
    id: str
    kind: NotificationKind
    title: str
    message: str
    read: bool
    created_at: str
    expires_at: str | None
    action_text: str | None
    action_url: str | None


class CacheEntry(TypedDict):
    data: Any
    timestamp: float  # epoch seconds
    expiry: float


def default_preferences() -> UserPreferences:
    return {
        "language": "en",
        "country": "US",
        "genres": [],
        "adult_content": False,
        "notifications": {
            "email": True,
            "push": True,
            "new_releases": True,
            "recommendations": True,
            "social": True,
        },
        "privacy": {
            "profile_visibility": "public",
            "watchlist_visibility": "public",
            "activity_visibility": "public",
        },
    }

"""Domain enums for Travel Buddy models."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class PersonalityType(str, Enum):
    """Traveller personality used by the compatibility tables."""

    adventurer = "adventurer"
    planner = "planner"
    cultural = "cultural"
    relaxed = "relaxed"
    flexible = "flexible"


class BudgetLevel(str, Enum):
    """
    Travel budget.

    ``low``, ``medium`` and ``high`` are older values still found in profiles;
    the budget range table knows how to relate them to the current ones.
    """

    budget = "budget"
    moderate = "moderate"
    luxury = "luxury"
    comfortable = "comfortable"
    flexible = "flexible"
    low = "low"
    medium = "medium"
    high = "high"


class TravelPace(str, Enum):
    slow = "slow"
    moderate = "moderate"
    fast = "fast"
    flexible = "flexible"


class TravelStyle(str, Enum):
    adventurer = "adventurer"
    culture = "culture"
    relaxation = "relaxation"
    foodie = "foodie"


class Interest(str, Enum):
    nature = "nature"
    culture = "culture"
    food = "food"
    adventure = "adventure"
    history = "history"
    photography = "photography"
    nightlife = "nightlife"
    shopping = "shopping"
    art = "art"
    sports = "sports"
    museums = "museums"
    wellness = "wellness"


class Destination(str, Enum):
    beaches = "beaches"
    mountains = "mountains"
    cities = "cities"
    countryside = "countryside"
    deserts = "deserts"
    historical = "historical"
    festivals = "festivals"
    remote = "remote"
    europe = "europe"
    asia = "asia"
    americas = "americas"
    africa = "africa"
    oceania = "oceania"


class SwipeAction(str, Enum):
    like = "like"
    reject = "reject"


class MatchStatus(str, Enum):
    """Lifecycle of a match between two users."""

    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    expired = "expired"


class MatchType(str, Enum):
    mutual = "mutual"
    suggested = "suggested"
    proximity = "proximity"


class NotificationStatus(str, Enum):
    pending = "pending"
    sent = "sent"
    read = "read"


class MessageType(str, Enum):
    text = "text"
    image = "image"
    location = "location"
    system = "system"


class GroupType(str, Enum):
    travel = "travel"
    chat = "chat"
    event = "event"


class GroupRole(str, Enum):
    admin = "admin"
    moderator = "moderator"
    member = "member"


class MemberStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    banned = "banned"


class JoinRequestStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class GroupBudget(str, Enum):
    budget = "budget"
    moderate = "moderate"
    luxury = "luxury"


class TripStatus(str, Enum):
    planning = "planning"
    ongoing = "ongoing"
    completed = "completed"
    cancelled = "cancelled"


class JournalCategory(str, Enum):
    adventure = "adventure"
    culture = "culture"
    food = "food"
    nature = "nature"
    city = "city"
    beach = "beach"
    mountains = "mountains"
    road_trip = "road-trip"
    other = "other"


class Mood(str, Enum):
    excited = "excited"
    happy = "happy"
    relaxed = "relaxed"
    tired = "tired"
    challenging = "challenging"


class Weather(str, Enum):
    sunny = "sunny"
    cloudy = "cloudy"
    rainy = "rainy"
    snowy = "snowy"
    stormy = "stormy"


class ExpenseCategory(str, Enum):
    accommodation = "accommodation"
    food = "food"
    transport = "transport"
    activities = "activities"
    shopping = "shopping"
    other = "other"


class MediaType(str, Enum):
    image = "image"
    video = "video"


class JournalPrivacy(str, Enum):
    public = "public"
    friends = "friends"
    private = "private"


class JournalStatus(str, Enum):
    draft = "draft"
    published = "published"


class ListingCategory(str, Enum):
    electronics = "Electronics"
    outdoor_gear = "Outdoor Gear"
    clothing = "Clothing"
    books = "Books"
    accessories = "Accessories"
    other = "Other"


class ListingCondition(str, Enum):
    new = "New"
    like_new = "Like New"
    good = "Good"
    fair = "Fair"
    poor = "Poor"


class ListingStatus(str, Enum):
    active = "active"
    sold = "sold"
    inactive = "inactive"

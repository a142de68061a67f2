"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- auth: Signup, login and password flows
- users: Profiles and preferences
- matches: Swipes, matches, discovery and compatibility
- conversations: Conversations and messages
- groups: Travel groups
- journals: Travel journals
- marketplace: Marketplace listings
"""

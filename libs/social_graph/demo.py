"""
Demo network used by the seeding script and tests.

Ten users connected by fourteen accepted friendships forming one component,
plus three pending requests.
"""

from typing import List, Tuple

from .models import FriendshipStatus, UserProfile
from .repository import SocialRepository

DEMO_USERS = [
    ("alice_johnson", "Alice", "Johnson", "Software engineer passionate about AI and machine learning"),
    ("bob_smith", "Bob", "Smith", "Full-stack developer and tech enthusiast"),
    ("charlie_brown", "Charlie", "Brown", "Data scientist and analytics expert"),
    ("diana_prince", "Diana", "Prince", "UX designer with a passion for user-centered design"),
    ("eve_adams", "Eve", "Adams", "Product manager and startup founder"),
    ("frank_miller", "Frank", "Miller", "DevOps engineer and cloud architecture specialist"),
    ("grace_hopper", "Grace", "Hopper", "Computer scientist and programming pioneer"),
    ("henry_ford", "Henry", "Ford", "Innovation enthusiast and technology leader"),
    ("ivy_chen", "Ivy", "Chen", "Mobile app developer and UI/UX designer"),
    ("jack_wilson", "Jack", "Wilson", "Cybersecurity expert and ethical hacker"),
]

# index pairs into DEMO_USERS
ACCEPTED_PAIRS: List[Tuple[int, int]] = [
    (0, 1), (0, 2), (1, 3), (2, 3), (2, 4),
    (3, 5), (4, 5), (4, 6), (5, 7), (6, 8),
    (7, 8), (8, 9), (1, 9), (0, 6),
]
PENDING_PAIRS: List[Tuple[int, int]] = [(0, 7), (3, 9), (5, 9)]


def demo_users() -> List[UserProfile]:
    return [
        UserProfile(id=username, username=username, first_name=first, last_name=last, bio=bio)
        for username, first, last, bio in DEMO_USERS
    ]


def seed(repository: SocialRepository) -> List[UserProfile]:
    """Insert the demo users and relationships into an empty repository"""
    users = demo_users()
    for profile in users:
        repository.add_user(profile)

    for i, j in ACCEPTED_PAIRS:
        repository.add_relationship(users[i].id, users[j].id, FriendshipStatus.ACCEPTED)
    for i, j in PENDING_PAIRS:
        repository.add_relationship(users[i].id, users[j].id, FriendshipStatus.PENDING)
    return users

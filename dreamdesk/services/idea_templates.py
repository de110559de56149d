"""
Starter business ideas offered by the idea generator.

A suggestion is a ready-to-save BusinessIdeaCreate; nothing is stored until
the user posts it to the ideas collection.
"""

import random
from typing import List

from dreamdesk.models.content import BusinessIdeaCreate

IDEA_TEMPLATES: List[BusinessIdeaCreate] = [
    BusinessIdeaCreate(
        title="AI-Powered Personal Finance Assistant",
        description=(
            "A mobile app that uses AI to analyze spending patterns, predict future expenses, and provide "
            "personalized financial advice. Features automated budgeting, investment recommendations, and "
            "bill payment reminders."
        ),
        category="FinTech",
        target_market="Young professionals aged 25-35",
        feasibility_score=7,
        tags=["AI", "Mobile App", "Personal Finance", "Machine Learning"],
    ),
    BusinessIdeaCreate(
        title="Virtual Interior Design Platform",
        description=(
            "An AR-powered platform where users can visualize furniture and decor in their actual space before "
            "purchasing. Includes 3D room scanning, virtual furniture placement, and direct shopping integration."
        ),
        category="Home & Design",
        target_market="Homeowners and renters",
        feasibility_score=6,
        tags=["AR", "Interior Design", "E-commerce", "3D"],
    ),
    BusinessIdeaCreate(
        title="Sustainable Meal Planning Service",
        description=(
            "A subscription service that creates personalized meal plans based on dietary preferences, local "
            "seasonal ingredients, and sustainability goals. Includes recipe delivery and ingredient sourcing "
            "from local farms."
        ),
        category="Food & Sustainability",
        target_market="Health-conscious consumers",
        feasibility_score=8,
        tags=["Sustainability", "Meal Planning", "Subscription", "Health"],
    ),
    BusinessIdeaCreate(
        title="Remote Team Wellness Platform",
        description=(
            "A comprehensive wellness platform for remote teams featuring virtual yoga sessions, meditation "
            "breaks, team challenges, and mental health resources. Integrates with popular work tools."
        ),
        category="Workplace Wellness",
        target_market="Remote teams and companies",
        feasibility_score=7,
        tags=["Remote Work", "Wellness", "Team Building", "Mental Health"],
    ),
    BusinessIdeaCreate(
        title="Local Skill Exchange Network",
        description=(
            "A neighborhood-based platform where people can exchange skills and services without money. Trade "
            "guitar lessons for web design, cooking for tutoring, etc. Builds community connections."
        ),
        category="Community",
        target_market="Local communities",
        feasibility_score=5,
        tags=["Skill Exchange", "Community", "Bartering", "Local"],
    ),
    BusinessIdeaCreate(
        title="Smart Pet Care IoT System",
        description=(
            "An IoT ecosystem for pet owners including smart feeders, activity trackers, health monitors, and "
            "automated vet appointment scheduling. Provides insights into pet behavior and health."
        ),
        category="Pet Tech",
        target_market="Pet owners",
        feasibility_score=6,
        tags=["IoT", "Pet Care", "Health Monitoring", "Smart Home"],
    ),
]


def suggest_idea() -> BusinessIdeaCreate:
    """A copy of one template picked at random."""
    return random.choice(IDEA_TEMPLATES).model_copy(deep=True)
